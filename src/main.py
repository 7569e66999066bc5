# src/main.py
"""
Newton Pairs - Action and Reaction
==================================

Launches the interactive force-pair simulator from a source checkout:

    python src/main.py --example gravity --explore
"""

from newton_pairs.app import main


if __name__ == "__main__":
    main()
