"""Interactive simulations of Newton's third law force pairs."""

__version__ = "1.0.0"
