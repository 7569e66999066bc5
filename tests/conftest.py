import os

os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")

import pygame
import pytest

from newton_pairs.core.model import FrameSize


class FakePacer:
    """Pacer returning a fixed frame time without sleeping."""

    def __init__(self, dt: float = 1 / 60) -> None:
        self.dt = dt
        self.calls = 0

    def wait(self) -> float:
        self.calls += 1
        return self.dt


@pytest.fixture(scope="session", autouse=True)
def pygame_font():
    pygame.font.init()
    yield
    pygame.font.quit()


@pytest.fixture
def fake_pacer():
    return FakePacer()


@pytest.fixture
def frame_size():
    return FrameSize(960, 600)
