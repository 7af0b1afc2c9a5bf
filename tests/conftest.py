"""Test configuration and fixtures for the Space Invaders q-learning agent."""

from pathlib import Path

import matplotlib
import numpy as np
import pytest

matplotlib.use("Agg")

from invaders.config import merge_config
from invaders.constants import ACTIONS, HEIGHT, WIDTH
from invaders.state import StateExtractor, load_template

TEMPLATE_PATH = Path(__file__).resolve().parent.parent / "templates" / "cannon.pgm"
TEMPLATE_WIDTH = 7


class FakeEnvironment:
    """Scripted stand-in for the emulator.

    rewards: one list of per-step rewards per episode, cycled; missing steps give 0.
    lives_lost_at: step indices (within an episode) after which a life is gone.
    """

    def __init__(self, episode_length=10, rewards=None, lives_lost_at=(), lives=3, frame=None):
        self.episode_length = episode_length
        self.rewards = rewards or [[]]
        self.lives_lost_at = set(lives_lost_at)
        self.start_lives = lives
        self.frame = frame if frame is not None else np.zeros((HEIGHT, WIDTH), dtype=np.uint8)
        self.legal_action_count = ACTIONS
        self.actions = []
        self.saved = []
        self.resets = 0
        self.episode = 0
        self.closed = False
        self._restart()

    def _restart(self):
        self.t = 0
        self.lives = self.start_lives

    def reset(self):
        self.resets += 1
        self.episode += 1
        self._restart()
        return self.frame

    def step(self, action):
        self.actions.append(action)
        episode_rewards = self.rewards[self.episode % len(self.rewards)]
        reward = episode_rewards[self.t] if self.t < len(episode_rewards) else 0.0
        if self.t in self.lives_lost_at:
            self.lives -= 1
        self.t += 1
        return float(reward), self.lives, self.t >= self.episode_length

    def get_frame(self):
        return self.frame

    def save_frame(self, path):
        self.saved.append(str(path))

    def close(self):
        self.closed = True


def fixed_matcher(match_x):
    """Matcher that always reports a best match at column `match_x` of the crop."""
    def matcher(image, template):
        return match_x, 0, 1.0
    return matcher


def match_x_for_state(state, crop_x=20):
    """Match column that `StateExtractor.extract` turns into `state`."""
    return state - (TEMPLATE_WIDTH + 1) // 2 - crop_x


def stamp_frame(template, x, y=180):
    """Black frame with the template pasted with its top left corner at (x, y)."""
    frame = np.zeros((HEIGHT, WIDTH), dtype=np.uint8)
    h, w = template.shape
    frame[y:y + h, x:x + w] = template
    return frame


@pytest.fixture
def template():
    return load_template(TEMPLATE_PATH)


@pytest.fixture
def extractor_at(template):
    """Factory for an extractor that always resolves to the given state."""
    def make(state):
        return StateExtractor(template, matcher=fixed_matcher(match_x_for_state(state)))
    return make


@pytest.fixture
def rng():
    return np.random.default_rng(0)


@pytest.fixture
def config():
    """Small, fast configuration: no warm up, no frame skip."""
    return merge_config({
        'episodes': 2,
        'noop': 0,
        'skip': 0,
        'alpha': 0.2,
        'gamma': 0.96,
        'epsilon': 1.0,
        'epsilon_min': 0.1,
        'epsilon_decay': 0.99,
    })
