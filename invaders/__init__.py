"""Tabular q-learning agent for Space Invaders on the cannon x position."""

__version__ = "0.1.0"

from invaders.q_table import QTable
from invaders.policy import ExplorationState, select_action
from invaders.state import StateExtractor, load_template, match_template
from invaders.agent import EpisodeResult, RunSummary, nudge_state, run_episode, run_episodes

__all__ = [
    "QTable",
    "ExplorationState",
    "select_action",
    "StateExtractor",
    "load_template",
    "match_template",
    "EpisodeResult",
    "RunSummary",
    "nudge_state",
    "run_episode",
    "run_episodes",
]
