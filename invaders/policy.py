"""Epsilon-greedy action selection over the q-table."""

from dataclasses import dataclass, replace

import numpy as np

from invaders.q_table import QTable


@dataclass(frozen=True)
class ExplorationState:
    """Current exploration rate together with its schedule.

    The random draw compared against `epsilon` is taken from [0, epsilon_start), so
    it keeps the range it had at the start of the run while epsilon decays.
    """

    epsilon: float
    epsilon_start: float
    epsilon_min: float
    epsilon_decay: float

    @classmethod
    def from_config(cls, config) -> "ExplorationState":
        return cls(
            epsilon=float(config['epsilon']),
            epsilon_start=float(config['epsilon']),
            epsilon_min=float(config['epsilon_min']),
            epsilon_decay=float(config['epsilon_decay']),
        )

    def decay(self) -> "ExplorationState":
        """Multiplicative decay towards epsilon_min, applied after every training step."""
        return replace(self, epsilon=max(self.epsilon_min, self.epsilon * self.epsilon_decay))

    def explore(self, rng: np.random.Generator) -> bool:
        return rng.uniform(0.0, self.epsilon_start) < self.epsilon


def select_action(
    state: int,
    table: QTable,
    exploration: ExplorationState,
    training: bool,
    rng: np.random.Generator,
) -> int:
    """Pick the greedy action, or a uniformly random one.

    A row whose best entry is a zero at index 0 is taken to be a state that was
    never visited, so it is explored even outside of training.
    """
    action, value = table.best_action(state)

    if (action == 0 and value == 0) or (training and exploration.explore(rng)):
        action = int(rng.integers(table.n_actions))

    return action
