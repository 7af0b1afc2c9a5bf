"""
Tabular action values indexed by the cannon x position.

The table has one row per pixel column of the screen (not only the reachable
range between LEFT and RIGHT) and one column per action. It is persisted as a
small csv file:

    cannon_x,0-Noop,1-Fire,2-Right,3-Left,4-RightFire,5-LeftFire
    0,0.0,0.0,0.0,0.0,0.0,0.0
    1,0.0,0.0,0.0,0.0,0.0,0.0
    ...
"""

import csv
import math
import sys
from typing import Optional, Tuple

import numpy as np

from invaders.constants import ACTIONS, CSV_HEADER, WIDTH


def _to_float(value: str) -> float:
    """Parse one csv cell, anything that is not a finite number becomes 0.0"""
    try:
        number = float(value)
    except ValueError:
        return 0.0
    return number if math.isfinite(number) else 0.0


class QTable:
    def __init__(self, values=None, n_states: int = WIDTH, n_actions: int = ACTIONS):
        if values is None:
            values = np.zeros((n_states, n_actions), dtype=np.float64)
        values = np.array(values, dtype=np.float64)
        if values.shape != (n_states, n_actions):
            raise ValueError(
                f"Q-table shape mismatch: expected {(n_states, n_actions)} got {values.shape}"
            )
        self.values = values

    @property
    def n_states(self) -> int:
        return self.values.shape[0]

    @property
    def n_actions(self) -> int:
        return self.values.shape[1]

    def __getitem__(self, state):
        return self.values[state]

    def __eq__(self, other):
        if not isinstance(other, QTable):
            return NotImplemented
        return np.array_equal(self.values, other.values)

    def copy(self) -> "QTable":
        return QTable(self.values.copy(), self.n_states, self.n_actions)

    def best_action(self, state: int) -> Tuple[int, float]:
        """Index and value of the highest scoring action, ties go to the lowest index."""
        row = self.values[state]
        action = int(np.argmax(row))
        return action, float(row[action])

    def update(self, state, action, reward, next_state, alpha, gamma) -> float:
        """One step q-learning update of Q[state, action], returns the new value."""
        _, best_next = self.best_action(next_state)
        self.values[state, action] += alpha * (
            reward + gamma * best_next - self.values[state, action]
        )
        return float(self.values[state, action])

    def save(self, path: str) -> None:
        with open(path, "w", newline="") as f:
            writer = csv.writer(f)
            writer.writerow(CSV_HEADER)
            for state, row in enumerate(self.values):
                writer.writerow([state] + [float(value) for value in row])

    @classmethod
    def load(cls, path: str, n_states: int = WIDTH, n_actions: int = ACTIONS) -> Optional["QTable"]:
        """Read a table written by `save`.

        Returns None when the file cannot be read or does not hold exactly one row of
        `n_actions` values per state. Cells that are not numbers are read as 0.0.
        """
        rows = []
        try:
            with open(path, "r", newline="") as f:
                reader = csv.reader(f)
                next(reader, None)  # header
                for line in reader:
                    if not line:
                        continue
                    # first field is the state index, rows are stored in order
                    rows.append([_to_float(value) for value in line[1:]])
        except (OSError, UnicodeDecodeError, csv.Error) as e:
            print(f"Unable to open: {path} ({e})", file=sys.stderr)
            return None

        if len(rows) != n_states or any(len(row) != n_actions for row in rows):
            print(
                f"Ignoring q-table {path}: expected {n_states} rows of {n_actions} actions",
                file=sys.stderr,
            )
            return None

        return cls(rows, n_states, n_actions)
