"""Per run csv of episode returns and the learning curve plot."""

import csv
import os
from datetime import datetime

import matplotlib.pyplot as plt
import numpy as np


class ReturnsRecorder:
    """Append one row per finished episode to logs/returns_{mode}_{run_stamp}.csv"""

    def __init__(self, log_dir="logs", mode="train", run_stamp=None):
        self.mode = mode
        self.run_stamp = run_stamp or datetime.now().strftime("%Y-%m-%d_%H-%M-%S")
        os.makedirs(log_dir, exist_ok=True)
        self.csv_path = os.path.join(log_dir, f"returns_{mode}_{self.run_stamp}.csv")
        self.plot_path = os.path.join(log_dir, f"return_curve_{mode}_{self.run_stamp}.png")
        self.returns = []

        self.f_csv = open(self.csv_path, "w", newline="")
        self.writer = csv.writer(self.f_csv)
        self.writer.writerow(["episode", "return", "steps", "epsilon"])

    def record(self, result):
        self.returns.append(result.total_reward)
        self.writer.writerow([result.episode, result.total_reward, result.steps, result.epsilon])
        self.f_csv.flush()

    def plot(self, window=50):
        """Save the recorded returns and their moving average to plot_path."""
        if not self.returns:
            print(f"No episodes to plot, skipping {self.plot_path}")
            return None

        scores = np.asarray(self.returns, dtype=float)
        width = max(1, min(window, len(scores)))
        smoothed = np.convolve(scores, np.ones(width) / width, mode="same")

        fig, ax = plt.subplots(figsize=(8, 4))
        ax.plot(scores, alpha=0.3, label="Episode score")
        ax.plot(smoothed, label=f"Mean over {width} episodes")
        ax.set_xlabel("Episode")
        ax.set_ylabel("Score")
        ax.set_title(f"Space Invaders ({self.mode})")
        ax.legend()
        fig.tight_layout()
        fig.savefig(self.plot_path)
        plt.close(fig)
        print(f"Learning curve saved to: {self.plot_path}")
        return self.plot_path

    def close(self):
        self.f_csv.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.close()
