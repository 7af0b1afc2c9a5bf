"""Tests for the returns csv and the learning curve."""

import csv
import os

from invaders.agent import EpisodeResult
from invaders.recording import ReturnsRecorder


class TestReturnsRecorder:
    def test_writes_one_row_per_episode(self, tmp_path):
        with ReturnsRecorder(str(tmp_path), mode="game", run_stamp="stamp") as recorder:
            recorder.record(EpisodeResult(0, 110.0, 700, 0.5))
            recorder.record(EpisodeResult(1, 35.0, 420, 0.25))

        assert recorder.csv_path.endswith("returns_game_stamp.csv")
        with open(recorder.csv_path, newline="") as f:
            rows = list(csv.reader(f))
        assert rows == [
            ["episode", "return", "steps", "epsilon"],
            ["0", "110.0", "700", "0.5"],
            ["1", "35.0", "420", "0.25"],
        ]
        assert recorder.f_csv.closed

    def test_creates_log_dir(self, tmp_path):
        log_dir = tmp_path / "nested" / "logs"
        recorder = ReturnsRecorder(str(log_dir))
        recorder.close()
        assert log_dir.is_dir()


class TestPlot:
    def test_plot_recorded_returns(self, tmp_path, capsys):
        with ReturnsRecorder(str(tmp_path), run_stamp="stamp") as recorder:
            for episode, score in enumerate([10.0, 20.0, 5.0]):
                recorder.record(EpisodeResult(episode, score, 100, 1.0))

        assert recorder.returns == [10.0, 20.0, 5.0]
        assert recorder.plot() == recorder.plot_path
        assert recorder.plot_path.endswith("return_curve_train_stamp.png")
        assert os.path.getsize(recorder.plot_path) > 0
        assert "Learning curve saved" in capsys.readouterr().out

    def test_plot_nothing(self, tmp_path, capsys):
        with ReturnsRecorder(str(tmp_path), run_stamp="stamp") as recorder:
            pass
        assert recorder.plot() is None
        assert not os.path.exists(recorder.plot_path)
        assert "No episodes" in capsys.readouterr().out
