"""
Q-learning loop for Space Invaders on the cannon x position.

One episode goes through three phases:
    1. no-op warm up (training only) so the game settles,
    2. stepping until the emulator reports game over,
    3. reporting, optional screenshot and a reset for the next episode.
"""

import os
import time
from dataclasses import dataclass, field
from typing import List, Optional

import numpy as np
from tqdm import tqdm

from invaders.constants import LEFT, LEFT_ACTIONS, NOOP, RIGHT, RIGHT_ACTIONS
from invaders.policy import ExplorationState, select_action


@dataclass
class EpisodeResult:
    episode: int
    total_reward: float
    steps: int
    epsilon: float


@dataclass
class RunSummary:
    best_episode: int
    best_score: Optional[float]
    elapsed: float
    exploration: ExplorationState
    results: List[EpisodeResult] = field(default_factory=list)

    @property
    def returns(self) -> List[float]:
        return [result.total_reward for result in self.results]


def nudge_state(state: int, action: int, left: int = LEFT, right: int = RIGHT) -> int:
    """Guess the next cannon position from the action instead of measuring it.

    Right moving actions go one pixel right, left moving actions one pixel left,
    and the two edge positions always step back inside.
    """
    if state <= left:
        return state + 1
    if state >= right:
        return state - 1
    if action in RIGHT_ACTIONS:
        return state + 1
    if action in LEFT_ACTIONS:
        return state - 1
    return state


def run_episode(
    env,
    extractor,
    table,
    exploration: ExplorationState,
    rng: np.random.Generator,
    config,
    training: bool = True,
    episode: int = 0,
    png_dir: Optional[str] = None,
):
    """Play one game, returns (EpisodeResult, exploration state after the game).

    In training mode the table is updated after every step and epsilon decays;
    in evaluation mode the table is only read.
    """
    lives = env.lives
    steps = 0
    total_reward = 0.0
    done = False

    if training:
        # skip initial frames with noop action
        for _ in range(config['noop']):
            _, lives, done = env.step(NOOP)
            steps += 1
            if done:
                break

    while not done:
        state = extractor.extract(env.get_frame())
        action = select_action(state, table, exploration, training, rng)

        reward, current_lives, done = env.step(action)
        steps += 1
        total_reward += reward

        if not training:
            continue

        # normalise reward to -1, 0 or 1
        reward = min(reward, 1.0)

        # skip frames, repeat action
        for _ in range(config['skip']):
            if done:
                break
            skip_reward, current_lives, done = env.step(action)
            total_reward += skip_reward
            steps += 1

        if current_lives < lives:
            reward -= 1  # died
            lives = current_lives
        elif action == NOOP:
            reward -= 1  # idle

        if config['measure_next_state']:
            next_state = extractor.extract(env.get_frame())
        else:
            next_state = nudge_state(state, action, extractor.min_x, extractor.max_x)

        table.update(state, action, reward, next_state, config['alpha'], config['gamma'])
        exploration = exploration.decay()

    result = EpisodeResult(episode, total_reward, steps, exploration.epsilon)

    if png_dir is not None:
        env.save_frame(os.path.join(png_dir, f"episode-{episode}.png"))

    env.reset()
    return result, exploration


def run_episodes(
    env,
    extractor,
    table,
    exploration: ExplorationState,
    rng: np.random.Generator,
    config,
    training: bool = True,
    png_dir: Optional[str] = None,
    recorder=None,
) -> RunSummary:
    """Run config['episodes'] games and keep track of the best one."""
    if env.legal_action_count != table.n_actions:
        raise ValueError(
            f"Environment has {env.legal_action_count} actions, "
            f"but the q-table has {table.n_actions} columns."
        )

    start = time.perf_counter()
    summary = RunSummary(best_episode=-1, best_score=None, elapsed=0.0, exploration=exploration)

    for ep in tqdm(range(config['episodes']), desc="Training" if training else "Playing"):
        result, exploration = run_episode(
            env, extractor, table, exploration, rng, config,
            training=training, episode=ep, png_dir=png_dir,
        )
        summary.results.append(result)

        # strictly greater, ties keep the earlier episode
        if summary.best_score is None or result.total_reward > summary.best_score:
            summary.best_episode = ep
            summary.best_score = result.total_reward

        if recorder is not None:
            recorder.record(result)

        tqdm.write(
            f"Episode {ep} score: {result.total_reward:g} steps: {result.steps} "
            f"epsilon: {result.epsilon:g}"
        )

    summary.elapsed = time.perf_counter() - start
    summary.exploration = exploration

    best_score = "n/a" if summary.best_score is None else f"{summary.best_score:g}"
    print(
        f"\nElapsed Time: {int(summary.elapsed)}s - "
        f"Episode {summary.best_episode} Max Score: {best_score}"
    )
    return summary
