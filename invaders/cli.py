"""
Train and/or play Space Invaders with a q-table over the cannon x position.

Usage examples
--------------
# train 10 episodes with the default hyper-parameters and keep the table
invaders-qlearn --train --save

# continue training from a saved table, then play 5 greedy games
invaders-qlearn -l -t -s -g -e 5

# play with a trained table on screen
invaders-qlearn --load space_invaders_q_table.csv --game --display
"""

import argparse
import os

import numpy as np
import yaml

from invaders import __version__
from invaders.agent import run_episodes
from invaders.config import SpaceInvaders, load_config, merge_config, validate_config
from invaders.constants import CSV_FILE
from invaders.env import AtariEnvironment
from invaders.policy import ExplorationState
from invaders.q_table import QTable
from invaders.recording import ReturnsRecorder
from invaders.state import StateExtractor, load_template

# cli dest -> config key
CONFIG_ARGS = {
    'episodes': 'episodes',
    'noop': 'noop',
    'skip': 'skip',
    'alpha': 'alpha',
    'gamma': 'gamma',
    'epsilon': 'epsilon',
    'min': 'epsilon_min',
    'decay': 'epsilon_decay',
    'seed': 'seed',
    'template': 'template',
    'measure_next_state': 'measure_next_state',
}


def build_parser():
    parser = argparse.ArgumentParser(
        prog="invaders-qlearn",
        description="Q-learning agent for Space Invaders using the cannon position as state",
    )
    parser.add_argument("-V", "--version", action="version", version=f"%(prog)s {__version__}")

    optional = parser.add_argument_group("Optional arguments")
    optional.add_argument("-a", "--audio", action="store_true", help="Enable audio/sound")
    optional.add_argument("-d", "--display", action="store_true", help="Enable display on screen")
    optional.add_argument("-e", "--episodes", type=int, metavar="N",
                          help=f"Number of episodes (default: {SpaceInvaders['episodes']})")
    optional.add_argument("-g", "--game", action="store_true", help="Play game using q-table")
    optional.add_argument("-l", "--load", nargs="?", const=CSV_FILE, default=None, metavar="FILE",
                          help=f"Load the q-table from file (default: {CSV_FILE})")
    optional.add_argument("-p", "--png", action="store_true",
                          help="Enable saving a PNG image per episode")
    optional.add_argument("-s", "--save", nargs="?", const=CSV_FILE, default=None, metavar="FILE",
                          help=f"Save the q-table to file (default: {CSV_FILE})")
    optional.add_argument("-t", "--train", action="store_true",
                          help="Train the agent using q-learning")
    optional.add_argument("--config", type=str, default=None,
                          help="YAML file overriding the default hyper-parameters")
    optional.add_argument("--template", type=str, default=None,
                          help=f"Cannon template image (default: {SpaceInvaders['template']})")
    optional.add_argument("--seed", type=int, default=None,
                          help=f"Emulator and exploration seed (default: {SpaceInvaders['seed']})")
    optional.add_argument("--png-dir", type=str, default=".",
                          help="Directory for the per episode PNG images")
    optional.add_argument("--log-dir", type=str, default=None,
                          help="Write a csv of episode returns per run into this directory")
    optional.add_argument("--plot", action="store_true",
                          help="Plot the learning curve next to the returns csv (needs --log-dir)")

    q_learning = parser.add_argument_group("Q-Learning parameters")
    q_learning.add_argument("-A", "--alpha", type=float,
                            help=f"Alpha learning rate (default: {SpaceInvaders['alpha']})")
    q_learning.add_argument("-G", "--gamma", type=float,
                            help=f"Gamma discount factor (default: {SpaceInvaders['gamma']})")
    q_learning.add_argument("-E", "--epsilon", type=float,
                            help=f"Epsilon exploration rate, starting value "
                                 f"(default: {SpaceInvaders['epsilon']})")
    q_learning.add_argument("-M", "--min", type=float,
                            help=f"Minimum exploration rate (default: {SpaceInvaders['epsilon_min']})")
    q_learning.add_argument("-D", "--decay", type=float,
                            help=f"Decay rate for exploration (default: {SpaceInvaders['epsilon_decay']})")
    q_learning.add_argument("-N", "--noop", type=int,
                            help=f"Skip initial frames using noop action (default: {SpaceInvaders['noop']})")
    q_learning.add_argument("-S", "--skip", type=int,
                            help=f"Skip frames and repeat actions (default: {SpaceInvaders['skip']})")
    q_learning.add_argument("--measure-next-state", action="store_true", default=None,
                            help="Measure the next state on the new frame instead of "
                                 "guessing it from the action")
    return parser


def get_args(argv=None):
    return build_parser().parse_args(argv)


def build_config(args, training=True):
    """Defaults, then the yaml file from --config, then flags given on the command line."""
    config = merge_config(load_config(args.config) if args.config else None)
    overrides = {
        key: getattr(args, dest)
        for dest, key in CONFIG_ARGS.items()
        if getattr(args, dest) is not None
    }
    return validate_config(merge_config(overrides, base=config), training=training)


def resolve_modes(args):
    """Return (train, game). Without --load and --train the agent trains."""
    train = args.train or args.load is None
    return train, args.game


def print_training_parameters(config):
    print("Training Parameters:")
    print(f"Episodes:      {config['episodes']}")
    print(f"Alpha:         {config['alpha']}")
    print(f"Gamma:         {config['gamma']}")
    print(f"Epsilon:       {config['epsilon']}")
    print(f"Epsilon Min:   {config['epsilon_min']}")
    print(f"Epsilon Decay: {config['epsilon_decay']}")
    print(f"Noop:          {config['noop']}")
    print(f"Frame Skip:    {config['skip']}")


def run_mode(env, extractor, table, exploration, rng, config, args, training):
    png_dir = None
    if args.png:
        png_dir = args.png_dir
        os.makedirs(png_dir, exist_ok=True)

    recorder = None
    if args.log_dir:
        recorder = ReturnsRecorder(args.log_dir, mode="train" if training else "game")

    try:
        summary = run_episodes(
            env, extractor, table, exploration, rng, config,
            training=training, png_dir=png_dir, recorder=recorder,
        )
    finally:
        if recorder is not None:
            recorder.close()

    if recorder is not None and args.plot:
        recorder.plot()

    return summary


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    train, game = resolve_modes(args)
    try:
        config = build_config(args, training=train)
    except (OSError, ValueError, yaml.YAMLError) as e:
        parser.error(str(e))

    table = None
    if args.load is not None:
        table = QTable.load(args.load)
        if table is not None:
            print(f"Loaded q-table from {args.load}")

    # allocate q-table if empty
    if table is None:
        table = QTable()

    if not train and not game:
        print("Nothing to run, use --train and/or --game together with --load.")
        return 0

    extractor = StateExtractor(load_template(config['template']))
    rng = np.random.default_rng(config['seed'])
    exploration = ExplorationState.from_config(config)

    env = AtariEnvironment(seed=config['seed'], display=args.display, sound=args.audio)
    try:
        if train:
            print_training_parameters(config)
            summary = run_mode(env, extractor, table, exploration, rng, config, args, training=True)
            exploration = summary.exploration

            # only save after training
            if args.save is not None:
                table.save(args.save)
                print(f"The q-table was stored in {args.save}")

        # play game using the q-table, random actions for unvisited states
        if game:
            run_mode(env, extractor, table, exploration, rng, config, args, training=False)
    finally:
        env.close()

    return 0
