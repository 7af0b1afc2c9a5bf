"""
In this file, you may edit the default hyperparameters used for training.

episodes: Number of episodes (games) to run.
noop: Number of no-op actions issued at the start of each training episode.
skip: Number of extra frames the chosen action is repeated for while training.
alpha: Learning rate of the q-value update.
gamma: Discount factor.
epsilon: Starting value for epsilon (exploration rate).
epsilon_min: Floor epsilon decays towards.
epsilon_decay: Multiplicative decay applied to epsilon after every training step.
seed: Seed for the emulator and for the exploration random generator.
template: Grayscale image of the player's cannon used for template matching.
measure_next_state: Re-extract the next state from the post-action frame instead of
    nudging the current state in the direction of the action.
"""

import yaml

from invaders.constants import SEED, TEMPLATE_FILE

SpaceInvaders = {
    'episodes': 10,
    'noop': 30,
    'skip': 2,
    'alpha': 0.00025,
    'gamma': 0.99,
    'epsilon': 1.0,
    'epsilon_min': 0.1,
    'epsilon_decay': 0.999999,
    'seed': SEED,
    'template': TEMPLATE_FILE,
    'measure_next_state': False,
}


def load_config(config_path: str = "config.yaml"):
    """Load configuration from yaml file"""
    with open(config_path, 'r') as f:
        config = yaml.safe_load(f)
    if config is None:
        return {}
    if not isinstance(config, dict):
        raise ValueError(f"{config_path} must hold a mapping of hyperparameters, got {type(config).__name__}")
    return config


def merge_config(overrides=None, base=None):
    """Return a copy of the defaults with `overrides` applied on top.

    Keys that are not hyperparameters are rejected so that a typo in a yaml file
    does not silently fall back to a default.
    """
    config = dict(SpaceInvaders if base is None else base)
    for key, value in (overrides or {}).items():
        if key not in config:
            raise ValueError(f"Unknown configuration key: {key!r}")
        config[key] = value
    return config


def validate_config(config, training=True):
    """Raise ValueError for values the episode loop cannot work with.

    The epsilon floor only matters while training, evaluation never decays epsilon.
    """
    for key in ('episodes', 'noop', 'skip'):
        value = config[key]
        if isinstance(value, bool) or not isinstance(value, int):
            raise ValueError(f"{key} must be an integer, got {value!r}")
        if value < 0:
            raise ValueError(f"{key} must be >= 0, got {value}")
    for key in ('alpha', 'gamma', 'epsilon', 'epsilon_min'):
        if not 0.0 <= float(config[key]) <= 1.0:
            raise ValueError(f"{key} must be in [0, 1], got {config[key]}")
    if training and float(config['epsilon_min']) > float(config['epsilon']):
        raise ValueError(
            f"epsilon_min ({config['epsilon_min']}) is larger than epsilon ({config['epsilon']})"
        )
    if not 0.0 < float(config['epsilon_decay']) <= 1.0:
        raise ValueError(f"epsilon_decay must be in (0, 1], got {config['epsilon_decay']}")
    return config
