"""
Fixed layout of the Space Invaders ROM as seen through the ALE.

Nothing in here is meant to be tuned, the hyper-parameters live in config.py.
"""

### Emulator
ENV_ID = "ALE/SpaceInvaders-v5"
SEED = 123

### Screen (ALE native resolution, grayscale)
HEIGHT = 210
WIDTH = 160

### Region searched for the cannon (drops score rows and side margins)
CROP_X = 20
CROP_Y = 30
CROP_WIDTH = 120
CROP_HEIGHT = 165

### Bounds the cannon x position is clamped to
LEFT = 38
RIGHT = 120

### Actions, column order of the q-table == minimal action set of the ROM
NOOP = 0
FIRE = 1
RIGHT_MOVE = 2
LEFT_MOVE = 3
RIGHT_FIRE = 4
LEFT_FIRE = 5

ACTIONS = 6
ACTION_LABELS = ["0-Noop", "1-Fire", "2-Right", "3-Left", "4-RightFire", "5-LeftFire"]
RIGHT_ACTIONS = (RIGHT_MOVE, RIGHT_FIRE)
LEFT_ACTIONS = (LEFT_MOVE, LEFT_FIRE)

### Files
CSV_FILE = "space_invaders_q_table.csv"
CSV_HEADER = ["cannon_x"] + ACTION_LABELS
TEMPLATE_FILE = "templates/cannon.pgm"
