"""
Turn a raw emulator frame into the single feature the agent learns on:
the horizontal position of the player's cannon.
"""

from typing import Callable, Tuple

import cv2
import numpy as np

from invaders.constants import (
    CROP_HEIGHT,
    CROP_WIDTH,
    CROP_X,
    CROP_Y,
    HEIGHT,
    LEFT,
    RIGHT,
    WIDTH,
)

Matcher = Callable[[np.ndarray, np.ndarray], Tuple[int, int, float]]


def load_template(path: str) -> np.ndarray:
    """Read the cannon template as a single channel uint8 image."""
    template = cv2.imread(str(path), cv2.IMREAD_GRAYSCALE)
    if template is None:
        raise FileNotFoundError(f"Unable to read template image: {path}")
    return template


def match_template(image: np.ndarray, template: np.ndarray) -> Tuple[int, int, float]:
    """Return (x, y, score) of the best normalised cross-correlation match."""
    result = cv2.matchTemplate(image, template, cv2.TM_CCOEFF_NORMED)
    _min_value, max_value, _min_location, max_location = cv2.minMaxLoc(result)
    return int(max_location[0]), int(max_location[1]), float(max_value)


class StateExtractor:
    """Locate the cannon in a grayscale frame and map it to a clamped x position.

    The frame is cropped to the play field first, so the score rows and the side
    margins can never win the match. Only the location of the best match is used,
    its score is ignored.
    """

    def __init__(
        self,
        template: np.ndarray,
        matcher: Matcher = match_template,
        crop: Tuple[int, int, int, int] = (CROP_X, CROP_Y, CROP_WIDTH, CROP_HEIGHT),
        bounds: Tuple[int, int] = (LEFT, RIGHT),
        frame_shape: Tuple[int, int] = (HEIGHT, WIDTH),
    ):
        self.template = np.asarray(template, dtype=np.uint8)
        self.matcher = matcher
        self.crop = crop
        self.bounds = bounds
        self.frame_shape = tuple(frame_shape)

    @property
    def min_x(self) -> int:
        return self.bounds[0]

    @property
    def max_x(self) -> int:
        return self.bounds[1]

    def clamp(self, x: int) -> int:
        return min(self.max_x, max(self.min_x, int(x)))

    def extract(self, frame: np.ndarray) -> int:
        frame = np.asarray(frame)
        if frame.shape != self.frame_shape:
            raise ValueError(
                f"Expected a {self.frame_shape} grayscale frame, got shape {frame.shape}"
            )

        x, y, w, h = self.crop
        play_field = np.ascontiguousarray(frame[y:y + h, x:x + w], dtype=np.uint8)

        match_x, _match_y, _score = self.matcher(play_field, self.template)

        # recentre on the middle column of the template, undo the crop
        cannon_x = match_x + (self.template.shape[1] + 1) // 2 + x
        return self.clamp(cannon_x)
