"""
Space Invaders through the Arcade Learning Environment.

The agent only relies on this small surface, which the tests replace with a
scripted fake:

    reset()                  start a new game
    step(action)             -> (reward, lives, done)
    get_frame()              grayscale (HEIGHT, WIDTH) uint8 screen
    save_frame(path)         write the current screen as an image
    lives                    remaining lives
    legal_action_count       number of actions
"""

import ale_py
import cv2
import gymnasium

from invaders.constants import ENV_ID, SEED

gymnasium.register_envs(ale_py)


class AtariEnvironment:
    def __init__(self, env_id=ENV_ID, seed=SEED, display=False, sound=False):
        self.env = gymnasium.make(
            env_id,
            obs_type="grayscale",
            frameskip=1,
            repeat_action_probability=0.0,
            full_action_space=False,
            render_mode="human" if display else None,
        )
        self.ale = self.env.unwrapped.ale
        # picked up when the seeded reset below reloads the ROM
        self.ale.setBool("sound", sound)

        self.seed = seed
        self.frame = None
        self.lives = 0
        self._seeded = False
        self.reset()

    @property
    def legal_action_count(self) -> int:
        return int(self.env.action_space.n)

    def reset(self):
        if self._seeded:
            obs, info = self.env.reset()
        else:
            obs, info = self.env.reset(seed=self.seed)
            self._seeded = True
        self.frame = obs
        self.lives = int(info["lives"])
        return obs

    def step(self, action):
        obs, reward, terminated, truncated, info = self.env.step(action)
        self.frame = obs
        self.lives = int(info["lives"])
        return float(reward), self.lives, terminated or truncated

    def get_frame(self):
        return self.frame

    def save_frame(self, path):
        frame_rgb = self.ale.getScreenRGB()  # (H, W, 3) uint8, RGB order
        # convert to BGR because OpenCV expects that
        frame_bgr = cv2.cvtColor(frame_rgb, cv2.COLOR_RGB2BGR)
        cv2.imwrite(str(path), frame_bgr)

    def close(self):
        self.env.close()
