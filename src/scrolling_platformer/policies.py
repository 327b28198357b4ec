"""Scripted policies for automated play-testing.

Each policy takes an observation and returns an action dict
compatible with ScrollerEnv's action space.
"""

import numpy as np
from typing import Dict, Any, Optional

from .gym_env import STATE_INDEX


class BasePolicy:
    """Base class for scripted policies."""

    name: str = "base"

    def __call__(self, obs: Dict[str, np.ndarray]) -> Dict[str, Any]:
        return self.act(obs)

    def act(self, obs: Dict[str, np.ndarray]) -> Dict[str, Any]:
        raise NotImplementedError

    def reset(self):
        """Called at the start of each episode."""
        pass

    def _make_action(self, move: int, jump: int, shoot: int = 0) -> Dict[str, Any]:
        # move is a horizontal intent (-1, 0, +1); the env expects 0..2
        return {
            "move": int(np.clip(move, -1, 1)) + 1,
            "jump": int(jump),
            "shoot": int(shoot),
        }


class RandomPolicy(BasePolicy):
    """Uniform random actions each step.

    Broad state coverage, many hits, good baseline.
    """

    name = "random"

    def __init__(self, rng: Optional[np.random.Generator] = None, jump_prob: float = 0.05):
        self.rng = rng or np.random.default_rng()
        self.jump_prob = jump_prob

    def act(self, obs):
        move = int(self.rng.integers(-1, 2))
        jump = int(self.rng.random() < self.jump_prob)
        shoot = int(self.rng.random() < 0.1)
        return self._make_action(move, jump, shoot)


class JumperPolicy(BasePolicy):
    """Holds position and jumps when an enemy gets close.

    Aims to land on enemies rather than run into them.
    """

    name = "jumper"

    def __init__(self, trigger_distance: float = 90.0):
        self.trigger_distance = trigger_distance

    def act(self, obs):
        state = obs["state"]
        dx = state[STATE_INDEX["enemy_dx"]]
        jumps = state[STATE_INDEX["jumps_remaining"]]
        vy = state[STATE_INDEX["velocity_y"]]

        grounded = vy == 0.0
        should_jump = grounded and jumps > 0 and 0.0 < dx < self.trigger_distance
        return self._make_action(0, int(should_jump))


class RunnerPolicy(BasePolicy):
    """Keeps moving right, hops on a timer, shoots whenever it can."""

    name = "runner"

    def __init__(self, jump_interval: int = 45):
        self.jump_interval = jump_interval
        self._step = 0

    def reset(self):
        self._step = 0

    def act(self, obs):
        state = obs["state"]
        can_shoot = state[STATE_INDEX["can_shoot"]] > 0.5

        self._step += 1
        should_jump = self._step % self.jump_interval == 0
        return self._make_action(1, int(should_jump), int(can_shoot))


POLICIES = {
    "random": RandomPolicy,
    "jumper": JumperPolicy,
    "runner": RunnerPolicy,
}
