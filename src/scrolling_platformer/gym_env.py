"""Gymnasium environment wrapper for the scrolling platformer.

Provides standard Gym API for RL training and scripted play-testing.
Observations include both RGB frames and a structured state vector.
"""

import random
from typing import Dict, Optional, Tuple

import numpy as np
import gymnasium
from gymnasium import spaces

import pygame

from .config import GameConfig
from .engine import GameEngine
from .interfaces import EmptyCatalog
from .kinds import HorizontalIntent
from .render import draw_world
from .state import GamePhase


STATE_FIELDS = (
    "player_x",
    "player_y",
    "speed_x",
    "velocity_y",
    "jumps_remaining",
    "lives",
    "invincible",
    "can_shoot",
    "score",
    "stage",
    "episode_progress",
    "enemy_dx",
    "enemy_dy",
)
STATE_INDEX = {name: i for i, name in enumerate(STATE_FIELDS)}

# Discrete move action -> horizontal intent
_MOVES = (HorizontalIntent.LEFT, HorizontalIntent.NONE, HorizontalIntent.RIGHT)


class ScrollerEnv(gymnasium.Env):
    """Gymnasium wrapper around a GameEngine stepped at a fixed dt.

    Observation space (Dict):
        'rgb': uint8 array of shape (H, W, 3) - rendered frame (zeros unless
               render_mode asks for frames)
        'state': float32 array, one entry per name in STATE_FIELDS. enemy_dx
                 and enemy_dy point at the nearest harmful enemy ahead of the
                 player, or (world width, 0) when there is none.

    Action space (Dict):
        'move':  0 left, 1 none, 2 right
        'jump':  {0, 1} - jump press this step
        'shoot': {0, 1} - shoot press this step

    Reward = weighted sum of raw signals (stored in info['reward_signals']):
        score:       score gained this step
        life_lost:   1.0 per life lost
        stage_clear: 1.0 when the stage is cleared
        game_over:   1.0 when the run ends with no lives
    """

    metadata = {"render_modes": ["human", "rgb_array"], "render_fps": 60}

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        render_mode: Optional[str] = None,
        obs_resolution: Tuple[int, int] = (128, 128),
        max_episode_steps: int = 3000,
        reward_weights: Optional[Dict[str, float]] = None,
    ):
        super().__init__()

        self.config = config or GameConfig()
        self.render_mode = render_mode
        self.obs_height, self.obs_width = obs_resolution
        self.max_episode_steps = max_episode_steps

        self.reward_weights = reward_weights or {
            "score": 0.01,
            "life_lost": -10.0,
            "stage_clear": 100.0,
            "game_over": -50.0,
        }

        self.action_space = spaces.Dict({
            "move": spaces.Discrete(3),
            "jump": spaces.Discrete(2),
            "shoot": spaces.Discrete(2),
        })

        self.observation_space = spaces.Dict({
            "rgb": spaces.Box(
                low=0, high=255,
                shape=(self.obs_height, self.obs_width, 3),
                dtype=np.uint8,
            ),
            "state": spaces.Box(
                low=-np.inf, high=np.inf,
                shape=(len(STATE_FIELDS),),
                dtype=np.float32,
            ),
        })

        self._surface = None
        self._renderer = None
        self._display = None
        if render_mode in ("rgb_array", "human"):
            # Caller sets SDL_VIDEODRIVER for headless
            if not pygame.get_init():
                pygame.init()
            size = (int(self.config.world.width), int(self.config.world.height))
            self._surface = pygame.Surface(size)
            if render_mode == "human":
                self._display = pygame.display.set_mode(size)
                pygame.display.set_caption("ScrollerEnv")

        self._engine: Optional[GameEngine] = None
        self._episode_steps = 0
        self._prev_score = 0
        self._prev_lives = 0
        self._spawn_seed = 0
        self._dt = 1.0 / self.config.fps

    @property
    def engine(self) -> Optional[GameEngine]:
        return self._engine

    def reset(self, *, seed=None, options=None):
        super().reset(seed=seed)

        spawn_seed = int(self.np_random.integers(0, 2**31))
        self._engine = GameEngine(self.config, rng=random.Random(spawn_seed))
        self._engine.start()
        self._engine.drain_audio_events()

        self._episode_steps = 0
        self._prev_score = 0
        self._prev_lives = self._engine.player.lives
        self._spawn_seed = spawn_seed

        return self._get_obs(), self._get_info()

    def step(self, action):
        assert self._engine is not None, "Must call reset() before step()"

        self._apply_action(action)
        self._engine.step(self._dt)
        # Headless: nothing plays the queued sounds
        self._engine.drain_audio_events()
        self._episode_steps += 1

        reward_signals = self._compute_rewards()
        reward = sum(
            self.reward_weights.get(k, 0.0) * v
            for k, v in reward_signals.items()
        )

        phase = self._engine.phase
        terminated = phase in (GamePhase.GAME_OVER, GamePhase.STAGE_CLEAR)
        truncated = not terminated and self._episode_steps >= self.max_episode_steps

        obs = self._get_obs()
        info = self._get_info()
        info["reward_signals"] = reward_signals

        if self.render_mode == "human":
            self.render()

        return obs, float(reward), terminated, truncated, info

    # ------------------------------------------------------------------
    # Action handling
    # ------------------------------------------------------------------

    def _apply_action(self, action):
        move = int(np.asarray(action["move"]).item())
        self._engine.set_horizontal_intent(_MOVES[move])
        if int(np.asarray(action.get("jump", 0)).item()):
            self._engine.press_jump()
        if int(np.asarray(action.get("shoot", 0)).item()):
            self._engine.press_shoot()

    # ------------------------------------------------------------------
    # Reward computation
    # ------------------------------------------------------------------

    def _compute_rewards(self):
        score = self._engine.progression.score
        lives = self._engine.player.lives
        phase = self._engine.phase

        signals = {
            "score": float(score - self._prev_score),
            "life_lost": float(max(self._prev_lives - lives, 0)),
            "stage_clear": 1.0 if phase is GamePhase.STAGE_CLEAR else 0.0,
            "game_over": 1.0 if phase is GamePhase.GAME_OVER else 0.0,
        }
        self._prev_score = score
        self._prev_lives = lives
        return signals

    # ------------------------------------------------------------------
    # Observations
    # ------------------------------------------------------------------

    def _get_obs(self):
        if self.render_mode in ("rgb_array", "human"):
            rgb = self._render_frame()
        else:
            rgb = np.zeros((self.obs_height, self.obs_width, 3), dtype=np.uint8)
        return {"rgb": rgb, "state": self._get_state_vector()}

    def _nearest_enemy(self):
        player = self._engine.player
        ahead = [
            e for e in self._engine.world.enemies
            if e.harmful and e.right >= player.left
        ]
        if not ahead:
            return None
        return min(ahead, key=lambda e: e.x - player.x)

    def _get_state_vector(self):
        engine = self._engine
        player = engine.player
        state = np.zeros(len(STATE_FIELDS), dtype=np.float32)

        state[0] = player.x
        state[1] = player.y
        state[2] = player.speed_x
        state[3] = player.velocity_y
        state[4] = player.jumps_remaining
        state[5] = player.lives
        state[6] = float(player.is_invincible)
        state[7] = float(player.can_shoot)
        state[8] = float(engine.progression.score)
        state[9] = float(engine.progression.stage)
        state[10] = float(self._episode_steps) / max(self.max_episode_steps, 1)

        enemy = self._nearest_enemy()
        if enemy is None:
            state[11] = engine.world.width
            state[12] = 0.0
        else:
            state[11] = enemy.x - player.x
            state[12] = enemy.y - player.y

        return state

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def _render_frame(self):
        """Render current state to numpy array (H, W, 3) uint8."""
        from .app import PygameRenderer

        if self._renderer is None:
            self._renderer = PygameRenderer(self._surface)
        draw_world(
            self._engine.world, self._renderer, EmptyCatalog(),
            background=self._engine.stage_config.background_sprite,
        )
        scaled = pygame.transform.scale(self._surface, (self.obs_width, self.obs_height))
        # surfarray gives (W, H, 3); transpose to (H, W, 3)
        array = pygame.surfarray.array3d(scaled)
        return np.transpose(array, (1, 0, 2)).astype(np.uint8)

    def render(self):
        if self.render_mode == "rgb_array":
            return self._render_frame()
        elif self.render_mode == "human" and self._display:
            self._render_frame()
            self._display.blit(self._surface, (0, 0))
            self._draw_hud()
            pygame.display.flip()

    def _draw_hud(self):
        snapshot = self._engine.snapshot()
        text = (f"Score: {snapshot.score}  |  Lives: {snapshot.lives}"
                f"  |  Stage {snapshot.stage}")
        self._renderer.surface = self._display
        self._renderer.draw_text(text, (10, 10), (255, 215, 0))
        self._renderer.surface = self._surface

    def _get_info(self):
        info = self._engine.get_state()
        info["episode_steps"] = self._episode_steps
        info["spawn_seed"] = self._spawn_seed
        return info

    def close(self):
        if self._display:
            pygame.display.quit()
            self._display = None
