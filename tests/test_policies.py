"""Tests for scripted policies."""

import numpy as np
import pytest

from conftest import quiet_config

from scrolling_platformer.gym_env import ScrollerEnv, STATE_FIELDS, STATE_INDEX
from scrolling_platformer.policies import JumperPolicy, POLICIES, RandomPolicy, RunnerPolicy


@pytest.fixture
def env():
    e = ScrollerEnv(config=quiet_config(), max_episode_steps=100)
    yield e
    e.close()


@pytest.fixture
def obs(env):
    o, _ = env.reset(seed=42)
    return o


def state_obs(**values):
    state = np.zeros(len(STATE_FIELDS), dtype=np.float32)
    for name, value in values.items():
        state[STATE_INDEX[name]] = value
    return {"state": state}


class TestRandomPolicy:
    def test_returns_valid_action(self, env, obs):
        policy = RandomPolicy(rng=np.random.default_rng(0))
        for _ in range(20):
            assert env.action_space.contains(policy(obs))

    def test_varies_moves(self, obs):
        policy = RandomPolicy(rng=np.random.default_rng(0))
        moves = {policy(obs)["move"] for _ in range(30)}
        assert len(moves) > 1


class TestJumperPolicy:
    def test_waits_when_no_enemy_close(self):
        action = JumperPolicy()(state_obs(enemy_dx=400, jumps_remaining=2))
        assert action == {"move": 1, "jump": 0, "shoot": 0}

    def test_jumps_at_close_enemy(self):
        action = JumperPolicy()(state_obs(enemy_dx=60, jumps_remaining=2))
        assert action["jump"] == 1

    def test_no_jump_in_air(self):
        action = JumperPolicy()(state_obs(enemy_dx=60, jumps_remaining=1, velocity_y=-5))
        assert action["jump"] == 0


class TestRunnerPolicy:
    def test_moves_right(self, obs):
        policy = RunnerPolicy()
        assert policy(obs)["move"] == 2

    def test_jumps_periodically(self, obs):
        policy = RunnerPolicy(jump_interval=5)
        jumps = [policy(obs)["jump"] for _ in range(10)]
        assert jumps == [0, 0, 0, 0, 1, 0, 0, 0, 0, 1]
        policy.reset()
        assert policy(obs)["jump"] == 0

    def test_shoots_with_ability(self):
        assert RunnerPolicy()(state_obs(can_shoot=1))["shoot"] == 1
        assert RunnerPolicy()(state_obs(can_shoot=0))["shoot"] == 0


class TestPolicyEpisodes:
    @pytest.mark.parametrize("name", sorted(POLICIES))
    def test_runs_episode(self, env, name):
        policy = POLICIES[name]()
        obs, _ = env.reset(seed=1)
        policy.reset()
        for _ in range(100):
            obs, _, terminated, truncated, _ = env.step(policy(obs))
            if terminated or truncated:
                break
        assert truncated or terminated
