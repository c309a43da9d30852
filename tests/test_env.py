import gymnasium as gym
import numpy as np

import tetris_rl.env  # noqa: F401
from tetris_rl.env.tetris_env import TetrisEnv
from tetris_rl.game import Action, SequencePieceSource
from tetris_rl.game.pieces import Tetromino, TetrominoType
from tetris_rl.rl.random_agent import run_random


def test_registered_env_reset_and_step():
    env = gym.make("Tetris-10x20-v0")
    obs, info = env.reset(seed=1)
    assert obs.shape == (20, 10)
    assert obs.dtype == np.int8
    assert (obs < 0).sum() == 4
    assert info["has_current_tetromino"] is True
    obs, reward, terminated, truncated, info = env.step(int(Action.LEFT))
    assert reward == 0.0
    assert not terminated and not truncated
    env.close()


def test_line_clear_is_rewarded():
    env = TetrisEnv()
    env.reset()
    game = env.game
    game.piece_source = SequencePieceSource(["O"])
    game.grid.grid[19, 4:] = 3
    game.current = Tetromino(TetrominoType.I, 0, 0, 0)
    _, reward, terminated, _, info = env.step(Action.HARD_DROP)
    assert reward == 100.0
    assert info["lines_cleared"] == 1
    assert info["score"] == 100
    assert not terminated


def test_close_detaches_reward_listener():
    env = TetrisEnv()
    env.reset()
    env.close()
    env.game.events.emit("lines_cleared", rows=[19], count=1, points=100)
    assert env._points == 0
    assert env._lines == 0


def test_gravity_follows_virtual_clock():
    env = TetrisEnv(ms_per_step=250)
    env.reset()
    y0 = env.game.current.y
    for _ in range(3):
        env.step(Action.NONE)
    assert env.game.current.y == y0
    env.step(Action.NONE)
    assert env.game.current.y == y0 + 1


def test_hard_drops_end_the_episode():
    env = TetrisEnv()
    env.reset(seed=3)
    terminated = False
    for _ in range(200):
        _, _, terminated, truncated, _ = env.step(Action.HARD_DROP)
        if terminated:
            break
    assert terminated
    assert env.game.game_over


def test_truncation_and_rgb_render():
    env = TetrisEnv(render_mode="rgb_array", max_episode_steps=2)
    env.reset()
    env.step(Action.NONE)
    _, _, _, truncated, _ = env.step(Action.NONE)
    assert truncated
    frame = env.render()
    assert frame.shape == (20 * 12, 10 * 12, 3)


def test_random_agent_runs():
    assert isinstance(run_random(steps=50, seed=0), float)
