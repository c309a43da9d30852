from __future__ import annotations

from typing import Any, Dict, Optional, Tuple

import numpy as np
import gymnasium as gym
from gymnasium import spaces

from tetris_rl.game import Action, GameConfig, TetrisGame, TetrominoType
from tetris_rl.game.events import EVENT_LINES_CLEARED
from tetris_rl.visualization.renderer import ArrayRenderer


class TetrisEnv(gym.Env):
    """Falling-block Tetris as a Gymnasium environment.

    Each step applies one `Action`, then advances a virtual clock by
    `ms_per_step` and ticks the game, so gravity follows the level's drop
    interval exactly as it does for a human player.
    """

    metadata = {"render_modes": ["rgb_array"], "render_fps": 10}

    def __init__(self, config: Optional[GameConfig] = None, render_mode: Optional[str] = None,
                 reward_weights: Optional[Dict[str, float]] = None,
                 ms_per_step: float = 100.0,
                 max_episode_steps: int = 10000,
                 terminal_penalty: float = 0.0) -> None:
        super().__init__()
        self.config = config or GameConfig()
        self.render_mode = render_mode
        self.ms_per_step = float(ms_per_step)
        self.max_episode_steps = int(max_episode_steps)
        self.terminal_penalty = float(terminal_penalty)
        self.reward_weights: Dict[str, float] = {
            "points": 1.0,      # per game point from line clears
            "holes": 0.0,       # penalize holes created
            "height": 0.0,      # penalize max height increase
        }
        if reward_weights:
            self.reward_weights.update({k: float(v) for k, v in reward_weights.items()})

        self.renderer = ArrayRenderer(self.config.width, self.config.height)
        self.game = TetrisGame(self.renderer, config=self.config)
        self.game.events.subscribe(EVENT_LINES_CLEARED, self._on_lines_cleared)

        self.observation_space = spaces.Box(
            low=-len(TetrominoType), high=len(TetrominoType), shape=(self.config.height, self.config.width), dtype=np.int8
        )
        self.action_space = spaces.Discrete(len(Action))

        self._clock = 0.0
        self._steps = 0
        self._points = 0
        self._lines = 0

    def _on_lines_cleared(self, sender, rows, count, points) -> None:
        self._points += points
        self._lines += count

    def _get_obs(self) -> np.ndarray:
        return self.game.get_state().astype(np.int8)

    def _get_info(self) -> Dict[str, Any]:
        info: Dict[str, Any] = dict(self.game.get_game_state())
        info["steps"] = self._steps
        return info

    def reset(self, *, seed: Optional[int] = None, options: Optional[dict] = None) -> Tuple[np.ndarray, Dict[str, Any]]:
        super().reset(seed=seed)
        if seed is not None:
            self.game.piece_source.seed(seed)
        self.game.reset()
        self.game.spawn_new_tetromino()
        self._clock = 0.0
        self._steps = 0
        return self._get_obs(), self._get_info()

    def step(self, action):
        holes_before = self.game.grid.count_holes()
        height_before = self.game.grid.get_max_height()
        self._points = 0
        self._lines = 0

        self.game.step(Action(int(action)))
        self._clock += self.ms_per_step
        self.game.update(self._clock)

        reward_components: Dict[str, float] = {
            "points": self.reward_weights["points"] * float(self._points),
            "holes": -self.reward_weights["holes"] * float(
                max(0, self.game.grid.count_holes() - holes_before)),
            "height": -self.reward_weights["height"] * float(
                max(0, self.game.grid.get_max_height() - height_before)),
        }
        terminated = bool(self.game.game_over)
        if terminated:
            reward_components["terminal"] = self.terminal_penalty
        self._steps += 1
        truncated = self._steps >= self.max_episode_steps

        reward = float(sum(reward_components.values()))
        info = self._get_info()
        info["reward_components"] = reward_components
        info["lines_cleared"] = self._lines
        return self._get_obs(), reward, terminated, truncated, info

    def render(self) -> Optional[np.ndarray]:
        if self.render_mode == "rgb_array":
            self.renderer.clear()
            self.renderer.draw_board(self.game.board)
            if self.game.current is not None:
                self.renderer.draw_tetromino(self.game.current)
            return self.renderer.snapshot()
        return None

    def close(self) -> None:
        self.game.events.unsubscribe(EVENT_LINES_CLEARED, self._on_lines_cleared)
