from __future__ import annotations

import argparse
import logging
from typing import Dict, Optional

import pygame

from tetris_rl.game import Action, GameConfig, TetrisGame
from .renderer import PygameRenderer


KEY_TO_ACTION: Dict[int, Action] = {
    pygame.K_LEFT: Action.LEFT,
    pygame.K_RIGHT: Action.RIGHT,
    pygame.K_UP: Action.ROTATE_CW,
    pygame.K_x: Action.ROTATE_CW,
    pygame.K_z: Action.ROTATE_CCW,
    pygame.K_DOWN: Action.SOFT_DROP,
    pygame.K_SPACE: Action.HARD_DROP,
}

PANEL_WIDTH = 180


def draw_hud(screen: pygame.Surface, font: pygame.font.Font, game: TetrisGame, x: int, y: int) -> None:
    lines = [
        f"Score: {game.score}",
        f"Level: {game.level}",
        f"Lines: {game.lines}",
    ]
    if game.game_over:
        lines += ["", "GAME OVER", "R to restart"]
    elif game.paused:
        lines += ["", "PAUSED", "P to resume"]
    for text in lines:
        screen.blit(font.render(text, True, (230, 230, 230)), (x, y))
        y += 26


def run(cell_size: int = 28, seed: Optional[int] = None) -> None:
    pygame.init()
    try:
        margin = 20
        config = GameConfig(random_seed=seed)
        screen = pygame.display.set_mode(
            (config.width * cell_size + margin * 3 + PANEL_WIDTH, config.height * cell_size + margin * 2)
        )
        pygame.display.set_caption("Tetris - Human Play")
        font = pygame.font.SysFont(None, 28)
        clock = pygame.time.Clock()

        renderer = PygameRenderer(screen, cell_size=cell_size, margin=margin)
        game = TetrisGame(renderer, config=config)
        game.spawn_new_tetromino()

        running = True
        while running:
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif event.type == pygame.KEYDOWN:
                    if event.key == pygame.K_ESCAPE:
                        running = False
                    elif event.key == pygame.K_p:
                        game.toggle_pause()
                    elif event.key == pygame.K_r:
                        game.reset()
                        game.spawn_new_tetromino()
                    else:
                        action = KEY_TO_ACTION.get(event.key)
                        if action is not None:
                            game.step(action)

            game.update(pygame.time.get_ticks())
            game.render()
            panel_x = margin * 2 + config.width * cell_size
            screen.fill((10, 10, 14), pygame.Rect(panel_x, 0, PANEL_WIDTH + margin, screen.get_height()))
            draw_hud(screen, font, game, panel_x, margin)
            pygame.display.flip()
            clock.tick(60)
    finally:
        pygame.quit()


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Play Tetris with the keyboard")
    p.add_argument("--cell-size", type=int, default=28)
    p.add_argument("--seed", type=int, default=None)
    p.add_argument("--log-level", default="WARNING", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    return p


def main() -> None:
    args = build_parser().parse_args()
    logging.basicConfig(level=getattr(logging, args.log_level), format="%(asctime)s %(name)s %(levelname)s %(message)s")
    run(cell_size=args.cell_size, seed=args.seed)


if __name__ == "__main__":  # pragma: no cover
    main()
