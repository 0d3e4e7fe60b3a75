"""
Human Play Mode
================

Play the flappy game interactively in a resizable pygame window.

Controls:
    - Space / Enter / Click / Touch: Start, jump, or restart after game over
    - R: Restart after game over
    - ESC: Quit

Usage:
    python -m tools.play_human [--name NAME] [--seed SEED] [--width WIDTH] [--height HEIGHT]
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional, Tuple

try:
    import pygame
    PYGAME_AVAILABLE = True
except ImportError:
    PYGAME_AVAILABLE = False

from flappy.engine.config_loader import load_config, GameConfig
from flappy.engine.game import CoreGame
from flappy.engine.session import InputEvent, SessionState
from flappy.engine.state_snapshot import GameSnapshot
from flappy.services.leaderboard import Leaderboard
from flappy.services.storage import LocalStore


class MixerAudio:
    """Background music through pygame.mixer. Silent if no track is given."""

    def __init__(self, music_path: Optional[str] = None, volume: float = 0.75):
        self._loaded = False
        self._playing = False
        if music_path:
            pygame.mixer.init()
            pygame.mixer.music.load(music_path)
            pygame.mixer.music.set_volume(volume)
            self._loaded = True

    @property
    def is_playing(self) -> bool:
        return self._playing

    def play(self) -> None:
        if self._loaded:
            pygame.mixer.music.play()
        self._playing = True

    def pause(self) -> None:
        if self._loaded:
            pygame.mixer.music.stop()
        self._playing = False

    def rewind(self) -> None:
        if self._loaded:
            pygame.mixer.music.rewind()


class FlappyRenderer:
    """Draws a GameSnapshot. Reads state, never mutates it."""

    def __init__(self):
        self._background = (26, 26, 62)
        self._obstacle = (40, 170, 90)
        self._obstacle_edge = (20, 110, 60)
        self._flyer = (255, 220, 80)
        self._text = (255, 255, 255)
        self._text_dim = (200, 200, 200)
        self._warning = (255, 120, 120)

        pygame.font.init()
        self._font_large = pygame.font.Font(None, 48)
        self._font_medium = pygame.font.Font(None, 30)
        self._font_small = pygame.font.Font(None, 22)

    def render(
        self,
        screen: "pygame.Surface",
        snapshot: GameSnapshot,
        leaderboard: List[Tuple[str, int]]
    ) -> None:
        """Render the complete game scene."""
        screen.fill(self._background)
        height = int(snapshot.viewport.height)

        for obstacle in snapshot.obstacles:
            top = pygame.Rect(int(obstacle.x), 0, int(obstacle.width), int(obstacle.top_height))
            bottom = pygame.Rect(
                int(obstacle.x), int(obstacle.bottom_start),
                int(obstacle.width), height - int(obstacle.bottom_start)
            )
            for rect in (top, bottom):
                pygame.draw.rect(screen, self._obstacle, rect)
                pygame.draw.rect(screen, self._obstacle_edge, rect, 2)

        flyer = snapshot.flyer
        pygame.draw.ellipse(
            screen, self._flyer,
            pygame.Rect(int(flyer.x), int(flyer.y), int(flyer.width), int(flyer.height))
        )

        self._draw_hud(screen, snapshot)

        if snapshot.state == SessionState.NOT_STARTED.value:
            self._draw_centered(screen, snapshot, ["Press Space or Tap to Start"])
        elif snapshot.state == SessionState.ENDED.value:
            lines = ["Game Over!", f"Final Score: {snapshot.score}"]
            if not snapshot.restart_locked:
                lines.append("Press Space or Tap to Restart")
            self._draw_centered(screen, snapshot, lines)
            self._draw_leaderboard(screen, snapshot, leaderboard)

        self._draw_notices(screen, snapshot)

    def _draw_hud(self, screen: "pygame.Surface", snapshot: GameSnapshot) -> None:
        score = self._font_large.render(str(snapshot.score), True, self._text)
        screen.blit(score, ((int(snapshot.viewport.width) - score.get_width()) // 2, 20))
        best = self._font_small.render(f"Best: {snapshot.best_score}", True, self._text_dim)
        screen.blit(best, (10, 10))

    def _draw_centered(self, screen: "pygame.Surface", snapshot: GameSnapshot, lines: List[str]) -> None:
        cx = int(snapshot.viewport.width) // 2
        y = int(snapshot.viewport.height) // 2 - 40 * len(lines) // 2
        for i, line in enumerate(lines):
            font = self._font_large if i == 0 else self._font_medium
            surf = font.render(line, True, self._text)
            screen.blit(surf, (cx - surf.get_width() // 2, y))
            y += 44

    def _draw_leaderboard(
        self,
        screen: "pygame.Surface",
        snapshot: GameSnapshot,
        leaderboard: List[Tuple[str, int]]
    ) -> None:
        x = int(snapshot.viewport.width) - 200
        title = self._font_medium.render("Leaderboard", True, self._text)
        screen.blit(title, (x, 20))
        for i, (name, score) in enumerate(leaderboard):
            txt = self._font_small.render(f"{i + 1}. {name} - {score}", True, self._text_dim)
            screen.blit(txt, (x, 55 + i * 24))

    def _draw_notices(self, screen: "pygame.Surface", snapshot: GameSnapshot) -> None:
        y = int(snapshot.viewport.height) - 30
        for notice in reversed(snapshot.notices):
            surf = self._font_small.render(notice, True, self._warning)
            screen.blit(surf, (10, y))
            y -= 24


class HumanPlayer:
    """
    Human-playable flappy game.

    The outer loop keeps rendering in every state; the game itself only
    simulates while a session is playing.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        seed: Optional[int] = None,
        player_name: Optional[str] = None,
        music_path: Optional[str] = None,
        window_width: int = 800,
        window_height: int = 600,
        target_fps: int = 60
    ):
        if not PYGAME_AVAILABLE:
            raise ImportError("pygame required. Install: pip install pygame")

        if config is None:
            config = load_config()

        self._config = config
        self._target_fps = target_fps

        pygame.init()
        self._screen = pygame.display.set_mode((window_width, window_height), pygame.RESIZABLE)
        pygame.display.set_caption("Flappy")
        self._clock = pygame.time.Clock()

        services = config.services
        self._leaderboard = Leaderboard(services.leaderboard_path, services.display_name_max_length)
        self._game = CoreGame(
            config=config,
            width=window_width,
            height=window_height,
            audio=MixerAudio(music_path),
            store=LocalStore(services.storage_path, services.display_name_max_length),
            leaderboard=self._leaderboard,
            seed=seed
        )
        if player_name is not None:
            self._game.machine.set_player_name(player_name)

        self._renderer = FlappyRenderer()
        self._top_scores: List[Tuple[str, int]] = []
        self._running = True

    def run(self) -> int:
        """Run the game loop. Returns best score."""
        print("=== Flappy ===")
        print(f"Playing as {self._game.machine.player_name}")
        print("Space/Click to jump, ESC to quit")
        print()

        while self._running:
            now_ms = float(pygame.time.get_ticks())
            self._handle_events(now_ms)

            result = self._game.tick(now_ms)
            if result.delta_score > 0:
                print(f"  +{result.delta_score} (Total: {self._game.score})")
            if result.ended:
                print(f"\nGAME OVER ({result.reason}) - Score: {self._game.score}")
                self._top_scores = self._game.machine.top_scores()

            self._renderer.render(self._screen, self._game.snapshot(now_ms), self._top_scores)
            pygame.display.flip()
            self._clock.tick(self._target_fps)

        self._leaderboard.close()
        pygame.quit()
        return self._game.best_score

    def _handle_events(self, now_ms: float) -> None:
        """Process pygame events."""
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self._running = False

            elif event.type == pygame.VIDEORESIZE:
                self._game.resize(event.w, event.h)

            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    self._running = False
                elif event.key in (pygame.K_SPACE, pygame.K_RETURN):
                    self._game.handle_input(InputEvent.JUMP_OR_START, now_ms)
                elif event.key == pygame.K_r:
                    self._game.handle_input(InputEvent.RESTART, now_ms)

            elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                self._game.handle_input(InputEvent.JUMP_OR_START, now_ms)

            elif event.type == pygame.FINGERDOWN:
                self._game.handle_input(InputEvent.JUMP_OR_START, now_ms)


def main():
    parser = argparse.ArgumentParser(description="Play flappy interactively")
    parser.add_argument("--name", type=str, default=None, help="Display name")
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument("--music", type=str, default=None, help="Background music file")
    parser.add_argument("--width", type=int, default=800, help="Window width (default: 800)")
    parser.add_argument("--height", type=int, default=600, help="Window height (default: 600)")
    parser.add_argument("--fps", type=int, default=60, help="Target FPS")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s"
    )

    try:
        config = load_config()
        player = HumanPlayer(
            config=config,
            seed=args.seed,
            player_name=args.name,
            music_path=args.music,
            window_width=args.width,
            window_height=args.height,
            target_fps=args.fps
        )
        best = player.run()
        print(f"\nBest Score: {best}")
        return 0
    except ImportError as e:
        print(f"Error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
