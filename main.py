"""Entry point for the day-night lighting preview window."""

from __future__ import annotations

import argparse
import logging
import os
import sys
from dataclasses import dataclass

os.environ.setdefault("PYGAME_HIDE_SUPPORT_PROMPT", "1")

import pygame

from daynight.config import DEFAULT_CONFIG_PATH, LightingConfig, load_config
from daynight.errors import DayNightError
from daynight.screen import PygameScreen
from daynight.session import Hooks, LocationSettings, LOCATION_LOADED, SESSION_START, STEP, Session

INTERNAL_WIDTH = 320
INTERNAL_HEIGHT = 200
PREVIEW_SIZE = (640, 400)
TARGET_FPS = 20

# Calm palette for the placeholder backdrop the tint is applied to.
SKY_COLOR = (96, 140, 196)
HORIZON_COLOR = (150, 182, 214)
GRASS_COLOR = (82, 128, 70)
PATH_COLOR = (164, 140, 100)
HUD_COLOR = (235, 230, 210)


class RuntimeArgs(argparse.Namespace):
    """Container for command-line runtime options."""

    config: str
    keyword: str | None
    minutes_per_frame: int
    step_minutes: int | None
    images: str
    fullscreen: bool
    frames: int
    debug: bool


@dataclass(frozen=True)
class PreviewState:
    """Keywords the preview can cycle through with the Tab key."""

    keywords: tuple[str, ...]

    def next_keyword(self, current: str) -> str:
        if current not in self.keywords:
            return self.keywords[0]
        return self.keywords[(self.keywords.index(current) + 1) % len(self.keywords)]


class ShutdownRequested(Exception):
    """Raised when the preview should exit immediately."""


def _non_negative_int(value: str) -> int:
    number = int(value)
    if number < 0:
        raise argparse.ArgumentTypeError(f"expected a non-negative integer, got {value}")
    return number


def parse_arguments(argv: list[str] | None = None) -> RuntimeArgs:
    """Parse CLI arguments for the preview window."""
    parser = argparse.ArgumentParser(description="Day-night lighting preview")
    parser.add_argument("--config", default=str(DEFAULT_CONFIG_PATH), help="lighting configuration JSON file")
    parser.add_argument("--keyword", help="lighting keyword for the previewed location")
    parser.add_argument(
        "--minutes-per-frame",
        type=_non_negative_int,
        default=1,
        help="in-universe minutes added every frame (0 pauses the clock)",
    )
    parser.add_argument(
        "--step-minutes",
        type=_non_negative_int,
        help="minutes added per simulated step (space bar); defaults to the configured value",
    )
    parser.add_argument("--images", default="img/pictures", help="directory holding overlay PNG images")
    parser.add_argument("--fullscreen", action="store_true", help="use a fullscreen window")
    parser.add_argument("--frames", type=_non_negative_int, default=0, help="stop after this many frames (0 runs until quit)")
    parser.add_argument("--debug", action="store_true", help="enable concise debug logging")

    args = parser.parse_args(argv, namespace=RuntimeArgs())

    if args.fullscreen and args.frames:
        parser.error("--fullscreen cannot be used with --frames")

    return args


def configure_logging(debug_enabled: bool) -> logging.Logger:
    """Create a logger that stays quiet unless debug is enabled."""
    logger = logging.getLogger("daynight")
    logger.handlers.clear()
    logger.propagate = False

    if debug_enabled:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter("%(levelname)s daynight %(message)s"))
        logger.addHandler(handler)
        logger.setLevel(logging.DEBUG)
    else:
        logger.addHandler(logging.NullHandler())
        logger.setLevel(logging.WARNING)

    return logger


def build_session(config: LightingConfig, screen: PygameScreen, args: RuntimeArgs) -> tuple[Session, Hooks]:
    """Create a session, hook it up, and fire the new-game and location events."""
    hooks = Hooks()
    session = Session(config, screen, hooks=hooks)
    session.install()

    hooks.emit(SESSION_START)
    hooks.emit(
        LOCATION_LOADED,
        LocationSettings(
            lighting_keyword=args.keyword,
            steps_advance_time=True,
            minutes_per_step=args.step_minutes,
        ),
    )
    return session, hooks


def _build_backdrop(size: tuple[int, int]) -> pygame.Surface:
    """Static landscape the tint and overlays are composited over."""
    width, height = size
    backdrop = pygame.Surface(size)
    horizon = height * 3 // 5

    for y in range(horizon):
        t = y / max(1, horizon - 1)
        color = tuple(int(round(sky + (low - sky) * t)) for sky, low in zip(SKY_COLOR, HORIZON_COLOR))
        pygame.draw.line(backdrop, color, (0, y), (width - 1, y))

    pygame.draw.rect(backdrop, GRASS_COLOR, pygame.Rect(0, horizon, width, height - horizon))
    path = [(width // 2 - 12, horizon), (width // 2 + 12, horizon), (width // 2 + 60, height), (width // 2 - 60, height)]
    pygame.draw.polygon(backdrop, PATH_COLOR, path)
    return backdrop


def _render_hud(surface: pygame.Surface, font: pygame.font.Font | None, session: Session) -> None:
    if font is None:
        return
    clock = session.clock
    lines = [
        clock.get_time_string(),
        f"lighting: {session.lighting.preset_keyword}",
    ]
    if session.config.bloodmoon.enabled:
        marker = " BLOODMOON" if clock.is_bloodmoon_night() else ""
        lines.append(f"moon phase: {clock.moon_phase()}{marker}")

    for index, text in enumerate(lines):
        surface.blit(font.render(text, True, HUD_COLOR), (4, 4 + index * 11))


def _handle_event(event: pygame.event.Event, session: Session, hooks: Hooks, preview: PreviewState) -> None:
    """Translate preview key presses into session commands."""
    if event.type == pygame.QUIT:
        raise ShutdownRequested
    if event.type != pygame.KEYDOWN:
        return

    if event.key == pygame.K_ESCAPE:
        raise ShutdownRequested
    if event.key == pygame.K_SPACE:
        hooks.emit(STEP)
    elif event.key == pygame.K_r:
        session.reset_time()
    elif event.key == pygame.K_n:
        session.set_time(8, 0, "PM")
    elif event.key == pygame.K_m:
        session.set_time(6, 0, "AM")
    elif event.key == pygame.K_l:
        session.reset_lighting(session.config.tone_fade_duration)
    elif event.key == pygame.K_TAB:
        keyword = preview.next_keyword(session.lighting.preset_keyword)
        session.use_lighting_preset(keyword, session.config.tone_fade_duration)


def run(argv: list[str] | None = None) -> int:
    """Run the preview loop."""
    args = parse_arguments(argv)
    logger = configure_logging(args.debug)

    try:
        config = load_config(args.config)
    except DayNightError as error:
        logger.error("%s", error)
        print(f"daynight: {error}", file=sys.stderr)
        return 2

    pygame.init()
    if args.fullscreen:
        info = pygame.display.Info()
        window = pygame.display.set_mode((info.current_w, info.current_h), pygame.FULLSCREEN)
    else:
        window = pygame.display.set_mode(PREVIEW_SIZE)
    pygame.display.set_caption("Day-Night Preview")

    internal_surface = pygame.Surface((INTERNAL_WIDTH, INTERNAL_HEIGHT))
    backdrop = _build_backdrop((INTERNAL_WIDTH, INTERNAL_HEIGHT))
    font = pygame.font.Font(None, 14) if pygame.font.get_init() else None

    screen = PygameScreen(image_dir=args.images)
    session, hooks = build_session(config, screen, args)
    preview = PreviewState(keywords=(config.outdoor_keyword, *config.presets))
    frame_clock = pygame.time.Clock()
    frames = 0

    try:
        while not args.frames or frames < args.frames:
            for event in pygame.event.get():
                _handle_event(event, session, hooks, preview)

            if args.minutes_per_frame:
                session.clock.advance(args.minutes_per_frame)
            screen.update()

            internal_surface.blit(backdrop, (0, 0))
            screen.render(internal_surface)
            _render_hud(internal_surface, font, session)

            pygame.transform.scale(internal_surface, window.get_size(), window)
            pygame.display.flip()
            frame_clock.tick(TARGET_FPS)
            frames += 1
    except ShutdownRequested:
        pass
    finally:
        pygame.quit()
    return 0


def main(argv: list[str] | None = None) -> None:
    """CLI entry point."""
    raise SystemExit(run(argv))


if __name__ == "__main__":
    main()
