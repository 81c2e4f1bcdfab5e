"""Presentation layer: screen tint and overlay pictures rendered with pygame."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Protocol

import pygame

from daynight.lighting import (
    BLEND_ADDITIVE,
    BLEND_MULTIPLY,
    BLEND_SCREEN,
    ORIGIN_CENTER,
    OverlayDescriptor,
    Tone,
)

LOGGER = logging.getLogger(__name__)

# Pygame has no "screen" blend; lighten is the closest built-in.
_BLEND_FLAGS = {
    BLEND_ADDITIVE: pygame.BLEND_RGB_ADD,
    BLEND_MULTIPLY: pygame.BLEND_RGB_MULT,
    BLEND_SCREEN: pygame.BLEND_RGB_MAX,
}


class Screen(Protocol):
    """What the lighting core asks of the presentation layer.

    Durations are in animation ticks. Starting a new tint or moving a picture
    replaces any fade already running on that tint or layer.
    """

    def start_tint(self, tone: Tone, duration: int) -> None: ...

    def show_picture(self, layer: int, overlay: OverlayDescriptor, opacity: int) -> None: ...

    def move_picture(self, layer: int, overlay: OverlayDescriptor, opacity: int, duration: int) -> None: ...

    def erase_picture(self, layer: int) -> None: ...


@dataclass
class PictureState:
    """Current and target placement of one picture layer."""

    overlay: OverlayDescriptor
    x: float
    y: float
    scale_x: float
    scale_y: float
    opacity: float
    target_x: float = 0.0
    target_y: float = 0.0
    target_scale_x: float = 100.0
    target_scale_y: float = 100.0
    target_opacity: float = 0.0
    duration: int = 0

    @classmethod
    def shown(cls, overlay: OverlayDescriptor, opacity: int) -> PictureState:
        state = cls(
            overlay=overlay,
            x=float(overlay.x),
            y=float(overlay.y),
            scale_x=float(overlay.width_percent),
            scale_y=float(overlay.height_percent),
            opacity=float(opacity),
        )
        state.retarget(overlay, opacity, 0)
        return state

    def retarget(self, overlay: OverlayDescriptor, opacity: int, duration: int) -> None:
        self.overlay = overlay
        self.target_x = float(overlay.x)
        self.target_y = float(overlay.y)
        self.target_scale_x = float(overlay.width_percent)
        self.target_scale_y = float(overlay.height_percent)
        self.target_opacity = float(opacity)
        self.duration = max(0, duration)
        if self.duration == 0:
            self.x, self.y = self.target_x, self.target_y
            self.scale_x, self.scale_y = self.target_scale_x, self.target_scale_y
            self.opacity = self.target_opacity

    def update(self) -> None:
        if self.duration <= 0:
            return
        d = self.duration
        self.x = (self.x * (d - 1) + self.target_x) / d
        self.y = (self.y * (d - 1) + self.target_y) / d
        self.scale_x = (self.scale_x * (d - 1) + self.target_scale_x) / d
        self.scale_y = (self.scale_y * (d - 1) + self.target_scale_y) / d
        self.opacity = (self.opacity * (d - 1) + self.target_opacity) / d
        self.duration -= 1

    @property
    def faded_out(self) -> bool:
        return self.duration == 0 and self.opacity <= 0.0


class PygameScreen:
    """Advance tint and picture fades per tick and composite them onto a surface."""

    def __init__(
        self,
        image_dir: str | Path = "img/pictures",
        image_loader: Callable[[str], pygame.Surface | None] | None = None,
    ) -> None:
        self.image_dir = Path(image_dir)
        self._image_loader = image_loader or self._load_image
        self._images: dict[str, pygame.Surface | None] = {}
        self._tone = [0.0, 0.0, 0.0, 0.0]
        self._tone_target = [0.0, 0.0, 0.0, 0.0]
        self._tone_duration = 0
        self.pictures: dict[int, PictureState] = {}

    # --- Screen protocol --------------------------------------------------

    def start_tint(self, tone: Tone, duration: int) -> None:
        self._tone_target = [float(channel) for channel in tone.as_tuple()]
        self._tone_duration = max(0, duration)
        if self._tone_duration == 0:
            self._tone = list(self._tone_target)
        LOGGER.info("Tint to %s over %d ticks", tone.as_tuple(), self._tone_duration)

    def show_picture(self, layer: int, overlay: OverlayDescriptor, opacity: int) -> None:
        self.pictures[layer] = PictureState.shown(overlay, opacity)

    def move_picture(self, layer: int, overlay: OverlayDescriptor, opacity: int, duration: int) -> None:
        picture = self.pictures.get(layer)
        if picture is None:
            picture = PictureState.shown(overlay, opacity)
            self.pictures[layer] = picture
        picture.retarget(overlay, opacity, duration)

    def erase_picture(self, layer: int) -> None:
        self.pictures.pop(layer, None)

    # --- Frame update -----------------------------------------------------

    @property
    def tone(self) -> tuple[int, int, int, int]:
        return tuple(int(round(channel)) for channel in self._tone)

    def is_tinting(self) -> bool:
        return self._tone_duration > 0

    def update(self) -> None:
        """Advance every running fade by one tick."""
        if self._tone_duration > 0:
            d = self._tone_duration
            self._tone = [(current * (d - 1) + target) / d for current, target in zip(self._tone, self._tone_target)]
            self._tone_duration -= 1

        for layer in list(self.pictures):
            picture = self.pictures[layer]
            picture.update()
            if picture.faded_out:
                del self.pictures[layer]

    def _load_image(self, image: str) -> pygame.Surface | None:
        path = self.image_dir / f"{image}.png"
        try:
            return pygame.image.load(str(path))
        except (pygame.error, FileNotFoundError):
            LOGGER.warning("Overlay image %s could not be loaded; it will not be drawn", path)
            return None

    def _image(self, image: str) -> pygame.Surface | None:
        if image not in self._images:
            self._images[image] = self._image_loader(image)
        return self._images[image]

    # --- Rendering --------------------------------------------------------

    def _render_tone(self, surface: pygame.Surface) -> None:
        red, green, blue, gray = self.tone
        if gray > 0:
            desaturated = pygame.transform.grayscale(surface)
            desaturated.set_alpha(min(255, gray))
            surface.blit(desaturated, (0, 0))

        additive = (max(0, red), max(0, green), max(0, blue))
        subtractive = (max(0, -red), max(0, -green), max(0, -blue))
        if any(additive):
            surface.fill(additive, special_flags=pygame.BLEND_RGB_ADD)
        if any(subtractive):
            surface.fill(subtractive, special_flags=pygame.BLEND_RGB_SUB)

    def _render_picture(self, surface: pygame.Surface, picture: PictureState) -> None:
        image = self._image(picture.overlay.image)
        if image is None or picture.opacity <= 0.0:
            return

        width = int(round(image.get_width() * picture.scale_x / 100.0))
        height = int(round(image.get_height() * picture.scale_y / 100.0))
        if width <= 0 or height <= 0:
            return

        scaled = pygame.transform.scale(image, (width, height))
        scaled.set_alpha(int(round(picture.opacity)))
        x, y = picture.x, picture.y
        if picture.overlay.origin == ORIGIN_CENTER:
            x -= width / 2
            y -= height / 2
        flags = _BLEND_FLAGS.get(picture.overlay.blend_mode, 0)
        surface.blit(scaled, (int(round(x)), int(round(y))), special_flags=flags)

    def render(self, surface: pygame.Surface) -> None:
        """Apply the tint, then draw pictures in layer order."""
        self._render_tone(surface)
        for layer in sorted(self.pictures):
            self._render_picture(surface, self.pictures[layer])
