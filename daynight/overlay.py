"""Overlay picture transitions between lighting presets."""

from __future__ import annotations

import logging
from dataclasses import replace

from daynight.lighting import OverlayDescriptor
from daynight.screen import Screen

LOGGER = logging.getLogger(__name__)


class OverlayTransitionEngine:
    """Keep at most one preset overlay on screen and fade between them.

    Applying the descriptor that is already shown does nothing, so re-applying
    a preset never restarts its fade. Overlays on different layers cross-fade;
    overlays sharing a layer are moved in place.

    Layers that were sent fading out stay tracked until an instant change
    erases them, so a location switch never leaves a half-faded picture behind.
    """

    def __init__(self, screen: Screen) -> None:
        self.screen = screen
        self.last_overlay: OverlayDescriptor | None = None
        self.fading_layers: set[int] = set()

    def apply_overlay(self, overlay: OverlayDescriptor | None, duration: int) -> None:
        if overlay is None or not overlay.has_image:
            self.clear_overlay(duration)
            return
        if overlay.layer is None:
            LOGGER.warning("Overlay %r has no layer number; treating it as no overlay", overlay.image)
            self.clear_overlay(duration)
            return
        if overlay == self.last_overlay:
            return

        previous = self.last_overlay
        if duration <= 0:
            self._erase_fading(keep=overlay.layer)
            if previous is not None and previous.layer != overlay.layer:
                self.screen.erase_picture(previous.layer)
            self.screen.show_picture(overlay.layer, overlay, overlay.opacity)
        elif previous is not None and previous.layer == overlay.layer:
            self._move_in_place(previous, overlay, duration)
        else:
            self._cross_fade(previous, overlay, duration)

        LOGGER.debug("Overlay %r on layer %d over %d ticks", overlay.image, overlay.layer, duration)
        self.last_overlay = overlay

    def _move_in_place(self, previous: OverlayDescriptor, overlay: OverlayDescriptor, duration: int) -> None:
        if previous.image != overlay.image:
            LOGGER.warning(
                "Overlays %r and %r share layer %d and cannot cross-fade; swapping images abruptly",
                previous.image,
                overlay.image,
                overlay.layer,
            )
            self.screen.show_picture(overlay.layer, replace(previous, image=overlay.image), previous.opacity)
        self.screen.move_picture(overlay.layer, overlay, overlay.opacity, duration)

    def _cross_fade(self, previous: OverlayDescriptor | None, overlay: OverlayDescriptor, duration: int) -> None:
        if previous is not None:
            self.screen.move_picture(previous.layer, previous, 0, duration)
            self.fading_layers.add(previous.layer)
        self.fading_layers.discard(overlay.layer)
        self.screen.show_picture(overlay.layer, overlay, 0)
        self.screen.move_picture(overlay.layer, overlay, overlay.opacity, duration)

    def _erase_fading(self, keep: int | None = None) -> None:
        for layer in sorted(self.fading_layers):
            if layer != keep:
                self.screen.erase_picture(layer)
        self.fading_layers.clear()

    def clear_overlay(self, duration: int) -> None:
        if duration <= 0:
            self._erase_fading()

        previous = self.last_overlay
        if previous is None:
            return
        if duration <= 0:
            self.screen.erase_picture(previous.layer)
        else:
            self.screen.move_picture(previous.layer, previous, 0, duration)
            self.fading_layers.add(previous.layer)
        LOGGER.debug("Cleared overlay %r over %d ticks", previous.image, duration)
        self.last_overlay = None

    def reset(self) -> None:
        """Drop every overlay picture at once, e.g. when a new location loads."""
        self.clear_overlay(0)
