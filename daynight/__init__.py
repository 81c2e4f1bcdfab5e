"""In-universe clock and time-of-day lighting for tiled game maps."""
