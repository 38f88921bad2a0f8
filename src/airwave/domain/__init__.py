"""Domain layer: stations, favorites and playback."""
