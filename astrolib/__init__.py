"""Asteroids-style arcade game engine for a small monochrome display."""

__version__ = "0.1.0"
__all__ = ["audio", "display", "game", "gamedata", "render", "storage"]