"""Parse .cub scene files and explore them with a textured raycaster."""

__version__ = "0.1.0"
__all__ = ["model", "textutil", "mapgrid", "parser", "raycast"]