"""Camera module for primary ray generation.

Components:
    pinhole: Fixed pinhole camera at the origin looking down -z

Ray generation maps pixel (x, y) to aspect-corrected image plane
coordinates:
    u in [-aspect, aspect]: left to right
    v in [-1, 1]: bottom to top (row 0 is the top row)
"""

from .pinhole import camera_origin, get_ray, get_ray_direction

__all__ = [
    "camera_origin",
    "get_ray",
    "get_ray_direction",
]
