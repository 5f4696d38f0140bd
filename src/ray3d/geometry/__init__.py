"""Geometry module for the scene's primitives.

Components:
    sphere: Sphere primitive with near-root ray-sphere intersection
    floor: Bounded horizontal plane with checkerboard parity

All intersection routines are Taichi functions (@ti.func). The sphere
supports both closest-hit and any-hit (shadow) queries; the floor never
casts shadows.
"""

from .floor import Floor, checker_parity, intersect_floor
from .sphere import (
    DEGENERATE_EPSILON,
    T_EPSILON,
    HitRecord,
    Sphere,
    intersect_sphere,
    miss_record,
    sphere_blocks,
    sphere_near_root,
)

__all__ = [
    "Sphere",
    "HitRecord",
    "miss_record",
    "sphere_near_root",
    "intersect_sphere",
    "sphere_blocks",
    "T_EPSILON",
    "DEGENERATE_EPSILON",
    "Floor",
    "intersect_floor",
    "checker_parity",
]
