"""Unit tests for the bounded checkerboard floor."""

import pytest
import taichi as ti


def _intersect_floor(origin, direction, t_max=1e30):
    """Intersect the default floor (y = -2, square |x| < 10, |z + 5| < 10)."""
    from src.ray3d.geometry.floor import Floor, intersect_floor
    from src.ray3d.core.ray import vec3

    hit = ti.field(dtype=ti.i32, shape=())
    t_val = ti.field(dtype=ti.f64, shape=())
    point = ti.Vector.field(3, dtype=ti.f64, shape=())
    normal = ti.Vector.field(3, dtype=ti.f64, shape=())

    @ti.kernel
    def test_kernel(
        ox: ti.f64, oy: ti.f64, oz: ti.f64,
        dx: ti.f64, dy: ti.f64, dz: ti.f64,
        t_hi: ti.f64,
    ):
        floor = Floor(height=-2.0, center_x=0.0, center_z=-5.0, half_extent=10.0)
        record = intersect_floor(vec3(ox, oy, oz), vec3(dx, dy, dz), floor, 0.001, t_hi)
        hit[None] = record.hit
        t_val[None] = record.t
        point[None] = record.point
        normal[None] = record.normal

    test_kernel(*origin, *direction, t_max)
    return hit[None], t_val[None], point.to_numpy(), normal.to_numpy()


class TestFloorIntersection:
    """Tests for ray-floor intersection."""

    def test_straight_down(self):
        hit, t, p, n = _intersect_floor((0.5, 0.0, -2.5), (0.0, -1.0, 0.0))

        assert hit == 1
        assert abs(t - 2.0) < 1e-12
        assert abs(p[1] + 2.0) < 1e-12
        assert tuple(n) == (0.0, 1.0, 0.0)

    def test_parallel_ray_misses(self):
        hit, _, _, _ = _intersect_floor((0.0, 0.0, 0.0), (0.0, 0.0, -1.0))
        assert hit == 0

    def test_upward_ray_misses(self):
        hit, _, _, _ = _intersect_floor((0.0, -5.0, -5.0), (0.0, 1.0, 0.0))
        assert hit == 0

    def test_hit_outside_bounds_misses(self):
        """The plane is clipped; far-away points fall through to the background."""
        hit, _, _, _ = _intersect_floor((0.0, 0.0, 0.0), (0.0, -1.0, -20.0))
        assert hit == 0

    def test_bounds_are_exclusive(self):
        hit, _, _, _ = _intersect_floor((10.0, 0.0, -5.0), (0.0, -1.0, 0.0))
        assert hit == 0

        hit, _, _, _ = _intersect_floor((9.5, 0.0, -5.0), (0.0, -1.0, 0.0))
        assert hit == 1

    def test_t_max_rejects_farther_hit(self):
        hit, _, _, _ = _intersect_floor((0.0, 0.0, -5.0), (0.0, -1.0, 0.0), t_max=1.5)
        assert hit == 0


class TestCheckerParity:
    """Tests for checkerboard cell parity."""

    @pytest.mark.parametrize(
        "x, z, expected",
        [
            (0.5, 0.5, 0),
            (1.5, 0.5, 1),
            (1.5, 1.5, 0),
            (-0.5, 0.5, 1),
            (-0.5, -0.5, 0),
            (0.5, -2.5, 1),
            (1.5, -2.5, 0),
            (-3.25, -6.75, 1),
            (-3.25, -7.75, 0),
        ],
    )
    def test_parity(self, x, z, expected):
        from src.ray3d.geometry.floor import checker_parity
        from src.ray3d.core.ray import vec3

        result = ti.field(dtype=ti.i32, shape=())

        @ti.kernel
        def test_kernel(px: ti.f64, pz: ti.f64):
            result[None] = checker_parity(vec3(px, -2.0, pz))

        test_kernel(x, z)
        assert result[None] == expected
