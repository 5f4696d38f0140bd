"""Unit tests for sphere and floor shading with per-step truncation."""

import taichi as ti

LIGHT = (0.577, 0.577, 0.577)


def _sphere_color(color, normal, shadowed):
    from src.ray3d.core.ray import vec3
    from src.ray3d.core.shading import sphere_base_color

    result = ti.Vector.field(3, dtype=ti.f64, shape=())

    @ti.kernel
    def test_kernel(
        r: ti.f64, g: ti.f64, b: ti.f64,
        nx: ti.f64, ny: ti.f64, nz: ti.f64,
        s: ti.i32,
    ):
        result[None] = sphere_base_color(
            vec3(r, g, b), vec3(nx, ny, nz), vec3(LIGHT[0], LIGHT[1], LIGHT[2]), s
        )

    test_kernel(*color, *normal, shadowed)
    return tuple(result.to_numpy())


class TestSphereShading:
    """Tests for sphere_base_color and diffuse_factor."""

    def test_lit_surface_facing_camera(self):
        """n.l = 0.577, factor 0.3 + 0.7 * 0.577 = 0.7039."""
        assert _sphere_color((200.0, 100.0, 50.0), (0.0, 0.0, 1.0), 0) == (140.0, 70.0, 35.0)

    def test_result_is_truncated(self):
        r, g, b = _sphere_color((255.0, 100.0, 100.0), (0.0, 0.0, 1.0), 0)
        assert (r, g, b) == (179.0, 70.0, 70.0)

    def test_back_facing_clamps_to_minimum(self):
        """Negative n.l is clamped to the 0.2 floor, like a shadow."""
        facing_away = _sphere_color((200.0, 100.0, 50.0), (0.0, -1.0, 0.0), 0)
        shadowed = _sphere_color((200.0, 100.0, 50.0), (0.0, 0.0, 1.0), 1)
        assert facing_away == shadowed
        # 0.3 + 0.2 * 0.7 rounds just below 0.44
        assert shadowed == (87.0, 43.0, 21.0)

    def test_shadow_overrides_diffuse(self):
        lit = _sphere_color((200.0, 100.0, 50.0), (0.0, 0.0, 1.0), 0)
        shadowed = _sphere_color((200.0, 100.0, 50.0), (0.0, 0.0, 1.0), 1)
        assert all(s < l for s, l in zip(shadowed, lit))


class TestFloorShading:
    """Tests for floor_base_color."""

    def _floor_color(self, parity, shadowed):
        from src.ray3d.core.ray import vec3
        from src.ray3d.core.shading import floor_base_color

        result = ti.Vector.field(3, dtype=ti.f64, shape=())

        @ti.kernel
        def test_kernel(p: ti.i32, s: ti.i32):
            result[None] = floor_base_color(
                vec3(200.0, 200.0, 200.0),
                vec3(100.0, 100.0, 100.0),
                p,
                0.8,
                0.3,
                s,
            )

        test_kernel(parity, shadowed)
        return tuple(result.to_numpy())

    def test_light_cell_lit(self):
        assert self._floor_color(0, 0) == (160.0, 160.0, 160.0)

    def test_dark_cell_lit(self):
        assert self._floor_color(1, 0) == (80.0, 80.0, 80.0)

    def test_dark_cell_shadowed(self):
        assert self._floor_color(1, 1) == (30.0, 30.0, 30.0)


class TestBlend:
    """Tests for the truncated reflection blend."""

    def test_blend_truncates(self):
        from src.ray3d.core.ray import vec3
        from src.ray3d.core.shading import blend

        result = ti.Vector.field(3, dtype=ti.f64, shape=())

        @ti.kernel
        def test_kernel():
            result[None] = blend(vec3(81.0, 10.0, 0.0), vec3(30.0, 40.0, 60.0), 0.5, 0.5)

        test_kernel()
        assert tuple(result.to_numpy()) == (55.0, 25.0, 30.0)
