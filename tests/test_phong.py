"""Tests for the Phong material model and registry.

Tests cover:
- Material registration and validation
- Material lookup inside kernels
- Specular term edge cases (negative branch, zero base, 0^0)
"""

import pytest
import taichi as ti


class TestMaterialRegistry:
    """Tests for add_phong_material and get_material."""

    def test_add_material_returns_sequential_ids(self):
        """Test that materials get sequential ids."""
        from whitted.materials.phong import add_phong_material, get_material_count

        assert add_phong_material((1.0, 0.0, 0.0)) == 0
        assert add_phong_material((0.0, 1.0, 0.0)) == 1
        assert get_material_count() == 2

    def test_clear_materials(self):
        """Test that clear_materials resets the count."""
        from whitted.materials.phong import (
            add_phong_material,
            clear_materials,
            get_material_count,
        )

        add_phong_material((1.0, 1.0, 1.0))
        clear_materials()
        assert get_material_count() == 0

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"color": (-0.1, 0.5, 0.5)},
            {"color": (0.5, 0.5)},
            {"color": (0.5, 0.5, 0.5), "phong_exp": -1.0},
            {"color": (0.5, 0.5, 0.5), "diffuse_const": 1.5},
            {"color": (0.5, 0.5, 0.5), "ambient_const": -0.2},
            {"color": (0.5, 0.5, 0.5), "specular_const": 2.0},
            {"color": (0.5, 0.5, 0.5), "reflectance": 1.01},
        ],
    )
    def test_invalid_parameters_raise(self, kwargs):
        """Test that out-of-range parameters raise ValueError."""
        from whitted.materials.phong import add_phong_material, get_material_count

        with pytest.raises(ValueError):
            add_phong_material(**kwargs)
        assert get_material_count() == 0

    def test_color_above_one_is_allowed(self):
        """Test that colors are not clamped or rejected above 1."""
        from whitted.materials.phong import add_phong_material

        assert add_phong_material((1.5, 1.0, 1.0)) == 0

    def test_get_material_in_kernel(self):
        """Test that stored parameters are read back by id."""
        from whitted.materials.phong import add_phong_material, get_material

        add_phong_material((0.1, 0.2, 0.3))
        add_phong_material(
            (0.9, 0.8, 0.7),
            phong_exp=25.0,
            diffuse_const=0.5,
            ambient_const=0.25,
            specular_const=0.75,
            reflectance=0.4,
        )

        color = ti.field(dtype=ti.math.vec3, shape=())
        params = ti.field(dtype=ti.f32, shape=5)

        @ti.kernel
        def test_kernel():
            mat = get_material(1)
            color[None] = mat.color
            params[0] = mat.phong_exp
            params[1] = mat.diffuse_const
            params[2] = mat.ambient_const
            params[3] = mat.specular_const
            params[4] = mat.reflectance

        test_kernel()
        assert color[None].to_numpy().tolist() == pytest.approx([0.9, 0.8, 0.7], abs=1e-6)
        assert params.to_numpy().tolist() == pytest.approx([25.0, 0.5, 0.25, 0.75, 0.4], abs=1e-6)


class TestSpecularTerm:
    """Tests for specular_term."""

    def _evaluate(self, alignment, phong_exp):
        from whitted.materials.phong import specular_term

        result = ti.field(dtype=ti.f32, shape=())

        @ti.kernel
        def test_kernel(a: ti.f32, e: ti.f32):
            result[None] = specular_term(a, e)

        test_kernel(alignment, phong_exp)
        return result[None]

    def test_aligned_highlight_is_full(self):
        """Test perfect alignment (dot = -1) gives weight 1."""
        assert abs(self._evaluate(-1.0, 50.0) - 1.0) < 1e-6

    def test_negative_branch_raised_to_exponent(self):
        """Test that the magnitude of the negative branch is raised to the exponent."""
        assert abs(self._evaluate(-0.5, 2.0) - 0.25) < 1e-6
        assert abs(self._evaluate(-0.5, 3.0) - 0.125) < 1e-6

    @pytest.mark.parametrize("phong_exp", [2.5, 0.5, 49.9])
    def test_non_integer_exponent_contributes_nothing(self, phong_exp):
        """Test that a negative base with a non-integer exponent gives exactly zero."""
        assert self._evaluate(-0.5, phong_exp) == 0.0
        assert self._evaluate(-1.0, phong_exp) == 0.0

    def test_odd_exponent_is_not_negative(self):
        """Test that odd integer exponents still add light."""
        assert self._evaluate(-0.5, 1.0) == pytest.approx(0.5, abs=1e-6)
        assert self._evaluate(-0.5, 3.0) > 0.0

    def test_positive_alignment_contributes_nothing(self):
        """Test that the positive branch is clamped away."""
        assert self._evaluate(0.7, 50.0) == 0.0
        assert self._evaluate(0.7, 2.5) == 0.0

    def test_zero_base_with_zero_exponent_is_zero(self):
        """Test that 0^0 is pinned to zero contribution."""
        assert self._evaluate(0.0, 0.0) == 0.0
        assert self._evaluate(0.3, 0.0) == 0.0

    def test_zero_exponent_with_nonzero_base(self):
        """Test that any highlight raised to 0 gives weight 1."""
        assert abs(self._evaluate(-0.2, 0.0) - 1.0) < 1e-6
