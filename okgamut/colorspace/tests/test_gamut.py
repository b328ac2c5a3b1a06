"""Tests for gamut checking, gamut mapping policies and chroma limits."""

import numpy as np
import pytest

from okgamut.colorspace import gamut
from okgamut.colorspace import (
    GAMUT_POLICIES,
    InvalidColorSpaceInput,
    UnsupportedGamutPolicy,
    bisect_chroma,
    clip_linear_srgb,
    cone_boundary,
    cone_clamp,
    get_chroma_limit_lut,
    is_in_gamut,
    iter_bisect_chroma,
    map_oklch_to_gamut,
    map_to_gamut,
    max_chroma_fast,
    max_chroma_for_hue,
    max_chroma_for_lh,
    oklab_to_linear_srgb,
    oklab_to_oklch,
    oklch_to_oklab,
)


def _lab(L, C, H):
    """Oklab (L, a, b) for an Oklch color, as plain floats."""
    L, a, b = oklch_to_oklab(L, C, np.float64(H))
    return float(L), float(a), float(b)


class TestIsInGamut:
    """Test the closed-cube gamut test."""

    @pytest.mark.parametrize("rgb", [(0, 0, 0), (1, 1, 1), (0.5, 0.5, 0.5), (0, 1, 0.25)])
    def test_inside_and_on_boundary(self, rgb):
        """0 and 1 are both in gamut."""
        assert is_in_gamut(*rgb)

    @pytest.mark.parametrize("rgb", [(1.1, 0, 0), (-0.01, 0, 0), (0.5, 0.5, 1.0000001)])
    def test_outside(self, rgb):
        assert not is_in_gamut(*rgb)

    def test_arrays(self):
        r = np.array([0.0, 1.1, 0.5])
        g = np.array([0.0, 0.5, -0.5])
        b = np.array([1.0, 0.5, 0.5])
        np.testing.assert_array_equal(is_in_gamut(r, g, b), [True, False, False])


class TestClip:
    """Test the clip policy."""

    def test_returns_raw_values(self):
        """No correction is applied; out-of-range values pass through."""
        lab = (0.7, 0.4, 0.0)
        np.testing.assert_array_equal(clip_linear_srgb(*lab), oklab_to_linear_srgb(*lab))

    def test_map_to_gamut_clip(self):
        result = map_to_gamut(0.7, 0.4, 0.0, policy='clip')
        assert not result.in_gamut
        assert max(result.rgb) > 1


class TestBisectChroma:
    """Test chroma bisection."""

    def test_ten_evaluations(self):
        steps = list(iter_bisect_chroma(0.7, 0.4, 0.0))
        assert len(steps) == 10
        assert [s.iteration for s in steps] == list(range(10))

    def test_bracket_invariant(self):
        """lower always tests in gamut, upper never does, the bracket halves."""
        L, a, b = 0.7, 0.4, 0.0
        steps = list(iter_bisect_chroma(L, a, b))

        for i, step in enumerate(steps):
            assert float(step.lower) < float(step.scale) < float(step.upper)
            assert float(step.scale) == (float(step.lower) + float(step.upper)) / 2
            assert float(step.upper) - float(step.lower) == pytest.approx(2.0 ** -i)

            lower_rgb = oklab_to_linear_srgb(L, float(step.lower) * a, float(step.lower) * b)
            upper_rgb = oklab_to_linear_srgb(L, float(step.upper) * a, float(step.upper) * b)
            assert is_in_gamut(*lower_rgb)
            assert not is_in_gamut(*upper_rgb)
            assert bool(step.in_gamut) == bool(is_in_gamut(*step.rgb))

            if i + 1 < len(steps):
                following = steps[i + 1]
                if step.in_gamut:
                    assert float(following.lower) == float(step.scale)
                    assert float(following.upper) == float(step.upper)
                else:
                    assert float(following.lower) == float(step.lower)
                    assert float(following.upper) == float(step.scale)

    def test_result_is_last_midpoint(self):
        """The answer is the tenth midpoint, not the lower bound."""
        L, a, b = 0.7, 0.4, 0.0
        last = list(iter_bisect_chroma(L, a, b))[-1]
        np.testing.assert_array_equal(bisect_chroma(L, a, b), last.rgb)

    def test_residual_can_stay_out_of_gamut(self):
        """Known residual: the last midpoint may be marginally out of gamut.

        At L=0.7, C=0.4, hue 0 the tenth midpoint overshoots red by <0.1%.
        Downstream clamping absorbs it.
        """
        rgb = bisect_chroma(*_lab(0.7, 0.4, 0.0))
        assert not is_in_gamut(*rgb)
        assert max(rgb) < 1.01
        assert min(rgb) > -0.01

    def test_usually_lands_in_gamut(self):
        rgb = bisect_chroma(*_lab(0.7, 0.4, 15.0))
        assert is_in_gamut(*rgb)

    def test_preserves_lightness_and_hue(self):
        """Only chroma is scaled."""
        L, a, b = _lab(0.6, 0.35, 140.0)
        rgb = bisect_chroma(L, a, b)
        last = list(iter_bisect_chroma(L, a, b))[-1]
        assert 0 < float(last.scale) < 1
        np.testing.assert_allclose(
            rgb, oklab_to_linear_srgb(L, float(last.scale) * a, float(last.scale) * b),
        )

    def test_in_gamut_input_unchanged(self):
        lab = (0.5, 0.02, -0.03)
        np.testing.assert_array_equal(bisect_chroma(*lab), oklab_to_linear_srgb(*lab))

    def test_arrays_mix_in_and_out_of_gamut(self):
        """In-gamut elements are kept, out-of-gamut ones are bisected."""
        L = np.array([0.5, 0.7, 0.7])
        a = np.array([0.02, 0.4, 0.4 * np.cos(np.radians(15.0))])
        b = np.array([-0.03, 0.0, 0.4 * np.sin(np.radians(15.0))])

        r, g, bb = bisect_chroma(L, a, b)
        r0, g0, b0 = oklab_to_linear_srgb(L, a, b)

        assert (r[0], g[0], bb[0]) == (r0[0], g0[0], b0[0])
        assert max(r[1], g[1], bb[1]) < 1.01
        assert is_in_gamut(r[2], g[2], bb[2])

    def test_invalid_iterations(self):
        with pytest.raises(ValueError):
            list(iter_bisect_chroma(0.5, 0.1, 0.1, iterations=0))


class TestConeClamp:
    """Test analytic clamping against the per-hue cone."""

    def test_boundary_is_noop_exact(self):
        """A color exactly on the cone boundary is returned unchanged."""
        L = 0.6
        a = float(max_chroma_for_hue(0.0)) * L
        L2, a2, b2 = cone_clamp(L, a, 0.0)
        assert (float(L2), float(a2), float(b2)) == (L, a, 0.0)

    @pytest.mark.parametrize("H", [3.0, 47.5, 123.4, 181.0, 222.2, 300.0, 333.3])
    @pytest.mark.parametrize("L", [0.1, 0.45, 0.8, 1.0])
    def test_boundary_from_oklch_is_noop(self, L, H):
        """Rounding in sqrt and atan2 does not push a boundary color over."""
        limit = float(max_chroma_for_hue(H)) * L
        _, a, b = _lab(L, limit, H)
        _, a2, b2 = cone_clamp(L, a, b)
        assert (float(a2), float(b2)) == (a, b)

    def test_explicit_limit(self):
        """A supplied limit replaces the search."""
        L, a, b = _lab(0.5, 0.4, 200.0)
        limit = max_chroma_for_hue(200.0)
        np.testing.assert_allclose(
            cone_clamp(L, a, b, max_chroma=limit), cone_clamp(L, a, b), rtol=1e-12,
        )
        _, a2, b2 = cone_clamp(L, a, b, max_chroma=0.1)
        assert np.hypot(a2, b2) == pytest.approx(0.05)

    def test_explicit_limit_skips_search(self, monkeypatch):
        calls = []
        monkeypatch.setattr(gamut, 'max_chroma_for_hue', lambda h: calls.append(h))
        monkeypatch.setattr(gamut, 'max_chroma_fast', lambda h: calls.append(h))

        cone_clamp(np.full(100, 0.5), np.full(100, 0.3), np.zeros(100), max_chroma=0.4)
        assert calls == []

    def test_inside_unchanged(self):
        L, a, b = _lab(0.6, 0.05, 200.0)
        _, a2, b2 = cone_clamp(L, a, b)
        assert (float(a2), float(b2)) == (a, b)

    def test_outside_scaled_to_limit(self):
        """Chroma is reduced to the limit; L and hue are preserved."""
        L, C, H = 0.5, 0.4, 200.0
        L2, a2, b2 = cone_clamp(*_lab(L, C, H))

        _, C2, H2 = oklab_to_oklch(L2, a2, b2)
        assert float(L2) == L
        np.testing.assert_allclose(C2, float(max_chroma_for_hue(H)) * L, rtol=1e-12)
        np.testing.assert_allclose(H2, H, atol=1e-9)

    def test_cone_is_exact_on_lower_faces(self):
        """Clamped colors never go negative, the upper faces are not enforced."""
        rgb = oklab_to_linear_srgb(*cone_clamp(*_lab(0.5, 0.4, 200.0)))
        assert min(rgb) > -1e-9
        assert min(rgb) < 1e-6

        rgb = oklab_to_linear_srgb(*cone_clamp(*_lab(1.0, 0.5, 0.0)))
        assert max(rgb) > 1

    def test_black_collapses_to_gray_axis(self):
        L, a, b = cone_clamp(0.0, 0.3, -0.1)
        assert (float(a), float(b)) == (0.0, 0.0)

    def test_fast_uses_lut(self):
        L, C, H = 0.5, 0.4, 45.0
        _, a, b = cone_clamp(*_lab(L, C, H), fast=True)
        np.testing.assert_allclose(np.hypot(a, b), get_chroma_limit_lut()[45] * L, rtol=1e-9)


class TestMapToGamut:
    """Test policy dispatch."""

    @pytest.mark.parametrize("policy", GAMUT_POLICIES)
    def test_in_gamut_passthrough(self, policy):
        """Every policy leaves in-gamut colors alone."""
        lab = (0.6, 0.03, 0.02)
        result = map_to_gamut(*lab, policy=policy)
        assert result.in_gamut
        np.testing.assert_array_equal(result.rgb, oklab_to_linear_srgb(*lab))

    @pytest.mark.parametrize("policy", GAMUT_POLICIES)
    def test_reports_original_gamut(self, policy):
        result = map_to_gamut(0.7, 0.4, 0.0, policy=policy)
        assert not result.in_gamut

    def test_bisect_policy(self):
        result = map_to_gamut(0.7, 0.4, 0.0, policy='bisect-chroma')
        np.testing.assert_array_equal(result.rgb, bisect_chroma(0.7, 0.4, 0.0))

    def test_cone_policy(self):
        """Without an explicit limit the per-degree table is used."""
        result = map_to_gamut(0.5, 0.0, -0.4, policy='cone-clamp')
        expected = oklab_to_linear_srgb(*cone_clamp(0.5, 0.0, -0.4, fast=True))
        np.testing.assert_allclose(result.rgb, expected)

    def test_cone_policy_with_limit(self):
        limit = max_chroma_for_hue(270.0)
        result = map_to_gamut(0.5, 0.0, -0.4, policy='cone-clamp', max_chroma=limit)
        expected = oklab_to_linear_srgb(*cone_clamp(0.5, 0.0, -0.4, max_chroma=limit))
        np.testing.assert_allclose(result.rgb, expected)

    def test_cone_policy_never_searches_per_pixel(self, monkeypatch):
        """The mapper reads the LUT; the per-hue search is not run per pixel."""
        get_chroma_limit_lut()
        searched = []
        monkeypatch.setattr(gamut, 'max_chroma_for_hue', lambda h: searched.append(h))

        L = np.full((20, 20), 0.7)
        _, a, b = oklch_to_oklab(L, np.full((20, 20), 0.35), np.full((20, 20), 30.0))
        result = map_to_gamut(L, a, b, policy='cone-clamp')

        assert searched == []
        assert not result.in_gamut.any()

    def test_oklch_entry_point(self):
        a = map_oklch_to_gamut(0.7, 0.4, 30.0, policy='bisect-chroma')
        b = map_to_gamut(*_lab(0.7, 0.4, 30.0), policy='bisect-chroma')
        np.testing.assert_allclose(a.rgb, b.rgb, atol=1e-12)

    def test_image_arrays(self):
        """2D arrays (images) should work and keep their shape."""
        L = np.full((16, 16), 0.7)
        H = np.linspace(0, 360, 16)[None, :] * np.ones((16, 1))
        _, a, b = oklch_to_oklab(L, np.full((16, 16), 0.3), H)

        for policy in GAMUT_POLICIES:
            rgb, in_gamut = map_to_gamut(L, a, b, policy=policy)
            assert in_gamut.shape == (16, 16)
            assert all(c.shape == (16, 16) for c in rgb)

    def test_unknown_policy(self):
        with pytest.raises(UnsupportedGamutPolicy) as excinfo:
            map_to_gamut(0.5, 0.1, 0.1, policy='css')
        assert excinfo.value.policy == 'css'
        assert isinstance(excinfo.value, ValueError)

    def test_non_finite_input(self):
        with pytest.raises(InvalidColorSpaceInput):
            map_to_gamut(np.nan, 0.1, 0.1, policy='bisect-chroma')


class TestMaxChromaForHue:
    """Test the per-hue chroma limit at L=1."""

    HUES = np.arange(360, dtype=np.float64)

    def test_positive_everywhere(self):
        assert (max_chroma_for_hue(self.HUES) > 0).all()

    def test_reference_values(self):
        np.testing.assert_allclose(
            max_chroma_for_hue(np.array([0.0, 90.0, 180.0, 270.0])),
            [0.4054, 0.2044, 0.1814, 0.6554],
            atol=5e-4,
        )

    def test_continuous_except_blue_cusp(self):
        """Adjacent degrees differ little, except around the blue primary."""
        limits = max_chroma_for_hue(np.arange(361, dtype=np.float64))
        jumps = np.abs(np.diff(limits))
        cusp = (self.HUES >= 255) & (self.HUES < 270)

        assert jumps[~cusp].max() < 0.02
        assert 255 <= np.argmax(jumps) < 270

    def test_wraps(self):
        np.testing.assert_allclose(max_chroma_for_hue(np.array([360.0, -90.0])),
                                   max_chroma_for_hue(np.array([0.0, 270.0])), atol=1e-12)

    def test_boundary_touches_zero_face(self):
        """At the limit the smallest linear channel is zero."""
        H = np.array([0.0, 60.0, 150.0, 200.0, 320.0])
        C = max_chroma_for_hue(H)
        rgb = oklab_to_linear_srgb(*oklch_to_oklab(np.ones_like(H), C, H))
        np.testing.assert_allclose(np.min(rgb, axis=0), 0, atol=1e-9)

    def test_scalar_input(self):
        assert float(max_chroma_for_hue(30.0)) == pytest.approx(0.4011, abs=5e-4)

    def test_cone_bounds_true_gamut(self):
        """The cone contains the real (six-face) gamut at every lightness."""
        L = np.repeat([0.3, 0.5, 0.7], 4)
        H = np.tile([0.0, 90.0, 180.0, 300.0], 3)
        exact = max_chroma_for_lh(L, H)
        assert (max_chroma_for_hue(H) * L >= exact - 1e-6).all()

    def test_cone_boundary_line(self):
        lightness = np.linspace(0, 1, 5)
        line = cone_boundary(90.0, lightness)
        assert line[0] == 0
        np.testing.assert_allclose(line, float(max_chroma_for_hue(90.0)) * lightness)


class TestMaxChromaForLH:
    """Test the exact in-cube chroma search."""

    def test_white_has_no_room(self):
        assert max_chroma_for_lh(np.array([1.0]), np.array([180.0]))[0] < 0.01

    def test_mid_lightness_has_room(self):
        assert max_chroma_for_lh(np.array([0.6]), np.array([180.0]))[0] > 0.1

    def test_result_is_in_gamut(self):
        L = np.array([0.3, 0.5, 0.8])
        H = np.array([20.0, 140.0, 250.0])
        C = max_chroma_for_lh(L, H)
        assert is_in_gamut(*oklab_to_linear_srgb(*oklch_to_oklab(L, C, H))).all()


class TestChromaLimitLUT:
    """Test the precomputed per-degree table."""

    def test_cached(self):
        assert get_chroma_limit_lut() is get_chroma_limit_lut()
        assert get_chroma_limit_lut().shape == (360,)

    def test_matches_search_on_whole_degrees(self):
        hues = np.arange(360, dtype=np.float64)
        np.testing.assert_allclose(max_chroma_fast(hues), max_chroma_for_hue(hues), atol=1e-12)

    def test_interpolates_between_degrees(self):
        hues = np.array([10.5, 100.25, 200.75, 300.5, 359.5])
        np.testing.assert_allclose(max_chroma_fast(hues), max_chroma_for_hue(hues), atol=0.01)


class TestTorchBackend:
    """Test torch tensor support (if torch available)."""

    @pytest.fixture
    def torch(self):
        return pytest.importorskip('torch')

    @pytest.mark.parametrize("policy", GAMUT_POLICIES)
    def test_torch_numpy_parity(self, torch, policy):
        L = np.array([0.3, 0.7, 0.9, 0.5])
        a = np.array([0.1, 0.4, -0.1, 0.0])
        b = np.array([0.0, 0.0, 0.2, -0.35])

        rgb_np, ok_np = map_to_gamut(L, a, b, policy=policy)
        rgb_t, ok_t = map_to_gamut(
            *(torch.tensor(x, dtype=torch.float64) for x in (L, a, b)), policy=policy,
        )

        np.testing.assert_array_equal(ok_t.numpy(), ok_np)
        np.testing.assert_allclose(np.stack([c.numpy() for c in rgb_t]), np.stack(rgb_np), atol=1e-9)
