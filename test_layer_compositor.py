"""
Tests for LayerSet construction and LayerCompositor blending.
"""

import numpy as np
import pytest

from heightfield import (
    BlendMode, DimensionMismatchError, HeightGrid, HeightSettings, LayerCompositor, LayerSet,
    NoiseSampler
)


def constant(value, width=3, depth=4, enabled=True):
    settings = HeightSettings(width=width, depth=depth, enabled=enabled)
    return HeightGrid.from_array(np.full((width, depth), value), settings=settings)


def test_decaying_weighting_law():
    a, b, c = 0.2, 0.6, 1.0

    combined = LayerCompositor().combine([constant(a), constant(b), constant(c)])

    expected = (((0 + a) / 2 + b) / 2 + c) / 2
    assert combined.shape == (3, 4)
    assert np.all(combined.buffer == expected)


def test_decaying_blend_is_not_a_mean():
    combined = LayerCompositor().combine([constant(0.3), constant(0.3)])

    # 0.3 / 4 + 0.3 / 2
    assert combined.get(0, 0) == pytest.approx(0.225)


def test_single_layer_is_halved():
    combined = LayerCompositor().combine([constant(0.8)])

    assert np.allclose(combined.buffer, 0.4)


def test_blend_depends_on_layer_order():
    compositor = LayerCompositor()

    forward = compositor.combine([constant(0.0), constant(1.0)])
    backward = compositor.combine([constant(1.0), constant(0.0)])

    assert forward.get(0, 0) == pytest.approx(0.5)
    assert backward.get(0, 0) == pytest.approx(0.25)


def test_mean_blend():
    compositor = LayerCompositor(BlendMode.MEAN)

    combined = compositor.combine([constant(0.2), constant(0.6), constant(1.0)])

    assert np.allclose(combined.buffer, 0.6)


def test_blend_mode_from_string():
    assert LayerCompositor("mean").blend == BlendMode.MEAN
    with pytest.raises(ValueError):
        LayerCompositor("median")


def test_per_sample_blend():
    first = HeightGrid.from_array(np.array([[0.0, 1.0], [0.5, 0.25]]))
    second = HeightGrid.from_array(np.array([[1.0, 1.0], [0.0, 0.75]]))

    combined = LayerCompositor().combine([first, second])

    assert np.allclose(combined.heights, [[0.5, 0.75], [0.125, 0.4375]])


def test_empty_layer_set_yields_nothing():
    assert LayerCompositor().combine([]) is None
    assert LayerCompositor().combine(LayerSet()) is None


def test_disabled_layers_are_skipped():
    combined = LayerCompositor().combine([
        constant(0.4),
        constant(1.0, enabled=False),
        constant(0.8)
    ])

    assert np.allclose(combined.buffer, (0.4 / 2 + 0.8) / 2)


def test_all_disabled_yields_nothing():
    layers = [constant(0.5, enabled=False), constant(0.7, enabled=False)]

    assert LayerCompositor().combine(layers) is None


def test_disabled_layer_size_is_not_checked():
    combined = LayerCompositor().combine([constant(0.5), constant(0.5, width=9, enabled=False)])

    assert combined.shape == (3, 4)


def test_dimension_mismatch_rejected():
    layers = [constant(0.5), constant(0.5, width=4)]

    with pytest.raises(DimensionMismatchError) as excinfo:
        LayerCompositor().combine(layers)

    assert excinfo.value.expected == (3, 4)
    assert excinfo.value.actual == (4, 4)


def test_inputs_are_not_mutated():
    first, second = constant(0.2), constant(0.9)

    LayerCompositor().combine([first, second])

    assert np.all(first.buffer == 0.2)
    assert np.all(second.buffer == 0.9)


def test_combined_grid_has_no_settings():
    assert LayerCompositor().combine([constant(0.1)]).settings is None


def test_layer_set_from_settings_skips_disabled():
    settings = [
        HeightSettings(size=6, seed=1, octaves=2),
        HeightSettings(size=6, seed=2, octaves=2, enabled=False),
        HeightSettings(size=6, seed=3, octaves=2),
    ]

    layers = LayerSet.from_settings(settings, NoiseSampler())

    assert len(layers) == 2
    assert [grid.settings.seed for grid in layers] == [1, 3]
    assert layers[1].settings == settings[2]


def test_combine_generated_layers_stays_normalized():
    sampler = NoiseSampler()
    layers = LayerSet.from_settings(
        [HeightSettings(size=8, seed=seed, octaves=3) for seed in range(4)], sampler
    )

    combined = LayerCompositor().combine(layers)

    assert np.all(combined.buffer >= 0.0)
    assert np.all(combined.buffer <= 1.0)
