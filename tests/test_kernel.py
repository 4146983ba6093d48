from __future__ import annotations

import numpy as np
import pytest

from pixel_sandbox.core.grid import PixelGrid
from pixel_sandbox.core.kernel import (
    ConvolutionKernel,
    get_kernel_preset,
    list_kernel_presets,
    register_kernel_preset,
    unregister_kernel_preset,
)


def test_binomial_impulse_at_center(impulse_grid):
    kernel = get_kernel_preset("binomial")
    # 255 * 4 / 16 = 63.75
    assert kernel.sample(impulse_grid, 1, 1) == 64


def test_binomial_impulse_neighbours(impulse_grid):
    kernel = get_kernel_preset("binomial")
    # 255 * 2 / 16 = 31.875 and 255 / 16 = 15.9375
    assert kernel.sample(impulse_grid, 1, 0) == 32
    assert kernel.sample(impulse_grid, 0, 0) == 16


@pytest.mark.parametrize("preset", ["binomial", "box", "identity"])
@pytest.mark.parametrize("value", [0, 1, 37, 128, 255])
def test_normalized_kernel_preserves_uniform_grid(preset, value):
    grid = PixelGrid(5, 4, fill=value)
    kernel = get_kernel_preset(preset)
    for y in range(grid.height):
        for x in range(grid.width):
            assert kernel.sample(grid, x, y) == value


@pytest.mark.parametrize("preset", ["vertical-sobel", "horizontal-sobel"])
def test_zero_centered_kernel_maps_flat_area_to_mid_gray(preset):
    grid = PixelGrid(4, 4, fill=200)
    assert get_kernel_preset(preset).sample(grid, 0, 0) == 127
    assert get_kernel_preset(preset).sample(grid, 2, 2) == 127


def test_vertical_sobel_saturates_on_edges():
    kernel = get_kernel_preset("vertical-sobel")
    rising = PixelGrid.from_rows([[0, 0, 255]] * 3)
    falling = PixelGrid.from_rows([[255, 0, 0]] * 3)
    assert kernel.sample(rising, 1, 1) == 255
    assert kernel.sample(falling, 1, 1) == 0


def test_without_zero_centering_negative_sums_clamp_to_zero():
    kernel = get_kernel_preset("vertical-sobel").with_zero_centered(False)
    falling = PixelGrid.from_rows([[255, 90, 0]] * 3)
    flat = PixelGrid(3, 3, fill=90)
    assert kernel.sample(falling, 1, 1) == 0
    assert kernel.sample(flat, 1, 1) == 0
    assert kernel.with_zero_centered(True).sample(flat, 1, 1) == 127


def test_asymmetric_window_reads_clamped_neighbours():
    # samples the right-hand neighbour only
    kernel = ConvolutionKernel(left=0, right=1, up=0, down=0, weights=[[0.0, 1.0]])
    grid = PixelGrid.from_rows([[10, 20, 30]])
    assert [kernel.sample(grid, x, 0) for x in range(3)] == [20, 30, 30]


def test_rounds_half_up():
    kernel = ConvolutionKernel.from_weights([[0.5]])
    assert kernel.sample(PixelGrid(1, 1, fill=1), 0, 0) == 1
    assert kernel.sample(PixelGrid(1, 1, fill=3), 0, 0) == 2


def test_output_is_clamped_to_pixel_range():
    grid = PixelGrid(1, 1, fill=200)
    assert ConvolutionKernel.from_weights([[2.0]]).sample(grid, 0, 0) == 255
    assert ConvolutionKernel.from_weights([[-2.0]]).sample(grid, 0, 0) == 0


def test_rejects_mismatched_weights():
    with pytest.raises(ValueError):
        ConvolutionKernel(left=-1, right=1, up=0, down=0, weights=[[1.0, 1.0]])


@pytest.mark.parametrize(
    "offsets",
    [(1, 1, 0, 0), (0, -1, 0, 0), (0, 0, 1, 1), (0, 0, 0, -1)],
)
def test_rejects_offsets_not_surrounding_the_cell(offsets):
    left, right, up, down = offsets
    with pytest.raises(ValueError):
        ConvolutionKernel(left=left, right=right, up=up, down=down, weights=[[1.0]])


def test_from_weights_requires_odd_sizes():
    with pytest.raises(ValueError):
        ConvolutionKernel.from_weights([[1.0, 1.0]])


def test_weights_are_read_only():
    kernel = get_kernel_preset("binomial")
    with pytest.raises(ValueError):
        kernel.weights[0, 0] = 5.0


def test_with_weight_returns_edited_copy():
    kernel = get_kernel_preset("binomial")
    edited = kernel.with_weight(1, 1, 0.0)
    assert edited.weights[1, 1] == 0.0
    assert kernel.weights[1, 1] == 0.25
    with pytest.raises(ValueError):
        kernel.with_weight(3, 0, 1.0)


def test_reshape_keeps_overlapping_weights():
    kernel = get_kernel_preset("binomial")
    row = kernel.reshape(left=-1, right=1, up=0, down=0)
    assert row.size == (3, 1)
    assert np.allclose(row.weights, [[2 / 16, 4 / 16, 2 / 16]])

    grown = kernel.reshape(left=-2, right=1, up=-1, down=1)
    assert grown.weights.shape == (3, 4)
    assert np.allclose(grown.weights[:, 0], 0.0)
    assert np.allclose(grown.weights[:, 1:], kernel.weights)

    with pytest.raises(ValueError):
        kernel.reshape(left=1, right=1, up=0, down=0)


def test_equality_compares_weights():
    assert get_kernel_preset("binomial") == get_kernel_preset("binomial")
    assert get_kernel_preset("binomial") != get_kernel_preset("box")


def test_builtin_presets_are_listed():
    assert {"binomial", "vertical-sobel", "horizontal-sobel", "identity", "box"} <= set(list_kernel_presets())


def test_unknown_preset():
    with pytest.raises(ValueError, match="Unknown kernel preset"):
        get_kernel_preset("nope")


def test_register_and_unregister_preset():
    laplace = lambda: ConvolutionKernel.from_weights(  # noqa: E731
        [[0, 1, 0], [1, -4, 1], [0, 1, 0]], zero_centered=True
    )
    register_kernel_preset("laplace", laplace)
    assert "laplace" in list_kernel_presets()
    assert get_kernel_preset("laplace").zero_centered

    with pytest.raises(ValueError):
        register_kernel_preset("laplace", laplace)
    register_kernel_preset("laplace", laplace, override=True)

    assert unregister_kernel_preset("laplace") is True
    assert unregister_kernel_preset("laplace") is False
