from __future__ import annotations

import numpy as np
import pytest

from pixel_sandbox.core.grid import PixelGrid
from pixel_sandbox.core.kernel import reset_kernel_presets
from pixel_sandbox.settings import reset_settings_cache


@pytest.fixture(autouse=True)
def _isolated_environment(tmp_path, monkeypatch):
    """Keep settings, presets and .env lookups from leaking between tests."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("PIXEL_SANDBOX_CONFIG_PATH", raising=False)
    monkeypatch.delenv("PIXEL_SANDBOX_LOG_LEVEL", raising=False)
    reset_settings_cache()
    reset_kernel_presets()
    yield
    reset_settings_cache()
    reset_kernel_presets()


@pytest.fixture
def random_grid() -> PixelGrid:
    rng = np.random.default_rng(1234)
    return PixelGrid.from_rows(rng.integers(0, 256, size=(6, 7)).tolist())


@pytest.fixture
def impulse_grid() -> PixelGrid:
    return PixelGrid.from_rows(
        [
            [0, 0, 0],
            [0, 255, 0],
            [0, 0, 0],
        ]
    )
