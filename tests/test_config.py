from __future__ import annotations

import numpy as np
import pytest
import yaml
from pydantic import ValidationError

from pixel_sandbox.config import KernelConfig, SandboxConfig, load_sandbox_config
from pixel_sandbox.core.kernel import get_kernel_preset
from pixel_sandbox.core.morphology import MorphologyMode
from pixel_sandbox.core.tools import Tool
from pixel_sandbox.scaffold import build_stub, write_stub
from pixel_sandbox.settings import get_settings, reset_settings_cache


def _write(path, data):
    path.write_text(yaml.safe_dump(data), encoding="utf-8")
    return path


def test_defaults_match_the_classic_session():
    config = SandboxConfig()
    assert (config.grid.width, config.grid.height, config.grid.fill) == (20, 12, 180)
    assert config.grid.effective_reset_color == 180
    assert config.tools.active is Tool.PAINT
    assert config.tools.kernel.to_kernel() == get_kernel_preset("binomial")
    assert [(s.x, s.y, s.value) for s in config.seed_pixels] == [(5, 2, 0)]


def test_load_explicit_kernel(tmp_path):
    path = _write(
        tmp_path / "session.yaml",
        {
            "grid": {"width": 6, "height": 5},
            "tools": {
                "active": "convolve",
                "kernel": {
                    "left": 0,
                    "right": 1,
                    "up": -1,
                    "down": 0,
                    "weights": [[0.0, 0.5], [0.5, 0.0]],
                },
                "morphology": {
                    "mask": [[True, True, True], [True, False, True], [True, True, True]],
                    "mode": "erosion",
                },
            },
        },
    )
    config = load_sandbox_config(path)
    kernel = config.tools.kernel.to_kernel()
    assert (kernel.left, kernel.right, kernel.up, kernel.down) == (0, 1, -1, 0)
    assert not kernel.zero_centered
    element = config.tools.morphology.to_structuring_element()
    assert element.mode is MorphologyMode.EROSION
    assert not element.is_set(0, 0)


def test_centred_weights_without_offsets():
    kernel = KernelConfig(weights=[[0, 0, 0], [0, 1, 0], [0, 0, 0]], zero_centered=True).to_kernel()
    assert (kernel.left, kernel.right, kernel.up, kernel.down) == (-1, 1, -1, 1)
    assert kernel.zero_centered
    assert np.isclose(kernel.weights[1, 1], 1.0)


def test_preset_zero_centered_override():
    kernel = KernelConfig(preset="horizontal-sobel", zero_centered=False).to_kernel()
    assert not kernel.zero_centered


@pytest.mark.parametrize(
    "kernel",
    [
        {"preset": "does-not-exist"},
        {"weights": [[1.0, 1.0]]},
        {"left": -1, "right": 1, "up": 0, "down": 0, "weights": [[1.0]]},
        {"left": -1, "weights": [[1.0]]},
        {"preset": "binomial", "weights": [[1.0]]},
        {},
    ],
)
def test_invalid_kernels_are_rejected(kernel):
    with pytest.raises(ValidationError):
        SandboxConfig.model_validate({"tools": {"kernel": kernel}})


@pytest.mark.parametrize(
    "data",
    [
        {"grid": {"width": 0}},
        {"grid": {"fill": 256}},
        {"tools": {"pen_intensity": -1}},
        {"tools": {"active": "smudge"}},
        {"tools": {"morphology": {"mask": [[True, True], [True, True]]}}},
        {"grid": {"width": 3, "height": 3}, "seed_pixels": [{"x": 3, "y": 0, "value": 1}]},
    ],
)
def test_invalid_sessions_are_rejected(data):
    with pytest.raises(ValidationError):
        SandboxConfig.model_validate(data)


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_sandbox_config(tmp_path / "missing.yaml")


def test_empty_file_gives_defaults(tmp_path):
    path = tmp_path / "empty.yaml"
    path.write_text("", encoding="utf-8")
    assert load_sandbox_config(path) == SandboxConfig()


def test_non_mapping_file_is_rejected(tmp_path):
    path = tmp_path / "list.yaml"
    path.write_text("- 1\n- 2\n", encoding="utf-8")
    with pytest.raises(ValueError):
        load_sandbox_config(path)


def test_scaffold_stub_loads(tmp_path):
    target = write_stub(tmp_path / "nested" / "stub.yaml", session_name="demo", width=8, height=4)
    config = load_sandbox_config(target)
    assert (config.grid.width, config.grid.height) == (8, 4)
    assert config.metadata == {"session": "demo"}
    assert [(s.x, s.y) for s in config.seed_pixels] == [(5, 2)]


def test_scaffold_clamps_seed_into_small_grids():
    stub = build_stub(width=2, height=1)
    assert stub["seed_pixels"] == [{"x": 1, "y": 0, "value": 0}]


def test_scaffold_rejects_unknown_preset():
    with pytest.raises(ValueError):
        build_stub(kernel_preset="nope")


def test_settings_from_environment(monkeypatch, tmp_path):
    session_file = tmp_path / "session.yaml"
    monkeypatch.setenv("PIXEL_SANDBOX_LOG_LEVEL", "debug")
    monkeypatch.setenv("PIXEL_SANDBOX_CONFIG_PATH", str(session_file))
    reset_settings_cache()
    settings = get_settings()
    assert settings.log_level == "DEBUG"
    assert settings.config_path == session_file.resolve()
    assert get_settings() is settings


def test_settings_from_dotenv(tmp_path):
    (tmp_path / ".env").write_text("PIXEL_SANDBOX_LOG_LEVEL=warning\n", encoding="utf-8")
    assert get_settings().log_level == "WARNING"


def test_invalid_log_level(monkeypatch):
    monkeypatch.setenv("PIXEL_SANDBOX_LOG_LEVEL", "chatty")
    with pytest.raises(ValidationError):
        get_settings()
