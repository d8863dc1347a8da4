from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest
from click.testing import CliRunner

from src.encparams.registry import ParamRegistry, build_encoder_registry

Y4M_HEADER = b"YUV4MPEG2 W176 H144 F25:1 Ip A1:1 C420\nFRAME\n"


@pytest.fixture
def registry() -> ParamRegistry:
    """Provide a fresh copy of the encoder flag table."""

    return build_encoder_registry()


@pytest.fixture
def write_cfg(tmp_path: Path) -> Callable[[str, str], Path]:
    """Return a helper that writes a config file under ``tmp_path``."""

    def _write(name: str, text: str) -> Path:
        path = tmp_path / name
        path.write_text(text, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def write_y4m(tmp_path: Path) -> Callable[[bytes], Path]:
    """Return a helper that writes a Y4M header plus one dummy frame."""

    def _write(header: bytes = Y4M_HEADER) -> Path:
        path = tmp_path / "input.y4m"
        path.write_bytes(header + b"\x80" * 64)
        return path

    return _write


@pytest.fixture
def runner() -> CliRunner:
    """Provide a Click runner configured for CLI smoke tests."""

    return CliRunner()
