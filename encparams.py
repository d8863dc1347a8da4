"""Public shim exposing the encparams CLI and library surface."""

from __future__ import annotations

from typing import Callable, cast

import src.encparams.cli_entry as _cli_entry
from src.config_loader import (
    ConfigError,
    ContainerHeaderError,
    ParameterValidationError,
    ParseError,
    RegistryError,
)
from src.datatypes import EncoderParams, FloatList, IntegerList, ParamKind
from src.encparams.core import parse_config_params, resolve_parameters
from src.encparams.registry import ParamEntry, ParamRegistry, build_encoder_registry
from src.encparams.report import render_config_text
from src.encparams.validation import check_parameters

__all__ = (
    "main",
    "parse_config_params",
    "resolve_parameters",
    "check_parameters",
    "build_encoder_registry",
    "render_config_text",
    "EncoderParams",
    "FloatList",
    "IntegerList",
    "ParamEntry",
    "ParamKind",
    "ParamRegistry",
    "ConfigError",
    "ContainerHeaderError",
    "ParameterValidationError",
    "ParseError",
    "RegistryError",
)

main = _cli_entry.main


if __name__ == "__main__":
    _entry_point = cast(Callable[[], None], main)
    _entry_point()
