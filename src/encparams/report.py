"""Render resolved parameters as a table, a JSON mapping, or config-file text."""

from __future__ import annotations

import os
from dataclasses import asdict
from pathlib import Path
from typing import Any, Dict, Iterator, List, Tuple

from rich.table import Table

from src.config_loader import ConfigError
from src.datatypes import FloatList, IntegerList, ParamKind
from src.encparams.registry import ParamEntry, ParamRegistry
from src.encparams.tokenizer import WHITESPACE

__all__ = [
    "build_params_table",
    "params_to_dict",
    "render_config_text",
    "write_config_file",
]

_CONFIG_HEADER = "; Encoder parameters written by encparams"


def params_to_dict(params: Any) -> Dict[str, Any]:
    """Return a JSON-friendly mapping of every field on ``params``."""

    return asdict(params)


def _settable_entries(registry: ParamRegistry) -> Iterator[ParamEntry]:
    """Yield entries reachable by lookup that write a field, in registration order."""

    for entry in registry:
        if entry.field is None or registry.lookup(entry.name) is not entry:
            continue
        yield entry


def _format_value(value: Any) -> str:
    if isinstance(value, (IntegerList, FloatList)):
        return ",".join(repr(item) for item in value.values)
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, float):
        return repr(value)
    return str(value)


def _quote_string(name: str, value: str) -> str:
    needs_quotes = not value or value.startswith((";", '"')) or any(
        char in WHITESPACE for char in value
    )
    if not needs_quotes:
        return value
    if not value or '"' in value or "\n" in value:
        raise ConfigError(f"Value for {name} cannot be written to a config file: {value!r}")
    return f'"{value}"'


def build_params_table(params: Any, registry: ParamRegistry, *, title: str | None = None) -> Table:
    """Build a rich table of flag, field, value, and default for each parameter."""

    table = Table(title=title)
    table.add_column("Flag", style="cyan", no_wrap=True)
    table.add_column("Field")
    table.add_column("Value", style="bold")
    table.add_column("Default", style="dim")
    for entry in _settable_entries(registry):
        value = getattr(params, entry.field)
        shown = "-" if value is None else _format_value(value)
        default = entry.default if entry.default is not None else "-"
        table.add_row(entry.name, entry.field, shown, default)
    return table


def _config_lines(params: Any, registry: ParamRegistry) -> List[Tuple[str, str | None]]:
    lines: List[Tuple[str, str | None]] = []
    for entry in _settable_entries(registry):
        value = getattr(params, entry.field)
        if value is None:
            continue
        if entry.kind is ParamKind.FLAG:
            if value:
                lines.append((entry.name, None))
            continue
        if entry.kind is ParamKind.STRING:
            lines.append((entry.name, _quote_string(entry.name, str(value))))
            continue
        formatted = _format_value(value)
        if not formatted:
            continue
        lines.append((entry.name, formatted))
    return lines


def render_config_text(params: Any, registry: ParamRegistry) -> str:
    """
    Render ``params`` as config-file text accepted by ``-cf``.

    Unset strings and empty lists are omitted, flags appear only when set, and
    values that need it are double-quoted. Parsing the result over the registry
    defaults reproduces every written field. Empty strings and strings holding
    a double quote or newline have no token form and raise ``ConfigError``.
    """

    entries = _config_lines(params, registry)
    lines = [_CONFIG_HEADER]
    width = max((len(name) for name, _ in entries), default=0)
    for name, value in entries:
        lines.append(name if value is None else f"{name.ljust(width)} {value}")
    return "\n".join(lines) + "\n"


def write_config_file(path: str | os.PathLike[str], text: str) -> Path:
    target = Path(path)
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(text, encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Cannot write config file: {os.fspath(path)}") from exc
    return target
