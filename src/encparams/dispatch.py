"""Typed conversion of parameter tokens into the parameter structure."""

from __future__ import annotations

import logging
import re
from typing import Any, Callable, List, Optional, Sequence, TypeVar

from src.config_loader import IncludeStack, ParseError, RegistryError, read_config_file
from src.datatypes import LIST_SLOT_CAPACITY, FloatList, IntegerList, ParamKind
from src.encparams.numeric import parse_leading_float, parse_leading_int
from src.encparams.registry import INCLUDE_FLAG, ParamEntry, ParamRegistry

logger = logging.getLogger(__name__)

__all__ = [
    "ParamDispatcher",
    "parse_float_value",
    "parse_int_value",
    "split_list_value",
]

_LIST_SPLIT_RE = re.compile(r"[, ]+")
_T = TypeVar("_T", int, float)

_MISSING_VALUE_MESSAGES = {
    ParamKind.STRING: "No filename found for parameter: {name}",
    ParamKind.INTEGER_LIST: "No integer list found for parameter: {name}",
    ParamKind.FLOAT_LIST: "No float list found for parameter: {name}",
}


def _lenient_number(
    token: str,
    name: str,
    parser: Callable[[str], tuple[_T, str, bool]],
) -> _T:
    value, rest, matched = parser(token)
    if not matched:
        logger.warning("Parameter %s: %r is not a number; using 0", name, token)
    elif rest:
        logger.warning("Parameter %s: ignoring trailing characters %r in %r", name, rest, token)
    return value


def parse_int_value(token: str, name: str) -> int:
    """Parse the leading integer of ``token``; non-numeric input yields ``0``."""

    return _lenient_number(token, name, parse_leading_int)


def parse_float_value(token: str, name: str) -> float:
    """Parse the leading decimal literal of ``token``; non-numeric input yields ``0.0``."""

    return _lenient_number(token, name, parse_leading_float)


def split_list_value(token: str) -> List[str]:
    """Split a list token on commas and spaces, dropping empty pieces."""

    return [piece for piece in _LIST_SPLIT_RE.split(token) if piece]


class ParamDispatcher:
    """
    Walks token streams and writes each recognised parameter into ``params``.

    A ``-cf <path>`` pair reads the named file and parses its tokens in place,
    finishing before the remainder of the current stream resumes. Nested files
    are tracked through ``include_stack`` so cycles and runaway nesting fail.
    """

    def __init__(
        self,
        registry: ParamRegistry,
        params: Any,
        *,
        include_stack: Optional[IncludeStack] = None,
    ) -> None:
        self.registry = registry
        self.params = params
        self.include_stack = include_stack or IncludeStack()

    def parse(self, tokens: Sequence[str]) -> None:
        index = 0
        total = len(tokens)
        while index < total:
            entry = self.registry.require(tokens[index])
            index += 1
            if not entry.kind.takes_value:
                self._assign(entry, True)
                continue
            if index >= total:
                template = _MISSING_VALUE_MESSAGES.get(
                    entry.kind, "No value found for parameter: {name}"
                )
                raise ParseError(template.format(name=entry.name))
            self._apply(entry, tokens[index])
            index += 1

    def include(self, path: str) -> None:
        """Parse the config file at ``path`` as if its tokens appeared inline."""

        with self.include_stack.enter(path):
            tokens = read_config_file(path)
            logger.debug("Including %s (%d tokens)", path, len(tokens))
            self.parse(tokens)

    def _apply(self, entry: ParamEntry, token: str) -> None:
        kind = entry.kind
        if kind is ParamKind.STRING:
            if entry.name == INCLUDE_FLAG:
                self.include(token)
            else:
                self._assign(entry, token)
        elif kind is ParamKind.INTEGER:
            self._assign(entry, parse_int_value(token, entry.name))
        elif kind is ParamKind.FLOAT:
            self._assign(entry, parse_float_value(token, entry.name))
        elif kind is ParamKind.INTEGER_LIST:
            pieces = self._list_pieces(entry, token, "integer")
            values = [parse_int_value(piece, entry.name) for piece in pieces]
            self._assign_list(entry, values, IntegerList)
        elif kind is ParamKind.FLOAT_LIST:
            pieces = self._list_pieces(entry, token, "float")
            values = [parse_float_value(piece, entry.name) for piece in pieces]
            self._assign_list(entry, values, FloatList)
        else:  # pragma: no cover - exhaustive over ParamKind
            raise ParseError(f"Unsupported kind {kind!r} for parameter: {entry.name}")

    @staticmethod
    def _list_pieces(entry: ParamEntry, token: str, label: str) -> List[str]:
        pieces = split_list_value(token)
        if not pieces:
            raise ParseError(f"Error reading {label} list for parameter: {entry.name}")
        return pieces

    @staticmethod
    def _field_of(entry: ParamEntry) -> str:
        if entry.field is None:
            raise RegistryError(f"Parameter {entry.name} has no destination field")
        return entry.field

    def _assign(self, entry: ParamEntry, value: Any) -> None:
        setattr(self.params, self._field_of(entry), value)

    def _assign_list(self, entry: ParamEntry, values: list, slot_type: type) -> None:
        field = self._field_of(entry)
        slot = getattr(self.params, field, None)
        capacity = slot.capacity if isinstance(slot, slot_type) else LIST_SLOT_CAPACITY
        if len(values) > capacity:
            raise ParseError(
                f"Too many values for parameter: {entry.name} ({len(values)} > {capacity})"
            )
        setattr(self.params, field, slot_type(values=values, capacity=capacity))
