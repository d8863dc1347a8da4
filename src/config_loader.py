"""Configuration file loader and the error types shared by parameter parsing."""

from __future__ import annotations

import logging
import os
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, List, Mapping, Optional

from src.encparams.tokenizer import read_tokens

logger = logging.getLogger(__name__)

__all__ = [
    "ConfigError",
    "ContainerHeaderError",
    "DEFAULT_MAX_INCLUDE_DEPTH",
    "IncludeStack",
    "MAX_CONFIG_TOKENS",
    "MAX_INCLUDE_DEPTH_ENV_VAR",
    "ParameterValidationError",
    "ParseError",
    "RegistryError",
    "read_config_file",
    "resolve_max_include_depth",
]

MAX_CONFIG_TOKENS = 400
DEFAULT_MAX_INCLUDE_DEPTH = 16
MAX_INCLUDE_DEPTH_ENV_VAR = "ENCPARAMS_MAX_INCLUDE_DEPTH"


class ConfigError(ValueError):
    """Raised when encoder parameters are malformed or fail validation."""


class ParseError(ConfigError):
    """Raised when a token stream or config file cannot be interpreted."""


class ContainerHeaderError(ConfigError):
    """Raised when the input file carries a malformed YUV4MPEG2 header."""


class RegistryError(ConfigError):
    """Raised when a parameter registry is built incorrectly."""


class ParameterValidationError(ConfigError):
    """Raised when resolved parameters violate a cross-field constraint."""


def read_config_file(path: str | os.PathLike[str]) -> List[str]:
    """
    Read a config file and return its tokens.

    Parameters:
        path (str | os.PathLike[str]): File to read. Relative paths resolve against
            the current working directory.

    Returns:
        List[str]: Tokens in source order. Files holding only comments and
        whitespace produce an empty list.

    Raises:
        ParseError: If the file cannot be opened, is not UTF-8, or holds more than
            ``MAX_CONFIG_TOKENS`` tokens.
    """

    try:
        with open(path, "rb") as handle:
            raw_bytes = handle.read()
    except OSError as exc:
        raise ParseError(f"Cannot open config file: {os.fspath(path)}") from exc
    if raw_bytes.startswith(b"\xef\xbb\xbf"):
        raw_bytes = raw_bytes[3:]
    try:
        text = raw_bytes.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise ParseError(f"Config file must be UTF-8 encoded: {os.fspath(path)}") from exc

    tokens = read_tokens(text)
    if len(tokens) > MAX_CONFIG_TOKENS:
        raise ParseError(
            f"Too many tokens in config file {os.fspath(path)} "
            f"({len(tokens)} > {MAX_CONFIG_TOKENS})"
        )
    logger.debug("Read %d tokens from %s", len(tokens), os.fspath(path))
    return tokens


def resolve_max_include_depth(environ: Optional[Mapping[str, str]] = None) -> int:
    """Return the include depth ceiling, honouring ``ENCPARAMS_MAX_INCLUDE_DEPTH``."""

    env = os.environ if environ is None else environ
    raw = env.get(MAX_INCLUDE_DEPTH_ENV_VAR)
    if raw is None or not raw.strip():
        return DEFAULT_MAX_INCLUDE_DEPTH
    try:
        value = int(raw.strip())
    except ValueError:
        value = 0
    if value < 1:
        logger.warning(
            "%s=%r is not a positive integer; using %d",
            MAX_INCLUDE_DEPTH_ENV_VAR,
            raw,
            DEFAULT_MAX_INCLUDE_DEPTH,
        )
        return DEFAULT_MAX_INCLUDE_DEPTH
    return value


class IncludeStack:
    """Tracks the chain of config files currently being parsed."""

    def __init__(self, max_depth: int = DEFAULT_MAX_INCLUDE_DEPTH) -> None:
        self.max_depth = max_depth
        self._active: List[Path] = []

    @property
    def depth(self) -> int:
        return len(self._active)

    @property
    def active(self) -> tuple[Path, ...]:
        return tuple(self._active)

    @contextmanager
    def enter(self, path: str) -> Iterator[str]:
        """
        Push ``path`` for the duration of the block.

        Raises ``ParseError`` when the file is already being parsed further up
        the chain or when the chain would exceed ``max_depth``.
        """

        canonical = Path(path).resolve()
        if canonical in self._active:
            chain = " -> ".join(str(item) for item in (*self._active, canonical))
            raise ParseError(f"Config file includes itself: {chain}")
        if len(self._active) >= self.max_depth:
            raise ParseError(
                f"Config include depth exceeds {self.max_depth} at: {path}"
            )
        self._active.append(canonical)
        try:
            yield path
        finally:
            self._active.pop()
