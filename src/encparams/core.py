"""Parameter session: defaults, user overrides, container probe, validation."""

from __future__ import annotations

import logging
from typing import Optional, Sequence

from src.config_loader import IncludeStack, resolve_max_include_depth
from src.datatypes import EncoderParams
from src.encparams.dispatch import ParamDispatcher
from src.encparams.registry import ParamRegistry, build_encoder_registry
from src.encparams.validation import check_parameters
from src.encparams.y4m import apply_container_header, probe_y4m_file

logger = logging.getLogger(__name__)

__all__ = ["parse_config_params", "resolve_parameters"]


def parse_config_params(
    argv: Sequence[str],
    *,
    registry: Optional[ParamRegistry] = None,
    probe_container: bool = True,
    max_include_depth: Optional[int] = None,
) -> EncoderParams:
    """
    Build the encoder parameter structure from ``argv``.

    ``argv`` holds the arguments after the program name. Registry defaults are
    applied first, then ``argv`` (and any ``-cf`` files it names) in order, so a
    later assignment to the same field wins. When the input file starts with a
    YUV4MPEG2 header its geometry and format override the parsed values.

    Raises:
        ParseError: For unknown flags, missing values, or unreadable config files.
        ContainerHeaderError: When the input file has a malformed YUV4MPEG2 header.
    """

    registry = registry or build_encoder_registry()
    params = registry.new_target()
    depth = resolve_max_include_depth() if max_include_depth is None else max_include_depth
    dispatcher = ParamDispatcher(registry, params, include_stack=IncludeStack(depth))

    dispatcher.parse(registry.default_tokens())
    dispatcher.parse(list(argv))

    if probe_container and getattr(params, "infilestr", None):
        header = probe_y4m_file(params.infilestr)
        if header is not None:
            apply_container_header(params, header)
    return params


def resolve_parameters(
    argv: Sequence[str],
    *,
    validate: bool = True,
    probe_container: bool = True,
) -> EncoderParams:
    """Parse ``argv`` and, unless ``validate`` is False, run the consistency checks."""

    params = parse_config_params(argv, probe_container=probe_container)
    if validate:
        check_parameters(params)
    else:
        logger.debug("Skipping parameter validation")
    return params
