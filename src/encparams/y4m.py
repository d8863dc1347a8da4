"""YUV4MPEG2 header sniffing for the declared input file."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Any, Optional, Tuple

from src.config_loader import ContainerHeaderError
from src.encparams.numeric import parse_leading_int

logger = logging.getLogger(__name__)

__all__ = [
    "FRAME_HEADER_LENGTH",
    "Y4M_PROBE_SIZE",
    "Y4M_SIGNATURE",
    "Y4MHeader",
    "apply_container_header",
    "parse_y4m_header",
    "probe_y4m_file",
]

Y4M_SIGNATURE = b"YUV4MPEG2 "
Y4M_PROBE_SIZE = 256
FRAME_MARKER = b"\nFRAME\n"
FRAME_HEADER_LENGTH = len(b"FRAME\n")
_CORRUPT_MSG = "Corrupt Y4M file"


@dataclass
class Y4MHeader:
    """Geometry and format fields recovered from a stream header."""

    header_length: int
    width: Optional[int] = None
    height: Optional[int] = None
    frame_rate: Optional[float] = None
    subsample: Optional[int] = None
    input_bitdepth: Optional[int] = None
    aspect: Optional[Tuple[int, int]] = None


def _int_pair(value: str) -> Tuple[int, int]:
    first, _, second = value.partition(":")
    return parse_leading_int(first)[0], parse_leading_int(second)[0]


def _apply_field(header: Y4MHeader, tag: str, value: str) -> None:
    if tag == "W":
        header.width = parse_leading_int(value)[0]
    elif tag == "H":
        header.height = parse_leading_int(value)[0]
    elif tag == "F":
        first, second = _int_pair(value)
        if second == 0:
            raise ContainerHeaderError(f"{_CORRUPT_MSG}: frame rate F{value} has a zero divisor")
        header.frame_rate = first / second
    elif tag == "I":
        if not value.startswith("p"):
            raise ContainerHeaderError("Only progressive input supported")
    elif tag == "C":
        if value.startswith("mono"):
            header.subsample = 400
            rest = value[4:]
        else:
            header.subsample, rest, _ = parse_leading_int(value)
        if rest.startswith("p"):
            header.input_bitdepth = parse_leading_int(rest[1:])[0]
    elif tag == "A":
        header.aspect = _int_pair(value)
    else:
        logger.debug("Skipping Y4M header field %s%s", tag, value)


def parse_y4m_header(buf: bytes) -> Optional[Y4MHeader]:
    """
    Parse the stream header at the start of ``buf``.

    Returns ``None`` when ``buf`` does not start with the ``YUV4MPEG2`` signature.
    The header line must end inside ``buf`` and be followed by the first
    ``FRAME`` marker, otherwise ``ContainerHeaderError`` is raised.
    """

    if not buf.startswith(Y4M_SIGNATURE):
        return None
    newline = buf.find(b"\n", len(Y4M_SIGNATURE))
    line_end = len(buf) if newline < 0 else newline
    line = buf[len(Y4M_SIGNATURE) : line_end].decode("ascii", errors="replace")

    header = Y4MHeader(header_length=line_end + 1)
    for item in line.split(" "):
        if item:
            _apply_field(header, item[0], item[1:])

    if newline < 0 or buf[newline : newline + len(FRAME_MARKER)] != FRAME_MARKER:
        raise ContainerHeaderError(_CORRUPT_MSG)
    return header


def probe_y4m_file(path: str | os.PathLike[str]) -> Optional[Y4MHeader]:
    """Read the first ``Y4M_PROBE_SIZE`` bytes of ``path`` and parse any header."""

    try:
        with open(path, "rb") as handle:
            buf = handle.read(Y4M_PROBE_SIZE)
    except OSError as exc:
        logger.debug("Input %s not probed: %s", os.fspath(path), exc)
        return None
    return parse_y4m_header(buf)


def apply_container_header(params: Any, header: Y4MHeader) -> None:
    """Override geometry, rate, and format fields of ``params`` from ``header``."""

    if header.width is not None:
        params.width = header.width
    if header.height is not None:
        params.height = header.height
    if header.frame_rate is not None:
        params.frame_rate = header.frame_rate
    if header.subsample is not None:
        params.subsample = header.subsample
    if header.input_bitdepth is not None:
        params.input_bitdepth = header.input_bitdepth
        if header.input_bitdepth > 8:
            params.frame_bitdepth = 16
    if header.aspect is not None:
        params.aspectnum, params.aspectden = header.aspect
    params.file_headerlen = header.header_length
    params.frame_headerlen = FRAME_HEADER_LENGTH
    logger.info(
        "Using Y4M geometry %dx%d @ %.3f fps, subsample %d",
        params.width,
        params.height,
        params.frame_rate,
        params.subsample,
    )
