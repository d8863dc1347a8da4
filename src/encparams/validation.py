"""Cross-field consistency checks over resolved encoder parameters."""

from __future__ import annotations

import logging

from src.config_loader import ParameterValidationError
from src.datatypes import EncoderParams

logger = logging.getLogger(__name__)

__all__ = [
    "MAX_REF_FRAMES",
    "MAX_SB_SIZE",
    "MIN_SB_SIZE",
    "SUPPORTED_BITDEPTHS",
    "SUPPORTED_SUBSAMPLING",
    "check_parameters",
]

MAX_REF_FRAMES = 17
MIN_SB_SIZE = 6
MAX_SB_SIZE = 7
SUPPORTED_SUBSAMPLING = (420, 444, 422, 400)
SUPPORTED_BITDEPTHS = (8, 10, 12)


def _is_power_of_two(value: int) -> bool:
    return value > 0 and value & (value - 1) == 0


def check_parameters(params: EncoderParams) -> EncoderParams:
    """
    Validate ``params`` in place and return it.

    Checks run in a fixed order and the first failure raises
    ``ParameterValidationError``. Two adjustments are applied rather than
    rejected: dyadic coding is switched off when ``num_reorder_pics`` is 2, and
    an internal bitdepth above 8 forces 16-bit frame buffers.
    """

    if params.num_frames <= 0:
        raise ParameterValidationError("Number of frames must be positive")

    if params.width % 8 or params.height % 8:
        raise ParameterValidationError("Width and height must be a multiple of 8")

    if params.max_num_ref < 1 or params.max_num_ref > 4:
        raise ParameterValidationError("This number of max reference frames is not supported")

    if params.max_delta_qp >= 8:
        raise ParameterValidationError("max_delta_qp too large")

    if params.HQperiod >= MAX_REF_FRAMES:
        raise ParameterValidationError("HQperiod too large")

    if params.num_reorder_pics < 0:
        raise ParameterValidationError("num_reorder_pics must not be negative")

    subgroup = params.num_reorder_pics + 1
    if params.num_reorder_pics > 0 and params.HQperiod > 1 and params.HQperiod % subgroup:
        raise ParameterValidationError(
            "Subgop length (num_reorder_pics+1) must divide HQperiod."
        )

    if params.dyadic_coding:
        if params.num_reorder_pics == 2:
            params.dyadic_coding = 0
            logger.warning("Dyadic coding disabled with num_reorder_pics=2")
        elif not _is_power_of_two(subgroup):
            raise ParameterValidationError(
                "num_reorder_pics+1 must be a power of 2 with dyadic coding."
            )

    if params.num_reorder_pics > 0 and params.max_num_ref < 2:
        raise ParameterValidationError(
            "More than one reference frame required for reordered pictures."
        )

    if params.intra_period % subgroup:
        raise ParameterValidationError(
            "Intra period must be a multiple of the subgroup size (num_reorder_pics+1)."
        )

    if params.sync and params.encoder_speed < 2:
        raise ParameterValidationError("Sync requires encoder_speed=2")

    if params.bitrate > 0 and params.num_reorder_pics > 0:
        raise ParameterValidationError("Current rate control doesn't work with frame reordering")

    if params.log2_sb_size < MIN_SB_SIZE or params.log2_sb_size > MAX_SB_SIZE:
        raise ParameterValidationError("Illegal value for log2_sb_size")

    if params.qmtx and (params.qmtx_offset < -32 or params.qmtx_offset > 31):
        raise ParameterValidationError("qmtx_offset must be a value from -32 to 31")

    if params.interp_ref == 2 and params.dyadic_coding == 0 and params.num_reorder_pics != 2:
        raise ParameterValidationError("interp_ref=2 only supported with dyadic coding")

    if params.subsample not in SUPPORTED_SUBSAMPLING:
        raise ParameterValidationError(
            "Illegal value for subsample.  Only 444, 422, 420 and 400 supported."
        )

    if params.bitdepth not in SUPPORTED_BITDEPTHS:
        raise ParameterValidationError(
            "Illegal value for bitdepth.  Only 8, 10 and 12 supported."
        )

    if params.input_bitdepth not in SUPPORTED_BITDEPTHS:
        raise ParameterValidationError(
            "Illegal value for input_bitdepth.  Only 8, 10 and 12 supported."
        )

    if params.bitdepth > 8:
        params.frame_bitdepth = 16

    return params
