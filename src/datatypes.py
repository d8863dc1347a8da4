"""Parameter dataclasses for the encoder front-end."""
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

LIST_SLOT_CAPACITY = 32


class ParamKind(str, Enum):
    """How a registered parameter converts its raw token(s)."""

    STRING = "string"
    INTEGER = "integer"
    FLOAT = "float"
    FLAG = "flag"
    INTEGER_LIST = "integer_list"
    FLOAT_LIST = "float_list"

    @property
    def takes_value(self) -> bool:
        return self is not ParamKind.FLAG


def int_list_factory() -> List[int]:
    return []


def float_list_factory() -> List[float]:
    return []


@dataclass
class IntegerList:
    """
    Fixed-capacity list slot.

    ``as_slot()`` exposes the legacy layout: index 0 holds the element count and
    indices ``1..count`` hold the values.
    """

    values: List[int] = field(default_factory=int_list_factory)
    capacity: int = LIST_SLOT_CAPACITY

    def __len__(self) -> int:
        return len(self.values)

    @property
    def count(self) -> int:
        return len(self.values)

    def as_slot(self) -> List[int]:
        return [self.count, *self.values]


@dataclass
class FloatList:
    """Fixed-capacity slot holding decimal values."""

    values: List[float] = field(default_factory=float_list_factory)
    capacity: int = LIST_SLOT_CAPACITY

    def __len__(self) -> int:
        return len(self.values)

    @property
    def count(self) -> int:
        return len(self.values)


@dataclass
class EncoderParams:
    """Every run parameter consumed by the encoder.

    Fields start zeroed; registry defaults and user overrides are applied on top.
    """

    infilestr: Optional[str] = None
    outfilestr: Optional[str] = None
    reconfilestr: Optional[str] = None
    statfilestr: Optional[str] = None
    file_headerlen: int = 0
    frame_headerlen: int = 0
    num_frames: int = 0
    skip: int = 0
    width: int = 0
    height: int = 0
    qp: int = 0
    log2_sb_size: int = 0
    frame_rate: float = 0.0
    aspectnum: int = 1
    aspectden: int = 1
    lambda_coeffI: float = 0.0
    lambda_coeffP: float = 0.0
    lambda_coeffB: float = 0.0
    lambda_coeffB0: float = 0.0
    lambda_coeffB1: float = 0.0
    lambda_coeffB2: float = 0.0
    lambda_coeffB3: float = 0.0
    early_skip_thr: float = 0.0
    enable_tb_split: int = 0
    enable_pb_split: int = 0
    max_num_ref: int = 0
    HQperiod: int = 0
    num_reorder_pics: int = 0
    dyadic_coding: int = 0
    interp_ref: int = 0
    dqpP: int = 0
    dqpB: int = 0
    dqpB0: int = 0
    dqpB1: int = 0
    dqpB2: int = 0
    dqpB3: int = 0
    mqpP: float = 0.0
    mqpB: float = 0.0
    mqpB0: float = 0.0
    mqpB1: float = 0.0
    mqpB2: float = 0.0
    mqpB3: float = 0.0
    dqpI: int = 0
    intra_period: int = 0
    intra_rdo: int = 0
    max_delta_qp: int = 0
    delta_qp_step: int = 0
    encoder_speed: int = 0
    sync: int = 0
    deblocking: int = 0
    cdef: int = 0  # 0: off, 1: slow, 2: medium, 3: fast
    clpf: int = 0  # 0: off, 1: SB-level, 2: frame-level
    snrcalc: int = 0
    use_block_contexts: int = 0
    enable_bipred: int = 0
    bitrate: int = 0
    max_qp: int = 0
    min_qp: int = 0
    max_qpI: int = 0
    min_qpI: int = 0
    qmtx: int = 0
    qmtx_offset: int = 0  # qp offset for qmlevel calculation, -32 to 31
    subsample: int = 0
    max_clpf_strength: int = 0
    cfl_intra: int = 0
    cfl_inter: int = 0
    bitdepth: int = 0  # internal bitdepth (8, 10 or 12)
    frame_bitdepth: int = 0  # frame buffer bitdepth (8 or 16)
    input_bitdepth: int = 0  # source bitdepth (8, 10 or 12)
