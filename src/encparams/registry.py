"""Ordered table of recognised encoder flags."""

from __future__ import annotations

from dataclasses import dataclass, fields, is_dataclass
from typing import Any, Dict, Iterator, List, Optional

from src.config_loader import ParseError, RegistryError
from src.datatypes import EncoderParams, ParamKind

__all__ = [
    "INCLUDE_FLAG",
    "MAX_PARAMS",
    "ParamEntry",
    "ParamRegistry",
    "build_encoder_registry",
]

MAX_PARAMS = 200
INCLUDE_FLAG = "-cf"


@dataclass(frozen=True)
class ParamEntry:
    """One registered flag: its name, default literal, kind, and destination field."""

    name: str
    default: Optional[str]
    kind: ParamKind
    field: Optional[str] = None


class ParamRegistry:
    """
    Registration-ordered flag table bound to a target dataclass.

    Lookups are exact and case-sensitive. When a name is registered twice the
    first entry wins; later duplicates are kept for ordering but never matched.
    """

    def __init__(self, target: type = EncoderParams, *, capacity: int = MAX_PARAMS) -> None:
        if not is_dataclass(target):
            raise RegistryError(f"Registry target must be a dataclass, got {target!r}")
        self.target = target
        self.capacity = capacity
        self._entries: List[ParamEntry] = []
        self._by_name: Dict[str, ParamEntry] = {}
        self._field_names = {item.name for item in fields(target)}
        self._frozen = False

    def register(
        self,
        name: str,
        default: Optional[str],
        kind: ParamKind,
        field: Optional[str] = None,
    ) -> ParamEntry:
        if self._frozen:
            raise RegistryError(f"Registry is frozen; cannot add {name}")
        if len(self._entries) >= self.capacity:
            raise RegistryError(
                f"Too many parameters registered (capacity {self.capacity}); cannot add {name}"
            )
        if field is None and name != INCLUDE_FLAG:
            raise RegistryError(f"Parameter {name} has no destination field")
        if field is not None and field not in self._field_names:
            raise RegistryError(
                f"Parameter {name} targets unknown field {self.target.__name__}.{field}"
            )
        entry = ParamEntry(name=name, default=default, kind=kind, field=field)
        self._entries.append(entry)
        self._by_name.setdefault(name, entry)
        return entry

    def freeze(self) -> "ParamRegistry":
        self._frozen = True
        return self

    @property
    def frozen(self) -> bool:
        return self._frozen

    def lookup(self, name: str) -> Optional[ParamEntry]:
        return self._by_name.get(name)

    def require(self, name: str) -> ParamEntry:
        entry = self._by_name.get(name)
        if entry is None:
            raise ParseError(f"Unknown parameter: {name}")
        return entry

    def new_target(self) -> Any:
        return self.target()

    def default_tokens(self) -> List[str]:
        """Return ``name value`` pairs for every entry carrying a default literal."""

        tokens: List[str] = []
        for entry in self._entries:
            if entry.default is None:
                continue
            if entry.kind.takes_value:
                tokens.extend((entry.name, entry.default))
            elif entry.default.strip() not in {"", "0"}:
                tokens.append(entry.name)
        return tokens

    def __iter__(self) -> Iterator[ParamEntry]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, name: object) -> bool:
        return name in self._by_name


_STRING = ParamKind.STRING
_INT = ParamKind.INTEGER
_FLOAT = ParamKind.FLOAT

_ENCODER_PARAMS: tuple[tuple[str, Optional[str], ParamKind, Optional[str]], ...] = (
    (INCLUDE_FLAG, None, _STRING, None),
    ("-if", None, _STRING, "infilestr"),
    ("-ph", "0", _INT, "file_headerlen"),
    ("-fh", "0", _INT, "frame_headerlen"),
    ("-of", None, _STRING, "outfilestr"),
    ("-rf", None, _STRING, "reconfilestr"),
    ("-stat", None, _STRING, "statfilestr"),
    ("-n", "600", _INT, "num_frames"),
    ("-skip", "0", _INT, "skip"),
    ("-width", "1920", _INT, "width"),
    ("-height", "1080", _INT, "height"),
    ("-qp", "32", _INT, "qp"),
    ("-log2_sb_size", "7", _INT, "log2_sb_size"),
    ("-f", "60", _FLOAT, "frame_rate"),
    ("-lambda_coeffI", "1.0", _FLOAT, "lambda_coeffI"),
    ("-lambda_coeffP", "1.0", _FLOAT, "lambda_coeffP"),
    ("-lambda_coeffB", "1.0", _FLOAT, "lambda_coeffB"),
    ("-lambda_coeffB0", "1.0", _FLOAT, "lambda_coeffB0"),
    ("-lambda_coeffB1", "1.0", _FLOAT, "lambda_coeffB1"),
    ("-lambda_coeffB2", "1.0", _FLOAT, "lambda_coeffB2"),
    ("-lambda_coeffB3", "1.0", _FLOAT, "lambda_coeffB3"),
    ("-early_skip_thr", "0.0", _FLOAT, "early_skip_thr"),
    ("-enable_tb_split", "0", _INT, "enable_tb_split"),
    ("-enable_pb_split", "0", _INT, "enable_pb_split"),
    ("-max_num_ref", "1", _INT, "max_num_ref"),
    ("-HQperiod", "1", _INT, "HQperiod"),
    ("-num_reorder_pics", "0", _INT, "num_reorder_pics"),
    ("-dyadic_coding", "1", _INT, "dyadic_coding"),
    ("-interp_ref", "0", _INT, "interp_ref"),
    ("-dqpP", "0", _INT, "dqpP"),
    ("-dqpB", "0", _INT, "dqpB"),
    ("-dqpB0", "0", _INT, "dqpB0"),
    ("-dqpB1", "0", _INT, "dqpB1"),
    ("-dqpB2", "0", _INT, "dqpB2"),
    ("-dqpB3", "0", _INT, "dqpB3"),
    ("-mqpP", "1.0", _FLOAT, "mqpP"),
    ("-mqpB", "1.0", _FLOAT, "mqpB"),
    ("-mqpB0", "1.0", _FLOAT, "mqpB0"),
    ("-mqpB1", "1.0", _FLOAT, "mqpB1"),
    ("-mqpB2", "1.0", _FLOAT, "mqpB2"),
    ("-mqpB3", "1.0", _FLOAT, "mqpB3"),
    ("-dqpI", "0", _INT, "dqpI"),
    ("-intra_period", "0", _INT, "intra_period"),
    ("-intra_rdo", "0", _INT, "intra_rdo"),
    ("-max_delta_qp", "0", _INT, "max_delta_qp"),
    ("-delta_qp_step", "1", _INT, "delta_qp_step"),
    ("-encoder_speed", "0", _INT, "encoder_speed"),
    ("-sync", "0", _INT, "sync"),
    ("-deblocking", "1", _INT, "deblocking"),
    ("-cdef", "2", _INT, "cdef"),
    ("-clpf", "0", _INT, "clpf"),
    ("-snrcalc", "1", _INT, "snrcalc"),
    ("-use_block_contexts", "0", _INT, "use_block_contexts"),
    ("-enable_bipred", "0", _INT, "enable_bipred"),
    ("-bitrate", "0", _INT, "bitrate"),
    ("-max_qp", "51", _INT, "max_qp"),
    ("-min_qp", "1", _INT, "min_qp"),
    ("-max_qpI", "32", _INT, "max_qpI"),
    ("-min_qpI", "32", _INT, "min_qpI"),
    ("-qmtx", "0", _INT, "qmtx"),
    ("-qmtx_offset", "0", _INT, "qmtx_offset"),
    ("-subsample", "420", _INT, "subsample"),
    ("-max_clpf_strength", "4", _INT, "max_clpf_strength"),
    ("-enable_cfl_intra", "1", _INT, "cfl_intra"),
    ("-enable_cfl_inter", "0", _INT, "cfl_inter"),
    ("-bitdepth", "8", _INT, "bitdepth"),
    ("-frame_bitdepth", "8", _INT, "frame_bitdepth"),
    ("-input_bitdepth", "8", _INT, "input_bitdepth"),
)


def build_encoder_registry() -> ParamRegistry:
    """Build the frozen registry of every encoder flag, in legacy order."""

    registry = ParamRegistry(EncoderParams)
    for name, default, kind, field in _ENCODER_PARAMS:
        registry.register(name, default, kind, field)
    return registry.freeze()
