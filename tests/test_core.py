from collections.abc import Callable
from pathlib import Path

import pytest

from src.config_loader import ContainerHeaderError, ParameterValidationError, ParseError
from src.encparams.core import parse_config_params, resolve_parameters

_REGISTRY_DEFAULTS = {
    "num_frames": 600,
    "width": 1920,
    "height": 1080,
    "qp": 32,
    "frame_rate": 60.0,
    "lambda_coeffB3": 1.0,
    "max_num_ref": 1,
    "dyadic_coding": 1,
    "deblocking": 1,
    "cdef": 2,
    "max_qp": 51,
    "subsample": 420,
    "cfl_intra": 1,
    "bitdepth": 8,
    "aspectnum": 1,
    "aspectden": 1,
}


def test_registry_defaults_are_applied() -> None:
    params = parse_config_params([])
    for field_name, expected in _REGISTRY_DEFAULTS.items():
        assert getattr(params, field_name) == expected, field_name
    assert params.infilestr is None
    assert params.file_headerlen == 0
    assert params.frame_headerlen == 0


@pytest.mark.parametrize(
    ("argv", "field_name", "expected"),
    [
        (["-qp", "22"], "qp", 22),
        (["-width", "352"], "width", 352),
        (["-f", "25"], "frame_rate", 25.0),
        (["-subsample", "444"], "subsample", 444),
        (["-dyadic_coding", "0"], "dyadic_coding", 0),
        (["-ph", "44", "-fh", "6"], "file_headerlen", 44),
    ],
)
def test_overrides_replace_defaults(argv: list[str], field_name: str, expected: object) -> None:
    assert getattr(parse_config_params(argv), field_name) == expected


def test_nested_include_applies_after_triggering_flag(
    write_cfg: Callable[[str, str], Path]
) -> None:
    cfg = write_cfg("file.cfg", "-width 200\n")
    params = parse_config_params(["-width", "100", "-cf", str(cfg)])
    assert params.width == 200


def test_multi_level_includes(write_cfg: Callable[[str, str], Path]) -> None:
    inner = write_cfg("inner.cfg", "-qp 28\n-of \"inner out.bit\"\n")
    outer = write_cfg("outer.cfg", f'; outer\n-height 288\n-cf "{inner}"\n-qp 30\n')
    params = parse_config_params(["-cf", str(outer), "-n", "10"])
    assert params.height == 288
    assert params.qp == 30
    assert params.outfilestr == "inner out.bit"
    assert params.num_frames == 10


def test_comment_only_config_changes_nothing(write_cfg: Callable[[str, str], Path]) -> None:
    cfg = write_cfg("blank.cfg", "; just notes\n\n")
    assert parse_config_params(["-cf", str(cfg)]) == parse_config_params([])


def test_include_depth_argument(write_cfg: Callable[[str, str], Path]) -> None:
    leaf = write_cfg("leaf.cfg", "-qp 10\n")
    top = write_cfg("top.cfg", f'-cf "{leaf}"\n')
    with pytest.raises(ParseError, match="depth exceeds 1"):
        parse_config_params(["-cf", str(top)], max_include_depth=1)
    assert parse_config_params(["-cf", str(top)], max_include_depth=2).qp == 10


def test_unknown_flag_aborts_session() -> None:
    with pytest.raises(ParseError, match="Unknown parameter: --width"):
        parse_config_params(["--width", "64"])


def test_y4m_input_overrides_explicit_geometry(write_y4m: Callable[[bytes], Path]) -> None:
    path = write_y4m(b"YUV4MPEG2 W176 H144 F25:1 Ip A1:1 C420\nFRAME\n")
    params = parse_config_params(["-if", str(path), "-width", "1280", "-height", "720"])
    assert (params.width, params.height) == (176, 144)
    assert params.frame_rate == 25.0
    assert params.subsample == 420
    assert params.file_headerlen == len(b"YUV4MPEG2 W176 H144 F25:1 Ip A1:1 C420\n")
    assert params.frame_headerlen == 6


def test_y4m_probe_can_be_disabled(write_y4m: Callable[[bytes], Path]) -> None:
    path = write_y4m(b"YUV4MPEG2 W176 H144 F25:1 Ip C420\nFRAME\n")
    params = parse_config_params(["-if", str(path)], probe_container=False)
    assert (params.width, params.height) == (1920, 1080)
    assert params.file_headerlen == 0


def test_non_y4m_input_keeps_explicit_offsets(tmp_path: Path) -> None:
    raw = tmp_path / "clip.yuv"
    raw.write_bytes(b"\x00" * 300)
    params = parse_config_params(["-if", str(raw), "-ph", "12", "-fh", "4"])
    assert params.file_headerlen == 12
    assert params.frame_headerlen == 4


def test_missing_input_is_not_probed(tmp_path: Path) -> None:
    params = parse_config_params(["-if", str(tmp_path / "later.y4m")])
    assert params.width == 1920


def test_interlaced_y4m_aborts(write_y4m: Callable[[bytes], Path]) -> None:
    path = write_y4m(b"YUV4MPEG2 W176 H144 F25:1 It C420\nFRAME\n")
    with pytest.raises(ContainerHeaderError, match="Only progressive"):
        parse_config_params(["-if", str(path)])


def test_high_bitdepth_y4m_forces_frame_buffers(write_y4m: Callable[[bytes], Path]) -> None:
    path = write_y4m(b"YUV4MPEG2 W64 H64 F30:1 Ip C420p10\nFRAME\n")
    params = parse_config_params(["-if", str(path), "-frame_bitdepth", "8"])
    assert params.input_bitdepth == 10
    assert params.frame_bitdepth == 16


def test_resolve_parameters_validates() -> None:
    with pytest.raises(ParameterValidationError, match="multiple of 8"):
        resolve_parameters(["-width", "100"])
    params = resolve_parameters(["-width", "100"], validate=False)
    assert params.width == 100


def test_resolve_parameters_normalises_bitdepth() -> None:
    params = resolve_parameters(["-bitdepth", "10", "-frame_bitdepth", "8"])
    assert params.frame_bitdepth == 16
