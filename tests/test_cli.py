"""
Test cases for the blockminmax command line.

Following Google style guide with clear naming and 3-block structure.
"""

import pytest

from blockminmax.cli import build_parser, config_from_args, main
from blockminmax.core.types import Objective, Rounding

POINTS = "-0.49 -0.49 5\n0.5 0.5 10\n2.0 2.0 9\n1.49 0.49 7\n"


@pytest.fixture
def xyz(tmp_path):
    path = tmp_path / "test.xyz"
    path.write_text(POINTS)
    return path


def test_main_default_writes_min_file(xyz):
    """Test the default run writes <file>.min."""
    code = main(["-R0/2/0/2", "-I1", "-PATH", str(xyz), "-q"])

    assert code == 0
    assert xyz.with_name("test.xyz.min").read_text() == "0 0 5\n1 0 7\n1 1 10\n2 2 9\n"


def test_main_max_with_output_and_legacy_options(xyz, tmp_path):
    """Test -MAX, -o, --tclround and --tclfmt together."""
    out = tmp_path / "c.max"

    code = main(["-R0/2/0/2", "-I", "1", "-path", str(xyz), "-MAX", "-o", str(out),
                 "--tclround", "--tclfmt", "--quiet"])

    assert code == 0
    assert out.read_text() == "0.0 0.0 10\n1.0 0.0 7\n2.0 2.0 9\n"


def test_main_accepts_positional_path(xyz):
    """Test the input file may be given without -PATH."""
    code = main(["-R0/2/0/2", str(xyz), "-q"])

    assert code == 0
    assert xyz.with_name("test.xyz.min").exists()


def test_config_from_args_maps_flags():
    """Test flags translate into the matching configuration."""
    args = build_parser().parse_args(["-R-5/5/-5/5", "-I0.25", "-PATH", "p.xyz", "-MAX", "--tclround"])

    config = config_from_args(args)

    assert config.increment == 0.25
    assert config.mode is Objective.MAXIMUM
    assert config.rounding is Rounding.TIE_LOW
    assert config.output_path() == "p.xyz.max"


@pytest.mark.parametrize("argv", [
    ["-R0/2/0/2", "-I0", "-PATH", "p.xyz"],
    ["-R0/2/0/2", "-I-1", "-PATH", "p.xyz"],
    ["-R2/0/0/2", "-PATH", "p.xyz"],
    ["-R0/2/0", "-PATH", "p.xyz"],
    ["-R0/2/0/2"],
    ["-PATH", "p.xyz"],
    ["-R0/2/0/2", "-PATH", "p.xyz", "q.xyz"],
])
def test_main_invalid_arguments_exit_with_usage_error(argv, capsys):
    """Test bad options exit with status 2 and a message."""
    with pytest.raises(SystemExit) as excinfo:
        main(argv)

    assert excinfo.value.code == 2
    assert "error" in capsys.readouterr().err


def test_main_missing_input_file_returns_1(tmp_path, capsys):
    """Test an unreadable input file fails with status 1."""
    code = main(["-R0/2/0/2", "-PATH", str(tmp_path / "missing.xyz"), "-q"])

    assert code == 1
    assert "missing.xyz" in capsys.readouterr().err
