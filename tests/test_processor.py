"""
Test cases for end-to-end XYZ reduction (blockminmax.block_minmax).

Following Google style guide with clear naming and 3-block structure.
"""

import io
import json

import pytest

from blockminmax import (Config, ConfigurationError, Objective, Point3D, Region,
                         Rounding, block_minmax)
from blockminmax.core.processor import process_xyz_file, write_cells

# Highlights the difference between the rounding modes:
# - out-of-bounds point near (0,0) is clamped into (0,0)
# - exact 0.5 tie goes to (1,1) with standard rounding, (0,0) with tie-low
SMALL_XYZ = """\
-0.49 -0.49 5
0.5   0.5   10
2.0   2.0   9
1.49  0.49  7
"""


def _write(tmp_path, text, name="points.xyz"):
    path = tmp_path / name
    path.write_text(text)
    return path


def test_block_minmax_default_mode_matches_reference(tmp_path):
    """Test standard rounding and output format on a tiny dataset."""
    path = _write(tmp_path, SMALL_XYZ)

    result = block_minmax({"input_file": str(path), "region": "0/2/0/2",
                           "increment": 1, "show_progress": False})

    assert result["output_file"] == f"{path}.min"
    assert (tmp_path / "points.xyz.min").read_text() == "0 0 5\n1 0 7\n1 1 10\n2 2 9\n"


def test_block_minmax_tie_low_legacy_format_matches_reference(tmp_path):
    """Test tie-low rounding with the legacy one-decimal x/y format."""
    path = _write(tmp_path, SMALL_XYZ)
    out = tmp_path / "tcllike.min"

    block_minmax({"input_file": str(path), "output_file": str(out),
                  "region": "-R0/2/0/2", "rounding": "tie-low",
                  "output_format": "legacy", "show_progress": False})

    assert out.read_text() == "0.0 0.0 5\n1.0 0.0 7\n2.0 2.0 9\n"


def test_block_minmax_maximum_mode_default_output_path(tmp_path):
    """Test maximum mode writes to <input>.max."""
    path = _write(tmp_path, SMALL_XYZ)

    result = block_minmax(json.dumps({"input_file": str(path), "min_x": 0, "max_x": 2,
                                      "min_y": 0, "max_y": 2, "mode": "maximum",
                                      "rounding": "tie-low", "show_progress": False}))

    assert result["output_file"] == f"{path}.max"
    assert (tmp_path / "points.xyz.max").read_text() == "0 0 10\n1 0 7\n2 2 9\n"


def test_block_minmax_returns_counts(tmp_path):
    """Test the result dict reports lines, points and cells."""
    path = _write(tmp_path, "# survey\n" + SMALL_XYZ + "\nX Y Z\n")

    result = block_minmax({"input_file": str(path), "region": "0/2/0/2",
                           "show_progress": False, "chunk_size": 3})

    assert result["lines_read"] == 7
    assert result["lines_skipped"] == 3
    assert result["points_ingested"] == 4
    assert result["cells_written"] == 4
    assert (result["columns"], result["rows"]) == (3, 3)


def test_malformed_lines_do_not_change_output(tmp_path):
    """Test junk lines give the same output as the input without them."""
    clean = _write(tmp_path, SMALL_XYZ, "clean.xyz")
    noisy = _write(tmp_path, "\n# exported points\n-0.49 -0.49 5\n  \n"
                             "x y z\n0.5   0.5   10\nfoo 1 2\n2.0   2.0   9\n"
                             "1 2\n   # trailing comment\n1.49  0.49  7\n", "noisy.xyz")

    for p in (clean, noisy):
        block_minmax({"input_file": str(p), "region": "0/2/0/2", "show_progress": False})

    assert (tmp_path / "noisy.xyz.min").read_bytes() == (tmp_path / "clean.xyz.min").read_bytes()


def test_undecodable_byte_in_number_affects_no_cell(tmp_path):
    """Test a record split by an invalid byte is skipped, not read as 19 0 7."""
    path = tmp_path / "points.xyz"
    path.write_bytes(b"0 0 1\n1\xff9 0 7\n")

    result = block_minmax({"input_file": str(path), "region": "0/20/0/2", "show_progress": False})

    assert (tmp_path / "points.xyz.min").read_text() == "0 0 1\n"
    assert result["lines_skipped"] == 1


def test_lone_negative_zero_is_written_as_zero(tmp_path):
    """Test a cell whose only z is -0 is written as 0."""
    path = _write(tmp_path, "1 1 -0\n")

    block_minmax({"input_file": str(path), "region": "0/2/0/2", "show_progress": False})

    assert (tmp_path / "points.xyz.min").read_text() == "1 1 0\n"


def test_empty_input_writes_empty_output(tmp_path):
    """Test no points in the region is not an error."""
    path = _write(tmp_path, "# nothing here\n")

    result = block_minmax({"input_file": str(path), "region": "0/2/0/2", "show_progress": False})

    assert result["cells_written"] == 0
    assert (tmp_path / "points.xyz.min").read_text() == ""


def test_configuration_error_writes_nothing(tmp_path):
    """Test a bad grid fails before any output file is created."""
    path = _write(tmp_path, SMALL_XYZ)
    out = tmp_path / "out.min"

    with pytest.raises(ConfigurationError):
        process_xyz_file(str(path), str(out), Region(0.0, 1e10, 0.0, 1e10),
                         increment=1e-5, show_progress=False)

    assert not out.exists()


def test_missing_input_file_raises_error(tmp_path):
    """Test a missing input file surfaces as FileNotFoundError."""
    with pytest.raises(FileNotFoundError):
        block_minmax({"input_file": str(tmp_path / "missing.xyz"), "region": "0/2/0/2",
                      "show_progress": False})


def test_progress_output_goes_to_stderr(tmp_path, capsys):
    """Test status lines are printed to stderr only when enabled."""
    path = _write(tmp_path, SMALL_XYZ)

    block_minmax({"input_file": str(path), "region": "0/2/0/2", "show_progress": False})
    quiet = capsys.readouterr()
    block_minmax({"input_file": str(path), "region": "0/2/0/2", "show_progress": True})
    loud = capsys.readouterr()

    assert quiet.out == "" and quiet.err == ""
    assert loud.out == ""
    assert "region 0/2/0/2" in loud.err
    assert "3 columns by 3 rows" in loud.err
    assert "updated grid with zmin" in loud.err
    assert "Cells written: 4" in loud.err


def test_block_minmax_accepts_config_object(tmp_path):
    """Test a Config instance is used as-is."""
    path = _write(tmp_path, SMALL_XYZ)
    config = Config(str(path), Region(0.0, 2.0, 0.0, 2.0), output_file=str(tmp_path / "o.txt"),
                    mode=Objective.MAXIMUM, rounding=Rounding.STANDARD, show_progress=False)

    result = block_minmax(config)

    assert result["output_file"] == str(tmp_path / "o.txt")
    assert (tmp_path / "o.txt").read_text() == "0 0 5\n1 0 7\n1 1 10\n2 2 9\n"


def test_write_cells_formats_ten_significant_digits():
    """Test the standard format uses %.10g per field."""
    sink = io.StringIO()

    count = write_cells([Point3D(1585520.5, 5464422.5, 123.456789012345),
                         Point3D(0.1 + 0.2, -0.0, 1e-12)], sink)

    assert count == 2
    assert sink.getvalue() == "1585520.5 5464422.5 123.456789\n0.3 -0 1e-12\n"


def test_write_cells_unknown_format_raises_error():
    """Test an unknown output format is rejected."""
    with pytest.raises(ValueError, match="Unknown output format"):
        write_cells([], io.StringIO(), "csv")
