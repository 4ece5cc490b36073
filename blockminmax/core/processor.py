import sys
from typing import Dict, Iterable, List, TextIO, Any

from tqdm import tqdm

from .grid import GridAggregator
from .types import GridSpec, Objective, Point3D, Region, Rounding
from .xyz_reader import XYZStats, XYZStreamer

OUTPUT_FORMATS = {
    "standard": "%.10g %.10g %.10g\n",
    # x/y with one decimal, as the legacy Tcl gridder printed them
    "legacy": "%.1f %.1f %.10g\n",
}


def _status(message: str, show_progress: bool):
  if show_progress:
    print(message, file=sys.stderr)


def reduce_points(lines: Iterable[str],
                  grid: GridAggregator,
                  chunk_size: int = 100_000,
                  show_progress: bool = True) -> Dict[str, int]:
  """
  Fold a stream of XYZ text lines into a grid.

  Args:
      lines: Raw text records, one point per line
      grid: Aggregator receiving the points
      chunk_size: Points parsed per vectorised update
      show_progress: Whether to show a progress bar over lines read

  Returns:
      Dict with 'lines_read', 'lines_skipped', 'points_ingested'
  """
  stats = XYZStats()
  points_ingested = 0

  with tqdm(desc="Reading points", unit=" lines", unit_scale=True,
            disable=not show_progress) as bar:
    for chunk, consumed in XYZStreamer.stream_points(lines, chunk_size, stats):
      points_ingested += grid.ingest_batch(chunk[:, 0], chunk[:, 1], chunk[:, 2])
      bar.update(consumed)

  return {
      "lines_read": stats.lines_read,
      "lines_skipped": stats.lines_skipped,
      "points_ingested": points_ingested,
  }


def write_cells(cells: List[Point3D], sink: TextIO, output_format: str = "standard") -> int:
  """Write reduced cells as text records and return how many were written."""
  try:
    fmt = OUTPUT_FORMATS[output_format]
  except KeyError:
    raise ValueError(f"Unknown output format: {output_format}") from None

  for cell in cells:
    sink.write(fmt % (cell.x, cell.y, cell.z))
  return len(cells)


def process_xyz_file(input_file: str,
                     output_file: str,
                     region: Region,
                     increment: float = 1.0,
                     objective: Objective = Objective.MINIMUM,
                     rounding: Rounding = Rounding.STANDARD,
                     output_format: str = "standard",
                     chunk_size: int = 100_000,
                     show_progress: bool = True) -> Dict[str, Any]:
  """
  Reduce an XYZ file onto a grid and write the occupied cells.

  The grid is sized and allocated before the input is opened, so a bad
  configuration fails without touching any file.

  Args:
      input_file: Path of the whitespace-delimited XYZ input
      output_file: Path the reduced cells are written to
      region: Area covered by the grid
      increment: Cell size
      objective: Keep the minimum or maximum z per cell
      rounding: Cell snapping rule
      output_format: 'standard' or 'legacy'
      chunk_size: Points parsed per vectorised update
      show_progress: Whether to print status lines and a progress bar

  Returns:
      Dict with 'lines_read', 'lines_skipped', 'points_ingested',
      'cells_written', 'columns', 'rows', 'output_file'
  """
  if output_format not in OUTPUT_FORMATS:
    raise ValueError(f"Unknown output format: {output_format}")

  _status(f"region {region}", show_progress)
  spec = GridSpec.from_region(region, increment)
  _status(f"{spec.nx} columns by {spec.ny} rows", show_progress)

  grid = GridAggregator(spec, objective, rounding)
  _status("initialised grid", show_progress)

  with XYZStreamer.open(input_file) as fin:
    counts = reduce_points(fin, grid, chunk_size, show_progress)
  _status("updated grid with z" + ("min" if objective is Objective.MINIMUM else "max"),
          show_progress)

  _status(f"write {output_file}", show_progress)
  with open(output_file, "w") as fout:
    cells_written = write_cells(grid.finalize(), fout, output_format)

  if show_progress:
    print(f"Lines read: {counts['lines_read']:,}", file=sys.stderr)
    print(f"Lines skipped: {counts['lines_skipped']:,}", file=sys.stderr)
    print(f"Cells written: {cells_written:,}", file=sys.stderr)

  return {
      **counts,
      "cells_written": cells_written,
      "columns": spec.nx,
      "rows": spec.ny,
      "output_file": str(output_file),
  }
