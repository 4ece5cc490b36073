"""Grid-based min/max reduction of point clouds."""

from typing import List

import numpy as np

from .cell import CellMapper
from .errors import GridAllocationError
from .types import GridSpec, Objective, Point3D, Rounding


class GridAggregator:
  """Keeps the minimum or maximum z per grid cell.

  Storage is dense: a float64 value per cell plus an explicit occupancy
  mask. Values start at +inf (minimum) or -inf (maximum), but a cell only
  counts once a point has landed in it.
  """

  def __init__(self, spec: GridSpec,
               objective: Objective = Objective.MINIMUM,
               rounding: Rounding = Rounding.STANDARD):
    self.spec = spec
    self.objective = objective
    self.mapper = CellMapper(spec, rounding)
    self._find_min = objective is Objective.MINIMUM

    preset = np.inf if self._find_min else -np.inf
    try:
      self.values = np.full(spec.ncell, preset, dtype=np.float64)
      self.hit = np.zeros(spec.ncell, dtype=np.bool_)
    except (MemoryError, ValueError) as e:
      raise GridAllocationError(
          f"Out of memory allocating grid of {spec.nx} x {spec.ny} cells") from e

  def ingest(self, x: float, y: float, z: float):
    """Routes one finite point to its cell and applies the reduction."""
    idx = self.mapper.index_of(x, y)
    # Fold -0.0 into 0.0 so equal values are indistinguishable
    z = z + 0.0
    if not self.hit[idx]:
      self.values[idx] = z
      self.hit[idx] = True
    elif (z < self.values[idx]) if self._find_min else (z > self.values[idx]):
      self.values[idx] = z

  def ingest_batch(self, xs: np.ndarray, ys: np.ndarray, zs: np.ndarray) -> int:
    """Applies ingest to every point of a chunk.

    Args:
        xs: X coordinates, finite
        ys: Y coordinates, finite
        zs: Z values, finite

    Returns:
        int: Number of points ingested
    """
    zs = np.asarray(zs, dtype=np.float64)
    if zs.size == 0:
      return 0
    idx = self.mapper.indices_of(xs, ys)
    reduce = np.minimum if self._find_min else np.maximum
    reduce.at(self.values, idx, zs + 0.0)
    self.hit[idx] = True
    return int(zs.size)

  @property
  def occupied_count(self) -> int:
    return int(np.count_nonzero(self.hit))

  def finalize(self) -> List[Point3D]:
    """Get the occupied cells as world-space points.

    Cells come out in row-major order (rows ascending, columns ascending
    within a row). Untouched cells are omitted. The grid is only read, so
    repeated calls return the same sequence.

    Returns:
        List of (x, y, z) with x, y at the cell's grid node
    """
    spec = self.spec
    # Flat index col + nx * row ascends in row-major order
    occupied = np.flatnonzero(self.hit)
    rows, cols = np.divmod(occupied, spec.nx)
    xs, ys = spec.cell_origin(cols.astype(np.float64), rows.astype(np.float64))
    zs = self.values[occupied]
    return [Point3D(float(x), float(y), float(z)) for x, y, z in zip(xs, ys, zs)]
