"""Mapping from world coordinates to grid cells."""

import math
from dataclasses import dataclass
from typing import Tuple

import numpy as np

from .types import GridSpec, Rounding

# Absorbs representation error in tie-low mode without moving true ties
TIE_EPSILON = 1e-12


@dataclass(frozen=True)
class Cell:
  col: int  # grid column, 0 <= col < nx
  row: int  # grid row, 0 <= row < ny


def round_half_away(t: float) -> int:
  """Rounds to the nearest integer, ties away from zero (C llround)."""
  a = abs(t)
  f = math.floor(a)
  r = f + 1 if a - f >= 0.5 else f
  return -r if t < 0 else r


def round_tie_low(t: float) -> int:
  """Rounds to the nearest integer, exact ties going to the lower value."""
  f = math.floor(t)
  return f + 1 if t - f > 0.5 + TIE_EPSILON else f


_ROUNDERS = {
    Rounding.STANDARD: round_half_away,
    Rounding.TIE_LOW: round_tie_low,
}


def _clamp(t: float, rounder, n: int) -> int:
  if not math.isfinite(t):
    return 0 if t < 0 else n - 1
  # Python ints do not wrap, so the raw index is clamped exactly
  i = rounder(t)
  if i < 0:
    return 0
  if i >= n:
    return n - 1
  return int(i)


def _round_array(t: np.ndarray, rounding: Rounding) -> np.ndarray:
  if rounding is Rounding.STANDARD:
    a = np.abs(t)
    f = np.floor(a)
    r = np.where(a - f >= 0.5, f + 1.0, f)
    return np.copysign(r, t)
  f = np.floor(t)
  return np.where(t - f > 0.5 + TIE_EPSILON, f + 1.0, f)


class CellMapper:
  """Snaps (x, y) coordinates onto a grid.

  Every input maps to a valid cell: coordinates outside the region are
  clamped to the nearest edge column or row rather than dropped.

  Args:
      spec: Grid the coordinates are snapped onto
      rounding: Rounding strategy used for the fractional grid coordinate
  """

  def __init__(self, spec: GridSpec, rounding: Rounding = Rounding.STANDARD):
    self.spec = spec
    self.rounding = rounding
    self._round = _ROUNDERS[rounding]

  def cell_of(self, x: float, y: float) -> Cell:
    """Returns the clamped cell a single point falls in."""
    spec = self.spec
    tx = (x - spec.region.min_x) / spec.increment
    ty = (y - spec.region.min_y) / spec.increment
    return Cell(_clamp(tx, self._round, spec.nx), _clamp(ty, self._round, spec.ny))

  def index_of(self, x: float, y: float) -> int:
    cell = self.cell_of(x, y)
    return self.spec.flat_index(cell.col, cell.row)

  def cells_of(self, xs: np.ndarray, ys: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    """Vectorised cell_of for arrays of coordinates.

    Clamping happens in float64 before the cast to int64, so coordinates far
    outside the region (or overflowing to infinity) cannot wrap around.

    Args:
        xs: X coordinates
        ys: Y coordinates, same shape as xs

    Returns:
        Tuple of (cols, rows) int64 arrays
    """
    spec = self.spec
    # Offsets may overflow to +/-inf; inf - floor(inf) is nan and never rounds up
    with np.errstate(over='ignore', invalid='ignore'):
      tx = (np.asarray(xs, dtype=np.float64) - spec.region.min_x) / spec.increment
      ty = (np.asarray(ys, dtype=np.float64) - spec.region.min_y) / spec.increment
      cols = np.clip(_round_array(tx, self.rounding), 0, spec.nx - 1)
      rows = np.clip(_round_array(ty, self.rounding), 0, spec.ny - 1)
    return cols.astype(np.int64), rows.astype(np.int64)

  def indices_of(self, xs: np.ndarray, ys: np.ndarray) -> np.ndarray:
    cols, rows = self.cells_of(xs, ys)
    return cols + self.spec.nx * rows
