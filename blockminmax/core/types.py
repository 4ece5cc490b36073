"""Common data types used across modules."""

import math
import sys
from dataclasses import dataclass
from enum import Enum
from typing import NamedTuple

from .errors import ConfigurationError, GridOverflowError


class Point3D(NamedTuple):
  x: float
  y: float
  z: float


class Objective(Enum):
  """Which z-value a cell keeps."""
  MINIMUM = "minimum"
  MAXIMUM = "maximum"

  @property
  def suffix(self) -> str:
    return ".min" if self is Objective.MINIMUM else ".max"


class Rounding(Enum):
  """How a fractional grid coordinate snaps to a cell index.

  STANDARD rounds half away from zero. TIE_LOW sends an exact half-way
  coordinate to the lower index, matching the legacy Tcl gridder.
  """
  STANDARD = "standard"
  TIE_LOW = "tie-low"


def _enum_value(enum_cls, value, aliases=None):
  if isinstance(value, enum_cls):
    return value
  key = str(value).strip().lower()
  if aliases and key in aliases:
    key = aliases[key]
  try:
    return enum_cls(key)
  except ValueError:
    choices = ", ".join(member.value for member in enum_cls)
    raise ConfigurationError(
        f"Invalid {enum_cls.__name__.lower()} '{value}' (expected one of: {choices})") from None


def parse_objective(value) -> Objective:
  return _enum_value(Objective, value, {"min": "minimum", "max": "maximum"})


def parse_rounding(value) -> Rounding:
  return _enum_value(Rounding, value, {"tcl": "tie-low", "tie_low": "tie-low", "tielow": "tie-low"})


@dataclass(frozen=True)
class Region:
  min_x: float
  max_x: float
  min_y: float
  max_y: float

  def __post_init__(self):
    # Written as negations so NaN bounds are rejected too
    if not (self.max_x > self.min_x and self.max_y > self.min_y):
      raise ConfigurationError(
          "Invalid region; require xmax > xmin and ymax > ymin "
          f"(got {self.min_x}/{self.max_x}/{self.min_y}/{self.max_y})")

  def __str__(self) -> str:
    return f"{self.min_x:.12g}/{self.max_x:.12g}/{self.min_y:.12g}/{self.max_y:.12g}"


def _axis_count(span: float, increment: float) -> int:
  steps = span / increment
  if not math.isfinite(steps):
    raise GridOverflowError("Grid size too large (overflow)")
  # Inclusive bounds, step count rounded half up
  count = math.floor(steps + 0.5) + 1
  if count < 1:
    raise ConfigurationError("Computed grid dimensions invalid")
  return count


@dataclass(frozen=True)
class GridSpec:
  """Regular grid laid over a region.

  Column and row counts are derived from the region extent and the
  increment. The total cell count must fit the platform size type.
  """
  region: Region
  increment: float
  nx: int
  ny: int

  @classmethod
  def from_region(cls, region: Region, increment: float) -> 'GridSpec':
    """Derives grid dimensions for a region and cell size.

    Args:
        region: Area covered by the grid
        increment: Cell size, must be positive and finite

    Returns:
        GridSpec: The validated grid specification

    Raises:
        ConfigurationError: If the increment or the derived dimensions are invalid
        GridOverflowError: If nx * ny cannot be represented as a size
    """
    increment = float(increment)
    if not (increment > 0.0 and math.isfinite(increment)):
      raise ConfigurationError(f"Increment must be > 0 (got {increment})")

    nx = _axis_count(region.max_x - region.min_x, increment)
    ny = _axis_count(region.max_y - region.min_y, increment)
    if nx > sys.maxsize // ny:
      raise GridOverflowError(
          f"Grid size too large (overflow): {nx} columns by {ny} rows")
    return cls(region, increment, nx, ny)

  @property
  def ncell(self) -> int:
    return self.nx * self.ny

  def flat_index(self, col: int, row: int) -> int:
    return col + self.nx * row

  def cell_origin(self, col, row) -> tuple:
    """World coordinates of a cell's grid node; works elementwise on arrays."""
    return (self.region.min_x + col * self.increment,
            self.region.min_y + row * self.increment)
