"""Functions for streaming ASCII XYZ files."""

import math
import re
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Iterator, Optional, TextIO, Tuple

import numpy as np

from .types import Point3D

# One number as C strtod reads it in the "C" locale: optional ASCII
# whitespace, then the longest decimal, hex, inf or nan prefix
_NUMBER = re.compile(r"""
    [ \t\n\v\f\r]*
    (?P<num>[+-]?(?:
        (?P<hex>0x(?:[0-9a-f]+\.?[0-9a-f]*|\.[0-9a-f]+)(?:p[+-]?[0-9]+)?)
      | (?P<dec>(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:e[+-]?[0-9]+)?)
      | inf(?:inity)?
      | nan(?:\([0-9a-z_]*\))?
    ))
    """, re.VERBOSE | re.IGNORECASE | re.ASCII)


@dataclass
class XYZStats:
  lines_read: int = 0
  lines_skipped: int = 0

  @property
  def points_read(self) -> int:
    return self.lines_read - self.lines_skipped


def _scan_number(line: str, pos: int) -> Tuple[Optional[float], int]:
  """Reads the number starting at pos; returns (None, pos) on failure.

  Out-of-range values (overflow, or a nonzero mantissa underflowing below
  the smallest normal double) fail like strtod's ERANGE. inf and nan are
  scanned but fail too, since a record needs finite fields.
  """
  m = _NUMBER.match(line, pos)
  if m is None:
    return None, pos
  text = m.group("num")
  if m.group("hex"):
    mantissa = re.split("[pP]", m.group("hex"))[0][2:]
    try:
      value = float.fromhex(text)
    except OverflowError:
      return None, pos
  elif m.group("dec"):
    mantissa = re.split("[eE]", m.group("dec"))[0]
    value = float(text)
  else:
    return None, pos

  if not math.isfinite(value):
    return None, pos
  if abs(value) < sys.float_info.min and mantissa.strip("0.") != "":
    return None, pos
  return value, m.end()


def parse_record(line: str) -> Optional[Point3D]:
  """Parse one "x y z" record.

  Each field is the longest numeric prefix at its position, so "1 2 3abc"
  reads as (1, 2, 3) while "1_0 0 5" is malformed. Blank lines, comments
  and lines whose first three fields do not parse as finite numbers yield
  None. Anything after the third field is ignored.

  Args:
      line: Raw text line, with or without its newline

  Returns:
      Point3D, or None if the line holds no valid record
  """
  s = line.lstrip(" \t")
  if not s or s[0] in "\n#":
    return None

  values = []
  pos = 0
  for _ in range(3):
    value, pos = _scan_number(s, pos)
    if value is None:
      return None
    values.append(value)
  return Point3D(*values)


class XYZStreamer:
  @staticmethod
  def open(path: str) -> TextIO:
    # Undecodable bytes survive as lone surrogates, which never parse as digits
    return Path(path).open("r", encoding="utf-8", errors="surrogateescape")

  @staticmethod
  def stream_points(lines: Iterable[str], chunk_size: int = 100_000,
                    stats: Optional[XYZStats] = None) -> Iterator[Tuple[np.ndarray, int]]:
    """
    Stream valid points from text lines in fixed-size chunks.
    Yields (points, lines_consumed) where points is an (N, 3) float64 array.
    Malformed lines are counted in stats and otherwise ignored.
    """
    if chunk_size < 1:
      raise ValueError(f"chunk_size must be >= 1 (got {chunk_size})")
    if stats is None:
      stats = XYZStats()

    buf = []
    consumed = 0
    for line in lines:
      stats.lines_read += 1
      consumed += 1
      point = parse_record(line)
      if point is None:
        stats.lines_skipped += 1
        continue

      buf.append(point)
      if len(buf) == chunk_size:
        yield np.asarray(buf, dtype=np.float64), consumed
        buf = []
        consumed = 0

    if buf or consumed:
      yield np.asarray(buf, dtype=np.float64).reshape(-1, 3), consumed
