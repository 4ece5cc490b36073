"""
Configuration for block min/max runs.

A run can be described by a Config object, a plain dict, a JSON string, or a
YAML file. YAML files may reference other values with ${dotted.path}:

    input_file: /data/spittals.xyz
    output_file: ${input_file}.max
    region: 1585520.5/1587224.5/5464422.5/5467728.5
    increment: 0.5
    mode: maximum
"""

import json
import re
from dataclasses import dataclass
from typing import Any, Dict, Optional, Union

import yaml
from addict import Dict as AttrDict

from .core.errors import ConfigurationError
from .core.types import (Objective, Region, Rounding, parse_objective,
                         parse_rounding)
from .core.processor import OUTPUT_FORMATS

_VAR = re.compile(r'\${([^}]*)}')


def interpolate_vars(data, context=None):
    """Recursively interpolate ${var} references in the config."""
    if context is None:
        context = data

    if isinstance(data, dict):
        return {key: interpolate_vars(value, context) for key, value in data.items()}
    elif isinstance(data, list):
        return [interpolate_vars(item, context) for item in data]
    elif isinstance(data, str):
        while True:
            match = _VAR.search(data)
            if not match:
                break
            value = context
            for part in match.group(1).split('.'):
                try:
                    value = value[part]
                except (KeyError, TypeError):
                    raise ConfigurationError(
                        f"Unknown config variable: {match.group(1)}") from None
            data = data.replace(match.group(0), str(value))
        return data
    else:
        return data


def load_config(config_path: str) -> AttrDict:
    """Load a YAML configuration file and return it as an addict.Dict."""
    with open(config_path, 'r') as f:
        config_data = yaml.safe_load(f) or {}
    if not isinstance(config_data, dict):
        raise ConfigurationError(f"{config_path}: expected a mapping at the top level")
    return AttrDict(interpolate_vars(config_data))


def parse_region(text: str) -> Region:
    """
    Parse a region string "xmin/xmax/ymin/ymax".

    A leading "-R" or "R" is accepted, so GMT-style arguments can be passed
    through unchanged.
    """
    s = str(text).strip()
    if s[:2] in ("-R", "-r"):
        s = s[2:]
    elif s[:1] in ("R", "r"):
        s = s[1:]

    parts = s.split("/")
    if len(parts) != 4:
        raise ConfigurationError(f"Invalid region: {text}")
    try:
        xmin, xmax, ymin, ymax = (float(p) for p in parts)
    except ValueError:
        raise ConfigurationError(f"Invalid region: {text}") from None
    return Region(xmin, xmax, ymin, ymax)


@dataclass
class Config:
    input_file: str
    region: Region
    output_file: Optional[str] = None
    increment: float = 1.0
    mode: Objective = Objective.MINIMUM
    rounding: Rounding = Rounding.STANDARD
    output_format: str = "standard"
    chunk_size: int = 100_000
    show_progress: bool = True

    def __post_init__(self):
        if not self.input_file:
            raise ConfigurationError("Missing input path")
        self.mode = parse_objective(self.mode)
        self.rounding = parse_rounding(self.rounding)
        try:
            self.increment = float(self.increment)
        except (TypeError, ValueError):
            raise ConfigurationError(f"Invalid increment: {self.increment}") from None
        if not self.increment > 0.0:
            raise ConfigurationError(f"Increment must be > 0 (got {self.increment})")
        if self.output_format not in OUTPUT_FORMATS:
            choices = ", ".join(OUTPUT_FORMATS)
            raise ConfigurationError(
                f"Invalid output format '{self.output_format}' (expected one of: {choices})")
        try:
            self.chunk_size = int(self.chunk_size)
        except (TypeError, ValueError):
            raise ConfigurationError(f"Invalid chunk_size: {self.chunk_size}") from None
        if self.chunk_size < 1:
            raise ConfigurationError(f"chunk_size must be >= 1 (got {self.chunk_size})")

    def output_path(self) -> str:
        """Output file, defaulting to the input path plus .min or .max."""
        if self.output_file:
            return str(self.output_file)
        return f"{self.input_file}{self.mode.suffix}"

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Config':
        """
        Build a Config from a dict.

        Configuration format:
            {
                "input_file": str,          # XYZ input path
                "output_file": str,         # Optional: defaults to <input_file>.min/.max
                "region": str,              # "xmin/xmax/ymin/ymax", or the four keys below
                "min_x": float, "max_x": float, "min_y": float, "max_y": float,
                "increment": float,         # Optional: cell size (default: 1)
                "mode": str,                # Optional: "minimum" (default) or "maximum"
                "rounding": str,            # Optional: "standard" (default) or "tie-low"
                "output_format": str,       # Optional: "standard" (default) or "legacy"
                "chunk_size": int,          # Optional: points per vectorised update
                "show_progress": bool       # Optional: status lines and progress bar
            }
        """
        if "input_file" not in data:
            raise ConfigurationError("Missing input path (input_file)")

        if "region" in data:
            region = data["region"]
            if not isinstance(region, Region):
                region = parse_region(region)
        else:
            bounds = ("min_x", "max_x", "min_y", "max_y")
            missing = [key for key in bounds if key not in data]
            if missing:
                raise ConfigurationError(f"Missing region bound(s): {', '.join(missing)}")
            try:
                values = [float(data[key]) for key in bounds]
            except (TypeError, ValueError) as e:
                raise ConfigurationError(f"Invalid region bounds: {e}") from None
            region = Region(*values)

        kwargs = {key: data[key] for key in
                  ("output_file", "increment", "mode", "rounding",
                   "output_format", "chunk_size", "show_progress")
                  if data.get(key) is not None}
        return cls(input_file=str(data["input_file"]), region=region, **kwargs)

    @classmethod
    def load(cls, config: Union['Config', Dict[str, Any], str]) -> 'Config':
        """Accept a Config, a dict, or a JSON string."""
        if isinstance(config, Config):
            return config
        if isinstance(config, str):
            try:
                config = json.loads(config)
            except json.JSONDecodeError as e:
                raise ConfigurationError(f"Invalid JSON config: {e}") from None
        if isinstance(config, dict):
            return cls.from_dict(config)
        raise TypeError("config must be a Config, dictionary or JSON string")
