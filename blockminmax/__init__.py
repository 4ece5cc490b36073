"""
blockminmax - reduce dense XYZ point clouds to a min/max elevation grid.

Like GMT blockmedian, but just report the minimum or maximum z for each cell.
Unified dict/JSON API on top of the core gridding engine.
"""

from typing import Any, Dict, Union

from .config import Config, load_config, parse_region
from .core.cell import Cell, CellMapper
from .core.errors import ConfigurationError, GridAllocationError, GridOverflowError
from .core.grid import GridAggregator
from .core.processor import process_xyz_file
from .core.types import GridSpec, Objective, Point3D, Region, Rounding

__version__ = "0.1.0"

__all__ = [
    "block_minmax",
    "Config",
    "load_config",
    "parse_region",
    "Cell",
    "CellMapper",
    "GridAggregator",
    "GridSpec",
    "Objective",
    "Point3D",
    "Region",
    "Rounding",
    "ConfigurationError",
    "GridAllocationError",
    "GridOverflowError",
]


def block_minmax(config: Union[Config, Dict[str, Any], str]) -> Dict[str, Any]:
    """
    Reduce an XYZ point cloud to the minimum or maximum z per grid cell.

    Args:
        config: Run configuration. Can be:
                - Config object
                - Dictionary with config data (recommended)
                - JSON string with config data

    Returns:
        Dict with 'lines_read', 'lines_skipped', 'points_ingested',
        'cells_written', 'columns', 'rows', 'output_file'

    Raises:
        ConfigurationError: If the region, increment or modes are invalid
        GridOverflowError: If the grid has more cells than can be addressed
        GridAllocationError: If the grid does not fit in memory

    Example:
        >>> result = block_minmax({
        ...     "input_file": "spittals.xyz",
        ...     "region": "1585520.5/1587224.5/5464422.5/5467728.5",
        ...     "increment": 0.5,
        ...     "mode": "maximum"
        ... })
        >>> result["output_file"]
        'spittals.xyz.max'
    """
    cfg = Config.load(config)
    return process_xyz_file(
        cfg.input_file,
        cfg.output_path(),
        cfg.region,
        increment=cfg.increment,
        objective=cfg.mode,
        rounding=cfg.rounding,
        output_format=cfg.output_format,
        chunk_size=cfg.chunk_size,
        show_progress=cfg.show_progress,
    )
