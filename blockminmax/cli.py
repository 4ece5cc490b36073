"""
Command line entry point.

Example usage:
blockminmax -R1585520.5/1587224.5/5464422.5/5467728.5 -I0.5 \
    -PATH /data/lidar/spittals.xyz.bm -MAX

Writes /data/lidar/spittals.xyz.bm.max. Points outside the region are snapped
to the nearest edge cell; only cells that received at least one point are
written.
"""

import argparse
import sys

from . import __version__, block_minmax
from .config import Config, parse_region
from .core.errors import ConfigurationError, GridAllocationError


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="blockminmax",
        description="Report the minimum (default) or maximum z of an XYZ point "
                    "cloud for each cell of a regular grid.")
    parser.add_argument("-R", dest="region", required=True, metavar="xmin/xmax/ymin/ymax",
                        help="Region bounds (inclusive)")
    parser.add_argument("-I", dest="increment", type=float, default=1.0, metavar="inc",
                        help="Grid increment (default: 1)")
    parser.add_argument("-PATH", "-path", dest="path", metavar="file",
                        help="Input XYZ file")
    parser.add_argument("input", nargs="?", metavar="file",
                        help="Input XYZ file (alternative to -PATH)")
    parser.add_argument("-MAX", dest="find_max", action="store_true",
                        help="Compute maxima instead of minima")
    parser.add_argument("-o", dest="output", metavar="outfile",
                        help="Output file (default: <file>.min or <file>.max)")
    parser.add_argument("--tclround", action="store_true",
                        help="Snap to grid like the legacy Tcl script (ties go lower)")
    parser.add_argument("--tclfmt", action="store_true",
                        help="Print x and y with one decimal like the legacy Tcl script")
    parser.add_argument("--chunk_size", type=int, default=100_000,
                        help="Points parsed per vectorised update")
    parser.add_argument("-q", "--quiet", action="store_true",
                        help="Do not print status lines or progress")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def config_from_args(args: argparse.Namespace) -> Config:
    if args.path and args.input:
        raise ConfigurationError(f"Unexpected argument: {args.input}")
    return Config(
        input_file=args.path or args.input,
        region=parse_region(args.region),
        output_file=args.output,
        increment=args.increment,
        mode="maximum" if args.find_max else "minimum",
        rounding="tie-low" if args.tclround else "standard",
        output_format="legacy" if args.tclfmt else "standard",
        chunk_size=args.chunk_size,
        show_progress=not args.quiet,
    )


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = config_from_args(args)
    except ConfigurationError as e:
        parser.error(str(e))

    try:
        block_minmax(config)
    except ConfigurationError as e:
        parser.error(str(e))
    except OSError as e:
        print(f"blockminmax: {e}", file=sys.stderr)
        return 1
    except GridAllocationError as e:
        print(f"blockminmax: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
