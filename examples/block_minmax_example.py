from blockminmax import block_minmax


def main():
    """
    Example usage of the block_minmax function.
    """
    config = {
        "input_file": "/Users/robd/caves/nz/lidar/pointcloud/spittals.xyz.bm",
        "region": "1585520.5/1587224.5/5464422.5/5467728.5",
        "increment": 0.5,
        "mode": "maximum",
    }

    print("Running block min/max in maximum mode...")
    try:
        result = block_minmax(config)
        print(f"Wrote {result['cells_written']:,} cells "
              f"({result['columns']} columns by {result['rows']} rows) to {result['output_file']}")
    except Exception as e:
        print(f"An error occurred during block min/max: {e}")

    print("Running again with legacy Tcl snapping and formatting...")
    config.update({
        "mode": "minimum",
        "rounding": "tie-low",
        "output_format": "legacy",
        "output_file": "/Users/robd/caves/nz/lidar/pointcloud/spittals.tcl.min",
    })
    try:
        block_minmax(config)
    except Exception as e:
        print(f"An error occurred during block min/max: {e}")


if __name__ == "__main__":
    main()
