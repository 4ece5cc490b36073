"""
Run block min/max from a YAML config.

Example usage:
python run.py --config spittals.yaml

spittals.yaml:
    input_file: /data/lidar/spittals.xyz.bm
    output_file: ${input_file}.max
    region: 1585520.5/1587224.5/5464422.5/5467728.5
    increment: 0.5
    mode: maximum
    rounding: tie-low
"""

import argparse
from blockminmax import Config, block_minmax, load_config


def main():
    # Set up argument parser
    parser = argparse.ArgumentParser(description="Run block min/max with a specified config.")
    parser.add_argument('--config', required=True, help="Path to the YAML config file")
    parser.add_argument('--input_file', help="Override the input file from the config")
    parser.add_argument('--output_file', help="Override the output file from the config")
    args = parser.parse_args()

    # Load configuration
    config = load_config(args.config)
    if args.input_file:
        config.input_file = args.input_file
    if args.output_file:
        config.output_file = args.output_file

    result = block_minmax(Config.from_dict(config))
    print(f"Wrote {result['cells_written']:,} cells to {result['output_file']}")


if __name__ == "__main__":
    main()
