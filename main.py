# main.py
"""
REGION COVARIANCE FROM A SAVED FEATURE FIELD
Usage: python main.py --features <field.npy> --region R0 C0 R1 C1 [--output result.json]
"""
import argparse
import json
import os
import sys
from datetime import datetime

import numpy as np

from region_covariance import RegionCovariance


def save_results(output_path, features_path, region, covariance, params):
    """Write the covariance matrix and the query to a JSON file"""
    row0, col0, row1, col1 = region
    result = {
        'features': str(features_path),
        'date': datetime.now().strftime('%Y-%m-%d %H:%M:%S'),
        'region': {'row0': row0, 'col0': col0, 'row1': row1, 'col1': col1},
        'region_size': (row1 - row0 + 1) * (col1 - col0 + 1),
        'params': params,
        'covariance': covariance.astype(float).tolist(),
    }

    output_dir = os.path.dirname(output_path)
    if output_dir:
        os.makedirs(output_dir, exist_ok=True)

    with open(output_path, 'w') as f:
        json.dump(result, f, indent=2)

    print(f"✓ Saved results to: {output_path}")


def main(argv=None):
    """Main execution function"""
    parser = argparse.ArgumentParser(description='Region covariance descriptor of a feature field')

    parser.add_argument('--features', required=True,
                        help='Feature field saved with np.save, shape (H, W, F)')
    parser.add_argument('--region', type=int, nargs=4, metavar=('ROW0', 'COL0', 'ROW1', 'COL1'),
                        help='Inclusive region corners (0-based), default is the whole image')
    parser.add_argument('--config', default='config.json', help='Path to config file')
    parser.add_argument('--method', choices=['recurrence', 'cumsum'],
                        help='Integral image construction (overrides config)')
    parser.add_argument('--accumulator-dtype', help='Accumulator dtype, e.g. float64 or longdouble')
    parser.add_argument('--output', help='Optional JSON file for the result')
    parser.add_argument('--verbose', action='store_true', help='Print progress')

    args = parser.parse_args(argv)

    if not os.path.exists(args.features):
        print(f"Error: Feature file '{args.features}' does not exist")
        sys.exit(1)

    features = np.load(args.features)
    print(f"Loaded feature field {features.shape} from '{args.features}'")

    try:
        descriptor = RegionCovariance(
            features,
            config_path=args.config,
            method=args.method,
            accumulator_dtype=args.accumulator_dtype,
            verbose=args.verbose or None,
        )
    except ValueError as e:
        print(f"Error: {e}")
        sys.exit(1)

    if args.region:
        region = tuple(args.region)
    else:
        region = (0, 0, descriptor.nrows - 1, descriptor.ncols - 1)

    covariance = descriptor.covariance_matrix(*region)

    print("=" * 60)
    print(f"Region (row0, col0, row1, col1): {region}")
    print("Covariance matrix:")
    print(np.array2string(covariance, precision=6))
    print("=" * 60)

    if args.output:
        save_results(args.output, args.features, region, covariance, descriptor.params)

    return covariance


if __name__ == "__main__":
    main()
