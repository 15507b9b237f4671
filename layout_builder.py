"""
Hexgrid Layout Builder

Builds a hexagonal binning layout from a CSV of pixel-space points and writes
it to JSON.

Inputs:
- points CSV with `x` and `y` columns (pixel coordinates, origin top-left) and
  any extra attribute columns to carry through with --keys
- optional boundary CSV with `x` and `y` vertex columns, plus optional
  `polygon` and `ring` columns. Ring 0 of each polygon is its exterior, higher
  rings are holes. Without a boundary the whole extent counts as covered.

Example:
    python layout_builder.py cities.csv --width 100 --height 100 --radius 4 \
        --boundary-csv outline.csv --keys Name Population --output out/layout.json
"""

import argparse
import os
import sys
import time
from typing import Optional

import pandas as pd
import psutil

from hexgrid_python.boundary import PolygonBoundary, rasterize_boundary
from hexgrid_python.errors import ConfigurationError
from hexgrid_python.export_utils import export_layout_to_json
from hexgrid_python.hexgrid import HexGrid


def resident_mb():
    """Resident set size of this process in MB"""
    return psutil.Process().memory_info().rss / (1024 * 1024)


def report_memory(stage: str, baseline_mb: Optional[float] = None):
    """Print resident memory at a stage, with growth since baseline_mb when given"""
    current_mb = resident_mb()
    line = f"Memory {stage}: {current_mb:.1f} MB"
    if baseline_mb is not None:
        line += f" ({current_mb - baseline_mb:+.1f} MB since start)"
    print(line)
    return current_mb


def load_boundary(csv_path: str) -> PolygonBoundary:
    """Read polygon vertices from CSV into a PolygonBoundary.

    Columns: x, y and optionally polygon, ring. Vertex order within a ring is
    the row order of the file.
    """
    df = pd.read_csv(csv_path)
    missing = [c for c in ('x', 'y') if c not in df.columns]
    if missing:
        raise ConfigurationError(f"boundary CSV is missing columns: {', '.join(missing)}")
    if 'polygon' not in df.columns:
        df['polygon'] = 0
    if 'ring' not in df.columns:
        df['ring'] = 0

    polygons = []
    for _, polygon_df in df.groupby('polygon', sort=True):
        rings = []
        for _, ring_df in polygon_df.groupby('ring', sort=True):
            rings.append(ring_df[['x', 'y']].to_numpy(dtype=float))
        polygons.append(rings)
    return PolygonBoundary(polygons)


def build_parser():
    parser = argparse.ArgumentParser(description='Hexagonal binning layout with coverage-corrected counts')
    parser.add_argument('csv_file', help='Path to the points CSV file (x, y columns)')
    parser.add_argument('--width', type=float, required=True, help='Extent width in pixels')
    parser.add_argument('--height', type=float, required=True, help='Extent height in pixels')
    parser.add_argument('--radius', type=float, required=True, help='Hexagon corner radius in pixels')
    parser.add_argument('--boundary-csv', default=None,
                        help='Polygon vertices CSV (x, y, optional polygon and ring columns)')
    parser.add_argument('--rasterize', action='store_true',
                        help='Rasterize the boundary to a pixel mask before estimating coverage')
    parser.add_argument('--edge-precision', type=int, default=2,
                        help='Coverage sample rings per hexagon (default: 2 = 19 samples)')
    parser.add_argument('--grid-extend', type=int, default=0,
                        help='Keep uncovered hexagons within this many steps of the geography (default: 0)')
    parser.add_argument('--include-uncovered', action='store_true',
                        help='Keep every hexagon of the tiling in the layout')
    parser.add_argument('--min-coverage', type=float, default=None,
                        help='Coverage clamp used when up-weighting edge hexagons (default: 1e-6)')
    parser.add_argument('--keys', nargs='*', default=None,
                        help='Point columns to carry into the layout')
    parser.add_argument('--output', default='output/layout.json', help='Output JSON path')
    parser.add_argument('--debug', action='store_true', help='Print stage summaries')
    return parser


def main(argv=None):
    """Main execution function for the layout builder"""
    start_time = time.time()
    start_memory = resident_mb()
    print(f"Starting execution at: {time.strftime('%Y-%m-%d %H:%M:%S')}")

    args = build_parser().parse_args(argv)

    if not os.path.exists(args.csv_file):
        print(f"Error: CSV file '{args.csv_file}' does not exist.")
        return 1

    points = pd.read_csv(args.csv_file)
    missing = [c for c in ('x', 'y') if c not in points.columns]
    if missing:
        print(f"Error: The following columns are missing from the CSV: {', '.join(missing)}")
        return 1
    if args.keys:
        missing_keys = [k for k in args.keys if k not in points.columns]
        if missing_keys:
            print(f"Error: Requested key columns not found: {', '.join(missing_keys)}")
            return 1
    report_memory("after loading CSV data", start_memory)

    try:
        geography = None
        if args.boundary_csv:
            if not os.path.exists(args.boundary_csv):
                print(f"Error: Boundary file '{args.boundary_csv}' does not exist.")
                return 1
            geography = load_boundary(args.boundary_csv)
            if args.rasterize:
                geography = rasterize_boundary(geography, (args.width, args.height))
                print(f"Rasterized boundary: {geography.coverage_ratio():.1%} of the extent inside")

        grid = HexGrid(
            extent=(args.width, args.height),
            hex_radius=args.radius,
            geography=geography,
            edge_precision=args.edge_precision,
            grid_extend=args.grid_extend,
            include_uncovered=args.include_uncovered,
            min_coverage=args.min_coverage,
            debug=args.debug,
        )
        result = grid(points, args.keys)
    except ConfigurationError as e:
        print(f"Error: {e}")
        return 1
    report_memory("after building layout", start_memory)

    stats = result.get_hex_stats()
    print(f"\nHexagons in layout: {stats['total_hexagons']} (tiling: {stats['image_centers']})")
    print(f"Occupied hexagons: {stats['occupied_hexagons']} ({stats['occupied_edge_hexagons']} on the edge)")
    print(f"Points binned: {stats['n_assigned']} of {stats['n_points']} (skipped: {stats['n_skipped']})")
    print(f"Maximum per hexagon: {stats['maximum']} (weighted: {stats['maximum_weighted']:.3f})")

    export_layout_to_json(result, args.output)
    print(f"Layout written to {args.output}")

    elapsed = time.time() - start_time
    print(f"Total time: {elapsed:.2f}s")
    return 0


if __name__ == '__main__':
    sys.exit(main())
