"""
Export utilities for hexgrid layouts.

This module provides functions to export layout results to various formats,
including:
- Per-hexagon tables as pandas DataFrames
- Layout JSON (hexagons, image centers and summary values) for rendering tools
- Per-point assignment tables
"""

import json
import os
import numpy as np
import pandas as pd
from typing import Any, Dict, List, Optional


def _json_value(value):
    """Convert numpy scalars and tuples to JSON-friendly values."""
    if isinstance(value, np.generic):
        return value.item()
    if isinstance(value, tuple):
        return [_json_value(v) for v in value]
    if isinstance(value, float) and not np.isfinite(value):
        return None
    return value


def layout_to_dataframe(result) -> pd.DataFrame:
    """One row per hexagon with grid coordinate, center, cover and counts.

    Args:
        result: HexLayout

    Returns:
        DataFrame with columns col, row, x, y, cover, count, datapoints_wt
    """
    rows = []
    for hex_bin in result.layout:
        rows.append({
            'col': hex_bin.col,
            'row': hex_bin.row,
            'x': hex_bin.x,
            'y': hex_bin.y,
            'cover': hex_bin.cover,
            'count': hex_bin.count,
            'datapoints_wt': hex_bin.datapoints_wt,
        })
    return pd.DataFrame(rows, columns=['col', 'row', 'x', 'y', 'cover', 'count', 'datapoints_wt'])


def points_to_dataframe(result, attribute_keys: Optional[List[str]] = None) -> pd.DataFrame:
    """One row per binned point with the grid coordinate of its hexagon.

    Args:
        result: HexLayout
        attribute_keys: Extra point fields to include as columns

    Returns:
        DataFrame with columns col, row, x, y plus attribute_keys
    """
    keys = list(attribute_keys or [])
    rows = []
    for hex_bin in result.layout:
        for point in hex_bin.datapoints:
            row = {'col': hex_bin.col, 'row': hex_bin.row, 'x': point['x'], 'y': point['y']}
            for key in keys:
                row[key] = point.get(key)
            rows.append(row)
    return pd.DataFrame(rows, columns=['col', 'row', 'x', 'y'] + keys)


def layout_to_json_dict(result) -> Dict[str, Any]:
    """Serializable dictionary of a layout."""
    hexagons = []
    for record in result.to_records():
        hexagons.append({
            'x': float(record['x']),
            'y': float(record['y']),
            'cover': float(record['cover']),
            'gridpoint': [int(v) for v in record['gridpoint']],
            'datapoints': [{k: _json_value(v) for k, v in p.items()} for p in record['datapoints']],
            'datapoints_wt': float(record['datapoints_wt']),
        })
    width, height = result.extent.as_tuple()
    return {
        'extent': [width, height],
        'hex_radius': result.hex_radius,
        'maximum': int(result.maximum),
        'maximum_weighted': float(result.maximum_weighted),
        'n_points': int(result.n_points),
        'n_skipped': int(result.n_skipped),
        'layout': hexagons,
        'image_centers': result.image_centers,
    }


def export_layout_to_json(result, save_path: str, indent: Optional[int] = 2):
    """Export a layout to JSON for rendering tools.

    Args:
        result: HexLayout
        save_path: Output JSON file path
        indent: JSON indentation, None for compact output

    Side Effects:
        Creates directories as needed and writes JSON file to save_path
    """
    directory = os.path.dirname(save_path)
    if directory:
        os.makedirs(directory, exist_ok=True)
    with open(save_path, 'w') as f:
        json.dump(layout_to_json_dict(result), f, indent=indent)
