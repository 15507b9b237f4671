"""
Tests for layout export helpers and the command-line builder.

Run with: pytest tests/test_export_utils.py
"""

import json
import pandas as pd
import pytest
import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from hexgrid_python.boundary import PolygonBoundary
from hexgrid_python.export_utils import (
    export_layout_to_json,
    layout_to_dataframe,
    layout_to_json_dict,
    points_to_dataframe,
)
from hexgrid_python.hexgrid import HexGrid
import layout_builder

OUTLINE = [(5, 5), (95, 5), (95, 65), (50, 95), (5, 65)]
POINTS = [
    {'x': 30.0, 'y': 20.0, 'Name': 'Alpha', 'Population': 1200},
    {'x': 50.0, 'y': 40.0, 'Name': 'Beta', 'Population': 5400},
    {'x': 6.0, 'y': 30.0, 'Name': 'Gamma', 'Population': 400},
]


@pytest.fixture
def result():
    grid = HexGrid(extent=(100, 100), hex_radius=4, geography=PolygonBoundary([[OUTLINE]]))
    return grid(POINTS, ['Name', 'Population'])


class TestExportUtils:
    """Test DataFrame and JSON exports"""

    def test_layout_to_dataframe(self, result):
        df = layout_to_dataframe(result)
        assert list(df.columns) == ['col', 'row', 'x', 'y', 'cover', 'count', 'datapoints_wt']
        assert len(df) == len(result.layout)
        assert df['count'].sum() == 3
        assert df['count'].max() == result.maximum
        assert df['datapoints_wt'].max() == pytest.approx(result.maximum_weighted)

    def test_points_to_dataframe(self, result):
        df = points_to_dataframe(result, ['Name'])
        assert list(df.columns) == ['col', 'row', 'x', 'y', 'Name']
        assert sorted(df['Name']) == ['Alpha', 'Beta', 'Gamma']
        gamma = df[df['Name'] == 'Gamma'].iloc[0]
        assert (gamma['col'], gamma['row']) == (0, 5)

    def test_json_dict(self, result):
        data = layout_to_json_dict(result)
        assert data['extent'] == [100.0, 100.0]
        assert data['maximum'] == 1
        assert data['n_skipped'] == 0
        assert len(data['layout']) == len(result.layout)
        assert len(data['image_centers']) == 270
        json.dumps(data)

    def test_export_creates_directories(self, result, tmp_path):
        save_path = tmp_path / 'nested' / 'layout.json'
        export_layout_to_json(result, str(save_path))
        with open(save_path) as f:
            data = json.load(f)
        occupied = [h for h in data['layout'] if h['datapoints']]
        assert len(occupied) == 3
        assert {tuple(sorted(p.keys())) for h in occupied for p in h['datapoints']} == {
            ('Name', 'Population', 'x', 'y')}


class TestLayoutBuilder:
    """Test the command-line entry point"""

    @pytest.fixture
    def points_csv(self, tmp_path):
        path = tmp_path / 'points.csv'
        pd.DataFrame(POINTS).to_csv(path, index=False)
        return path

    @pytest.fixture
    def boundary_csv(self, tmp_path):
        path = tmp_path / 'outline.csv'
        pd.DataFrame(OUTLINE, columns=['x', 'y']).to_csv(path, index=False)
        return path

    def test_load_boundary(self, boundary_csv):
        boundary = layout_builder.load_boundary(str(boundary_csv))
        assert boundary.get_n_polygons() == 1
        assert boundary(50, 50)
        assert not boundary(1, 1)

    def test_load_boundary_with_hole(self, tmp_path):
        path = tmp_path / 'holed.csv'
        rows = [{'polygon': 0, 'ring': 0, 'x': x, 'y': y} for x, y in [(0, 0), (40, 0), (40, 40), (0, 40)]]
        rows += [{'polygon': 0, 'ring': 1, 'x': x, 'y': y} for x, y in [(10, 10), (30, 10), (30, 30), (10, 30)]]
        pd.DataFrame(rows).to_csv(path, index=False)
        boundary = layout_builder.load_boundary(str(path))
        assert boundary(5, 5)
        assert not boundary(20, 20)

    def test_main_writes_layout(self, points_csv, boundary_csv, tmp_path, capsys):
        output = tmp_path / 'out' / 'layout.json'
        code = layout_builder.main([
            str(points_csv), '--width', '100', '--height', '100', '--radius', '4',
            '--boundary-csv', str(boundary_csv), '--keys', 'Name', 'Population',
            '--output', str(output),
        ])
        assert code == 0
        with open(output) as f:
            data = json.load(f)
        assert data['maximum'] == 1
        assert data['maximum_weighted'] > 1
        assert "Points binned: 3 of 3" in capsys.readouterr().out

    def test_main_rasterized(self, points_csv, boundary_csv, tmp_path):
        output = tmp_path / 'layout.json'
        code = layout_builder.main([
            str(points_csv), '--width', '100', '--height', '100', '--radius', '4',
            '--boundary-csv', str(boundary_csv), '--rasterize', '--output', str(output),
        ])
        assert code == 0
        assert output.exists()

    def test_main_missing_file(self, tmp_path):
        code = layout_builder.main([str(tmp_path / 'nope.csv'), '--width', '10', '--height', '10',
                                    '--radius', '1'])
        assert code == 1

    def test_main_missing_key_column(self, points_csv, tmp_path):
        code = layout_builder.main([str(points_csv), '--width', '100', '--height', '100',
                                    '--radius', '4', '--keys', 'Mayor',
                                    '--output', str(tmp_path / 'layout.json')])
        assert code == 1

    def test_main_bad_radius(self, points_csv, tmp_path):
        code = layout_builder.main([str(points_csv), '--width', '100', '--height', '100',
                                    '--radius', '0', '--output', str(tmp_path / 'layout.json')])
        assert code == 1

    def test_report_memory(self, capsys):
        current = layout_builder.report_memory("after setup", baseline_mb=0.0)
        assert current > 0
        out = capsys.readouterr().out
        assert out.startswith("Memory after setup: ")
        assert "MB since start)" in out

    def test_main_rejects_lonlat_csv(self, tmp_path):
        path = tmp_path / 'lonlat.csv'
        pd.DataFrame([{'lng': 6.0, 'lat': 50.0}]).to_csv(path, index=False)
        code = layout_builder.main([str(path), '--width', '100', '--height', '100', '--radius', '4',
                                    '--output', str(tmp_path / 'layout.json')])
        assert code == 1
