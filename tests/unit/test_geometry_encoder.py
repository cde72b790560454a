"""
Unit Tests for the Point Geometry Encoder

Covers command integers, zig-zag encoding, point filtering and the delta
chained MoveTo stream produced for a tile.
"""

import math
import unittest
import sys
from pathlib import Path

sys.path.append(str(Path(__file__).parent.parent.parent / "src"))

from point_tiles.tile_generation.addressing import parse_tile_path, tile_bounding_box
from point_tiles.tile_generation.geometry_encoder import (
    CommandId,
    command_integer,
    decode_command,
    encode_points,
    filter_points,
    move_to,
    zigzag_decode,
    zigzag_encode,
)
from point_tiles.tile_generation.projection import GeoPoint, Loc, geo_to_loc


class TestCommandIntegers(unittest.TestCase):
    """Tests for command integer packing."""

    def test_move_to(self):
        self.assertEqual(move_to(0), 1)
        self.assertEqual(move_to(1), 9)
        self.assertEqual(move_to(3), 25)

    def test_other_commands(self):
        self.assertEqual(command_integer(CommandId.LINE_TO, 3), 26)
        self.assertEqual(command_integer(CommandId.CLOSE_PATH, 1), 15)

    def test_command_id_is_masked(self):
        self.assertEqual(command_integer(9, 0), 1)

    def test_decode_command(self):
        self.assertEqual(decode_command(move_to(1234)), (CommandId.MOVE_TO, 1234))


class TestZigzag(unittest.TestCase):
    """Tests for zig-zag encoding of signed deltas."""

    def test_small_values(self):
        expected = {0: 0, -1: 1, 1: 2, -2: 3, 2: 4, 2048: 4096, -1024: 2047}
        for value, encoded in expected.items():
            self.assertEqual(zigzag_encode(value), encoded)

    def test_int32_limits(self):
        self.assertEqual(zigzag_encode(2 ** 31 - 1), 2 ** 32 - 2)
        self.assertEqual(zigzag_encode(-2 ** 31), 2 ** 32 - 1)

    def test_decode_recovers_value(self):
        for value in (0, 1, -1, 7, -4096, 4096, 123456, -123457, 2 ** 31 - 1, -2 ** 31):
            self.assertEqual(zigzag_decode(zigzag_encode(value)), value)


class TestEncodePoints(unittest.TestCase):
    """Tests for encode_points."""

    def setUp(self):
        self.world = parse_tile_path("0/0/0")
        self.origin = geo_to_loc(GeoPoint(longitude=0.0, latitude=0.0))
        self.east = geo_to_loc(GeoPoint(longitude=90.0, latitude=0.0))

    def test_single_point_in_world_tile(self):
        """The origin lands at the centre of the world tile."""
        self.assertEqual(encode_points([self.origin], self.world), [9, 4096, 4096])

    def test_no_points(self):
        self.assertEqual(encode_points([], self.world), [move_to(0)])

    def test_point_outside_tile(self):
        """A far-southern point is not part of a northern tile."""
        south = geo_to_loc(GeoPoint(longitude=-10.0, latitude=-80.0))
        self.assertEqual(encode_points([south], parse_tile_path("1/0/0")), [1])

    def test_stream_shape(self):
        points = [
            geo_to_loc(GeoPoint(lon, lat))
            for lon in (-150.0, -30.0, 0.0, 45.0, 170.0)
            for lat in (-60.0, 0.0, 60.0)
        ]
        geometry = encode_points(points, self.world)
        self.assertEqual(len(geometry), 1 + 2 * len(points))
        self.assertEqual(decode_command(geometry[0]), (CommandId.MOVE_TO, len(points)))

    def test_order_drives_deltas(self):
        """Deltas chain consecutive points in input order."""
        self.assertEqual(
            encode_points([self.origin, self.east], self.world),
            [17, 4096, 4096, 2048, 0]
        )
        self.assertEqual(
            encode_points([self.east, self.origin], self.world),
            [17, 6144, 4096, 2047, 0]
        )

    def test_deltas_decode_to_tile_positions(self):
        tile = parse_tile_path("2/1/1")
        points = [Loc(-0.2, 0.1), Loc(-0.01, 0.5), Loc(-0.249, 0.01)]
        geometry = encode_points(points, tile, extent=512)

        x = y = 0
        positions = []
        for i in range(1, len(geometry), 2):
            x += zigzag_decode(geometry[i])
            y += zigzag_decode(geometry[i + 1])
            positions.append((x, y))

        self.assertEqual(len(positions), 3)
        for px, py in positions:
            self.assertTrue(0 <= px <= 512)
            self.assertTrue(0 <= py <= 512)
        # x grows eastwards, y grows southwards
        self.assertLess(positions[0][0], positions[1][0])
        self.assertLess(positions[1][1], positions[0][1])

    def test_extent_scales_coordinates(self):
        self.assertEqual(encode_points([self.origin], self.world, extent=256), [9, 256, 256])

    def test_lower_edges_included_upper_edges_excluded(self):
        """Points on a tile's west/south edge belong to it, not to its neighbour."""
        edge = Loc(-0.5, 0.0)
        self.assertEqual(encode_points([edge], parse_tile_path("1/0/0")), [9, 0, 8192])
        self.assertEqual(encode_points([edge], parse_tile_path("1/0/1")), [1])

        meridian = Loc(0.0, 0.1)
        self.assertEqual(encode_points([meridian], parse_tile_path("1/0/0"))[0], move_to(0))
        self.assertEqual(encode_points([meridian], parse_tile_path("1/1/0"))[0], move_to(1))

    def test_points_outside_every_tile_are_dropped(self):
        """The north pole and non-finite points match no tile."""
        pole = geo_to_loc(GeoPoint(longitude=0.0, latitude=90.0))
        points = [pole, Loc(math.nan, 0.0), Loc(math.inf, 0.0), self.origin]
        self.assertEqual(encode_points(points, self.world), [9, 4096, 4096])

    def test_north_pole_is_in_no_tile(self):
        """Rows are never negative, so nothing reaches above the Mercator limit."""
        pole = geo_to_loc(GeoPoint(longitude=0.0, latitude=90.0))
        for level in range(4):
            scale = 2 ** level
            for column in range(scale):
                for row in range(scale):
                    tile = parse_tile_path(f"{level}/{column}/{row}")
                    self.assertEqual(encode_points([pole], tile), [move_to(0)])

    def test_south_pole_falls_in_out_of_range_row(self):
        """Rows are not range-checked; row 6 at zoom 0 reaches down to y = -1."""
        tile = parse_tile_path("0/0/6")
        bbox = tile_bounding_box(tile)
        self.assertEqual(bbox.y_range[0], -1.0)
        self.assertLess(bbox.y_range[1], -0.99999999999999)

        pole = geo_to_loc(GeoPoint(longitude=0.0, latitude=-90.0))
        geometry = encode_points([pole], tile)

        self.assertEqual(len(geometry), 3)
        self.assertEqual(decode_command(geometry[0]), (CommandId.MOVE_TO, 1))
        self.assertEqual(zigzag_decode(geometry[1]), 2048)
        self.assertTrue(0 <= zigzag_decode(geometry[2]) <= 4096)

    def test_deterministic(self):
        points = [geo_to_loc(GeoPoint(-122.4 + i * 0.001, 37.7 + i * 0.0007)) for i in range(50)]
        tile = parse_tile_path("10/163/395")
        self.assertEqual(encode_points(points, tile), encode_points(points, tile))


class TestFilterPoints(unittest.TestCase):
    """Tests for filter_points."""

    def test_keeps_input_order(self):
        bbox = tile_bounding_box(parse_tile_path("1/1/0"))
        points = [Loc(0.3, 0.2), Loc(-0.3, 0.2), Loc(0.1, 0.5), Loc(0.2, -0.1)]
        self.assertEqual(filter_points(points, bbox), [Loc(0.3, 0.2), Loc(0.1, 0.5)])


if __name__ == '__main__':
    unittest.main()
