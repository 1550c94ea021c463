import unittest

from helpers import build, square
from Service.topo_modules.topology.delta import DeltaEncoder
from Service.topo_modules.topology.model import Topology


class DeltaEncoderTests(unittest.TestCase):
    def setUp(self):
        self.encoder = DeltaEncoder()

    def test_first_point_absolute_then_forward_differences(self):
        arc = [(0, 0), (3, 1), (5, -2), (5, 4)]

        self.assertEqual(self.encoder.encode(arc), [[0, 0], [3, 1], [2, -3], [0, 6]])

    def test_zero_length_deltas_are_dropped(self):
        arc = [(2, 2), (4, 2), (4, 2), (4, 5)]

        self.assertEqual(self.encoder.encode(arc), [[2, 2], [2, 0], [0, 3]])

    def test_collapsed_arc_is_padded_with_zero_delta(self):
        self.assertEqual(self.encoder.encode([(5, 5), (5, 5)]), [[5, 5], [0, 0]])

    def test_unquantized_arc_keeps_float_deltas(self):
        arc = [(0.5, 0.5), (1.5, 0.5), (1.5, 1.75)]

        self.assertEqual(self.encoder.encode(arc), [[0.5, 0.5], [1.0, 0.0], [0.0, 1.25]])

    def test_decode_is_prefix_sum(self):
        self.assertEqual(
            self.encoder.decode([[0, 0], [3, 1], [2, -3], [0, 6]]),
            [(0, 0), (3, 1), (5, -2), (5, 4)],
        )
        self.assertEqual(self.encoder.decode([[5, 5], [0, 0]]), [(5, 5), (5, 5)])

    def test_serialized_arcs_are_delta_encoded(self):
        topology = build({"a": square(0, 0)}, quantization=2)

        self.assertEqual(topology.arcs, [[(0, 0), (1, 0), (1, 1), (0, 1), (0, 0)]])
        self.assertEqual(topology.to_dict()["arcs"], [[[0, 0], [1, 0], [0, 1], [-1, 0], [0, -1]]])


class TopologyFromDictTests(unittest.TestCase):
    def test_arcs_are_restored_to_absolute_grid_points(self):
        data = {
            "type": "Topology",
            "transform": {"scale": [2.0, 2.0], "translate": [100.0, 100.0]},
            "bbox": [100.0, 100.0, 102.0, 102.0],
            "arcs": [[[0, 0], [1, 0], [0, 1]]],
            "objects": {"l": {"type": "LineString", "arcs": [~0]}},
        }

        topology = Topology.from_dict(data)

        self.assertEqual(topology.arcs, [[(0, 0), (1, 0), (1, 1)]])
        self.assertTrue(topology.objects["l"].arcs[0].reversed)

    def test_coordinate_system_is_detected_from_bbox(self):
        base = {"type": "Topology", "arcs": [], "objects": {}}

        self.assertEqual(Topology.from_dict(dict(base, bbox=[126.0, 37.0, 127.5, 38.0])).coordinate_system, "spherical")
        self.assertEqual(Topology.from_dict(dict(base, bbox=[0.0, 0.0, 5000.0, 900.0])).coordinate_system, "cartesian")
        self.assertEqual(
            Topology.from_dict(dict(base, bbox=[0.0, 0.0, 1.0, 1.0]), coordinate_system="cartesian").coordinate_system,
            "cartesian",
        )

    def test_coordinate_system_falls_back_to_arc_extent(self):
        data = {
            "type": "Topology",
            "transform": {"scale": [1000.0, 1000.0], "translate": [0.0, 0.0]},
            "arcs": [[[0, 0], [5, 5]]],
            "objects": {},
        }

        self.assertEqual(Topology.from_dict(data).coordinate_system, "cartesian")


if __name__ == "__main__":
    unittest.main()
