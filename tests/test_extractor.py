import copy
import unittest

from shapely.geometry import Polygon

from helpers import RecordingLogger, collection, feature, square
from Service.errors import InvalidGeometry
from Service.topo_modules.topology.extractor import GeometryExtractor


class GeometryExtractorTests(unittest.TestCase):
    def setUp(self):
        self.extractor = GeometryExtractor(RecordingLogger())

    def test_polygon_rings_and_lines_are_extracted_with_back_references(self):
        polygon = {
            "type": "Polygon",
            "coordinates": [
                [[0, 0], [0, 10], [10, 10], [10, 0], [0, 0]],
                [[2, 2], [4, 2], [4, 4], [2, 4], [2, 2]],
            ],
        }
        line = {"type": "MultiLineString", "coordinates": [[[0, 0], [1, 1]], [[2, 2], [3, 3]]]}
        sources = self.extractor.normalize({"a": polygon, "b": line})
        chains = self.extractor.extract(sources)

        self.assertEqual([c.closed for c in chains], [True, True, False, False])
        self.assertEqual([c.position for c in chains], [(0,), (1,), (0,), (1,)])
        self.assertEqual(chains[0].owner, chains[1].owner)
        self.assertNotEqual(chains[0].owner, chains[2].owner)
        self.assertEqual(sources["a"].chains, [0, 1])
        self.assertEqual(sources["b"].chains, [2, 3])

    def test_winding_is_not_normalized(self):
        ring = [[0, 0], [1, 0], [1, 1], [0, 1], [0, 0]]
        sources = self.extractor.normalize({"a": {"type": "Polygon", "coordinates": [ring]}})
        chains = self.extractor.extract(sources)

        self.assertEqual(chains[0].points, [tuple(map(float, p)) for p in ring])

    def test_unclosed_ring_is_closed(self):
        sources = self.extractor.normalize({"a": {"type": "Polygon", "coordinates": [[[0, 0], [1, 0], [1, 1]]]}})
        ring = sources["a"].coordinates[0]

        self.assertEqual(ring[0], ring[-1])
        self.assertEqual(len(ring), 4)

    def test_feature_collection_becomes_geometry_collection_with_id_and_properties(self):
        fc = collection(
            feature(square(0, 0), fid="A", name="first", code=1),
            feature(None, fid="B", name="empty"),
        )
        sources = self.extractor.normalize(
            {"layer": fc},
            id_func=lambda f: f["properties"]["name"],
            property_filter=lambda key: "label" if key == "name" else None,
        )
        layer = sources["layer"]

        self.assertEqual(layer.type, "GeometryCollection")
        self.assertEqual([g.id for g in layer.geometries], ["first", "empty"])
        self.assertEqual(layer.geometries[0].properties, {"label": "first"})
        self.assertIsNone(layer.geometries[1].type)

    def test_properties_are_dropped_without_filter(self):
        sources = self.extractor.normalize({"layer": feature(square(0, 0), fid=7, name="x")})

        self.assertEqual(sources["layer"].id, 7)
        self.assertIsNone(sources["layer"].properties)

    def test_geo_interface_objects_are_accepted(self):
        sources = self.extractor.normalize({"shp": Polygon([(0, 0), (2, 0), (2, 2), (0, 2)])})

        self.assertEqual(sources["shp"].type, "Polygon")
        self.assertEqual(len(sources["shp"].coordinates[0]), 5)

    def test_input_objects_are_not_modified(self):
        fc = collection(feature(square(0, 0), fid=1))
        before = copy.deepcopy(fc)
        self.extractor.extract(self.extractor.normalize({"layer": fc}))

        self.assertEqual(fc, before)

    def test_invalid_inputs_raise(self):
        cases = [
            {"type": "Circle", "coordinates": [0, 0]},
            {"type": "LineString", "coordinates": [[0, 0]]},
            {"type": "Polygon", "coordinates": [[[0, 0], [1, 1], [0, 0]]]},
            {"type": "Polygon", "coordinates": [[["a", 0], [1, 1], [1, 0], [0, 0]]]},
            {"type": "Point"},
            "not a geometry",
        ]
        for geometry in cases:
            with self.subTest(geometry=geometry):
                with self.assertRaises(InvalidGeometry):
                    self.extractor.normalize({"bad": geometry})


if __name__ == "__main__":
    unittest.main()
