import json
import shutil
import tempfile
import unittest
from pathlib import Path

from helpers import RecordingLogger, collection, feature, square
from Service.config import FilterConfig, PipelineConfig, SimplifyConfig, TopologyConfig
from Service.container import build_app


def _app(logger, pipeline=None, simplify=None, filters=None):
    return build_app(
        logger,
        topology_config=TopologyConfig(quantization=1000, coordinate_system="cartesian"),
        simplify_config=simplify or SimplifyConfig(),
        filter_config=filters or FilterConfig(),
        pipeline_config=pipeline or PipelineConfig(),
    )


class TopologyServiceConvertTests(unittest.TestCase):
    def setUp(self):
        self.logger = RecordingLogger()

    def test_convert_runs_build_simplify_filter_in_order(self):
        app = _app(self.logger, simplify=SimplifyConfig(minimum_area=0), filters=FilterConfig(minimum_area=2))
        fc = collection(feature(square(0, 0), fid=1), feature(square(10, 10, size=5), fid=2))

        topology = app.topology_service.convert({"layer": fc})

        stages = [item["stage"] for item in app.topology_service.get_last_stage_meta()]
        self.assertEqual(stages, ["built", "simplified", "filtered"])
        self.assertEqual([g.id for g in topology.objects["layer"].geometries], [2])

    def test_simplify_stage_skipped_without_threshold(self):
        app = _app(self.logger, pipeline=PipelineConfig(apply_filter=False))

        app.topology_service.convert({"a": square(0, 0)})

        stages = [item["stage"] for item in app.topology_service.get_last_stage_meta()]
        self.assertEqual(stages, ["built"])

    def test_id_property_and_property_whitelist(self):
        app = _app(self.logger, pipeline=PipelineConfig(id_property="code", properties=["name"]))
        fc = collection(feature(square(0, 0), fid=7, code="K1", name="Seoul", pop=10))

        topology = app.topology_service.convert({"layer": fc})

        geom = topology.objects["layer"].geometries[0]
        self.assertEqual(geom.id, "K1")
        self.assertEqual(geom.properties, {"name": "Seoul"})

    def test_empty_property_list_drops_all_properties(self):
        app = _app(self.logger, pipeline=PipelineConfig(properties=[]))
        fc = collection(feature(square(0, 0), name="x"))

        topology = app.topology_service.convert({"layer": fc})

        self.assertIsNone(topology.objects["layer"].geometries[0].properties)


class TopologyServicePipelineTests(unittest.TestCase):
    def setUp(self):
        self.logger = RecordingLogger()
        self.tmp = Path(tempfile.mkdtemp())
        self.addCleanup(shutil.rmtree, self.tmp, True)

    def _write_geojson(self, name, fc):
        path = self.tmp / name
        path.write_text(json.dumps(fc), encoding="utf-8")
        return path

    def test_pipeline_writes_single_topology_for_all_inputs(self):
        regions = self._write_geojson(
            "regions.geojson",
            collection(feature(square(0, 0), name="A"), feature(square(1, 0), name="B")),
        )
        roads = self._write_geojson(
            "roads.geojson",
            collection(feature({"type": "LineString", "coordinates": [[0, 0], [1, 0], [2, 0]]}, name="R")),
        )
        output = self.tmp / "out" / "result.topojson"

        result = _app(self.logger).topology_service.run_pipeline([str(regions), str(roads)], str(output))

        data = json.loads(Path(result).read_text(encoding="utf-8"))
        self.assertEqual(data["type"], "Topology")
        self.assertEqual(set(data["objects"]), {"regions", "roads"})
        self.assertEqual(len(data["objects"]["regions"]["geometries"]), 2)
        self.assertIn("transform", data)
        self.assertTrue(all(len(arc) >= 2 for arc in data["arcs"]))

    def test_missing_input_aborts_without_output(self):
        regions = self._write_geojson("regions.geojson", collection(feature(square(0, 0))))
        output = self.tmp / "result.json"

        with self.assertRaises(ValueError):
            _app(self.logger).topology_service.run_pipeline(
                [str(regions), str(self.tmp / "missing.geojson")], str(output)
            )

        self.assertFalse(output.exists())
        self.assertTrue(self.logger.messages("ERROR"))

    def test_duplicate_object_names_are_rejected(self):
        first = self._write_geojson("same.geojson", collection(feature(square(0, 0))))
        (self.tmp / "other").mkdir()
        second = self.tmp / "other" / "same.geojson"
        second.write_text(first.read_text(encoding="utf-8"), encoding="utf-8")

        with self.assertRaises(ValueError):
            _app(self.logger).topology_service.run_pipeline([str(first), str(second)], str(self.tmp / "r.json"))


if __name__ == "__main__":
    unittest.main()


class TopologyServiceRefineTests(unittest.TestCase):
    def setUp(self):
        self.logger = RecordingLogger()
        self.tmp = Path(tempfile.mkdtemp())
        self.addCleanup(shutil.rmtree, self.tmp, True)

    def _saved_triangle(self):
        triangle = {"type": "Polygon", "coordinates": [[[0, 0], [1, 0], [2, 0], [1, 2], [0, 0]]]}
        source = self.tmp / "triangle.geojson"
        source.write_text(json.dumps(collection(feature(triangle, name="T"))), encoding="utf-8")
        return _app(self.logger).topology_service.run_pipeline([str(source)], str(self.tmp / "base.json"))

    def test_existing_topology_is_simplified_and_filtered(self):
        base = self._saved_triangle()
        base_data = json.loads(Path(base).read_text(encoding="utf-8"))
        self.assertEqual(len(base_data["arcs"][0]), 5)
        app = _app(self.logger, simplify=SimplifyConfig(minimum_area=0))

        result = app.topology_service.refine_file(base, str(self.tmp / "refined.json"))

        data = json.loads(Path(result).read_text(encoding="utf-8"))
        self.assertEqual(len(data["arcs"][0]), 4)
        self.assertEqual(data["objects"], base_data["objects"])
        stages = [item["stage"] for item in app.topology_service.get_last_stage_meta()]
        self.assertEqual(stages, ["loaded", "simplified", "filtered", "serialized"])

    def test_loaded_topology_detects_coordinate_system(self):
        from Service.schemas import FileLoadRequest

        base = self._saved_triangle()
        gis_io = _app(self.logger).gis_io

        self.assertEqual(gis_io.load_topology(FileLoadRequest(file_path=Path(base))).coordinate_system, "spherical")
        self.assertEqual(
            gis_io.load_topology(FileLoadRequest(file_path=Path(base)), "cartesian").coordinate_system,
            "cartesian",
        )


class JsonDefaultTests(unittest.TestCase):
    def test_numpy_scalars_and_timestamps_are_converted(self):
        import pandas as pd

        from Service.topo_modules.gis_io import _json_default

        self.assertEqual(_json_default(pd.Series([7]).iloc[0]), 7)
        self.assertEqual(_json_default(pd.Series([0.5]).iloc[0]), 0.5)
        self.assertEqual(_json_default(pd.Timestamp("2024-01-02")), "2024-01-02T00:00:00")

    def test_unknown_values_abort_saving(self):
        from Service.schemas import FileSaveRequest
        from Service.topo_modules.gis_io import _json_default

        with self.assertRaises(TypeError):
            _json_default(object())

        tmp = Path(tempfile.mkdtemp())
        self.addCleanup(shutil.rmtree, tmp, True)
        app = _app(RecordingLogger(), pipeline=PipelineConfig(apply_filter=False))
        topology = app.topology_service.convert({"a": feature(square(0, 0), tag=object())})
        output = tmp / "out.json"

        with self.assertRaises(TypeError):
            app.gis_io.save(topology, FileSaveRequest(output_path=output))
        self.assertFalse(output.exists())
