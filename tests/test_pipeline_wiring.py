from pathlib import Path
import unittest


class PipelineWiringTests(unittest.TestCase):
    @staticmethod
    def _source(rel_path: str) -> str:
        return (Path(__file__).resolve().parent.parent / rel_path).read_text(encoding="utf-8")

    def test_service_simplifies_before_filtering(self):
        src = self._source("Service/topology_service.py")
        simplify_at = src.index("self._simplifier.execute(topology, self._simplify_config)")
        filter_at = src.index("self._filter.execute(topology, self._filter_config)")
        self.assertLess(simplify_at, filter_at)

    def test_filter_runs_area_filter_before_winding_and_pruning(self):
        src = self._source("Service/topo_modules/filter/processor.py")
        self.assertLess(src.index("self._area_filter.execute("), src.index("self._winding.execute(topology)"))
        self.assertLess(src.index("self._winding.execute(topology)"), src.index("self._pruner.execute(topology)"))

    def test_container_passes_configs_to_service(self):
        src = self._source("Service/container.py")
        self.assertIn("simplify_config=simplify_config", src)
        self.assertIn("filter_config=filter_config", src)


if __name__ == "__main__":
    unittest.main()
