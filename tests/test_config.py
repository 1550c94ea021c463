import os
import unittest
from unittest.mock import patch

from pydantic import ValidationError

from Service.config import FilterConfig, PipelineConfig, SimplifyConfig, TopologyConfig
from Service.errors import ConflictingOptions, TopologyError


class TopologyConfigTests(unittest.TestCase):
    def test_defaults(self):
        config = TopologyConfig()

        self.assertEqual(config.quantization, 10000)
        self.assertIsNone(config.coordinate_system)

    def test_quantization_of_one_is_rejected(self):
        with self.assertRaises(ValidationError):
            TopologyConfig(quantization=1)

    def test_negative_quantization_is_rejected(self):
        with self.assertRaises(ValidationError):
            TopologyConfig(quantization=-5)

    def test_unknown_coordinate_system_is_rejected(self):
        with self.assertRaises(ValidationError):
            TopologyConfig(coordinate_system="mercator")

    def test_environment_overrides(self):
        with patch.dict(os.environ, {"TOPO_QUANTIZATION": "500", "TOPO_FILTER_MINIMUM_AREA": "2.5"}):
            self.assertEqual(TopologyConfig().quantization, 500)
            self.assertEqual(FilterConfig().minimum_area, 2.5)


class SimplifyConfigTests(unittest.TestCase):
    def test_disabled_by_default(self):
        self.assertFalse(SimplifyConfig().is_enabled)

    def test_either_threshold_enables(self):
        self.assertTrue(SimplifyConfig(minimum_area=0).is_enabled)
        self.assertTrue(SimplifyConfig(retain_proportion=0.3).is_enabled)

    def test_both_thresholds_conflict(self):
        with self.assertRaises(ConflictingOptions) as ctx:
            SimplifyConfig(minimum_area=1.0, retain_proportion=0.5)

        self.assertIsInstance(ctx.exception, TopologyError)

    def test_retain_proportion_range(self):
        for value in (0, -0.1, 1.5):
            with self.subTest(value=value), self.assertRaises(ValidationError):
                SimplifyConfig(retain_proportion=value)

    def test_negative_area_is_rejected(self):
        with self.assertRaises(ValidationError):
            SimplifyConfig(minimum_area=-1)


class FilterAndPipelineConfigTests(unittest.TestCase):
    def test_filter_defaults(self):
        config = FilterConfig()

        self.assertEqual(config.minimum_area, 0.0)
        self.assertTrue(config.force_clockwise)
        self.assertFalse(config.preserve_attached)
        self.assertTrue(config.prune_arcs)

    def test_pipeline_defaults(self):
        config = PipelineConfig()

        self.assertIsNone(config.id_property)
        self.assertIsNone(config.properties)
        self.assertTrue(config.apply_filter)


if __name__ == "__main__":
    unittest.main()
