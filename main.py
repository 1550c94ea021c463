"""
main.py

명령행 진입점이며 설정 구성, 객체 생성 및 의존성 주입(Composition Root)을 담당합니다.
"""
from __future__ import annotations

import argparse
import sys
import traceback
from typing import Dict, List, Optional

from Common.log import Log
from Function.log_cleanup import clean_old_logs
from Service.config import FilterConfig, PipelineConfig, SimplifyConfig, TopologyConfig
from Service.container import build_app


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Convert geometry files into a single shared-boundary topology (TopoJSON).")
    parser.add_argument("inputs", nargs="+", help="Input SHP/GeoJSON/GPKG paths; each becomes one named object")
    parser.add_argument("-o", "--output", required=False, help="Output TopoJSON path")
    parser.add_argument("-q", "--quantization", type=int, default=None, help="Grid resolution per axis (0 disables)")
    parser.add_argument("--coordinate-system", choices=["cartesian", "spherical"], default=None)
    parser.add_argument("--simplify-area", type=float, default=None, help="Visvalingam minimum effective area")
    parser.add_argument("--retain-proportion", type=float, default=None, help="Proportion of interior points to keep")
    parser.add_argument("--filter-area", type=float, default=None, help="Drop rings smaller than this area")
    parser.add_argument("--no-force-clockwise", action="store_true", help="Keep input ring winding")
    parser.add_argument("--id-property", default=None, help="Feature property used as id")
    parser.add_argument("-p", "--properties", nargs="*", default=None, help="Property keys to keep")
    parser.add_argument("--refine", action="store_true", help="Treat the single input as an existing TopoJSON and only simplify/filter it")
    return parser.parse_args(argv)


def _overrides(**values) -> Dict[str, object]:
    return {k: v for k, v in values.items() if v is not None}


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    logger = Log()

    try:
        logger.log("=== 토폴로지 변환 시작 ===", level="INFO")

        clean_old_logs(logger.log_dir, logger)

        topology_config = TopologyConfig(**_overrides(
            quantization=args.quantization,
            coordinate_system=args.coordinate_system,
        ))
        simplify_config = SimplifyConfig(**_overrides(
            minimum_area=args.simplify_area,
            retain_proportion=args.retain_proportion,
            coordinate_system=args.coordinate_system,
        ))
        filter_config = FilterConfig(**_overrides(
            minimum_area=args.filter_area,
            force_clockwise=False if args.no_force_clockwise else None,
            coordinate_system=args.coordinate_system,
        ))
        pipeline_config = PipelineConfig(**_overrides(
            id_property=args.id_property,
            properties=args.properties,
        ))

        built = build_app(
            logger,
            topology_config=topology_config,
            simplify_config=simplify_config,
            filter_config=filter_config,
            pipeline_config=pipeline_config,
        )
        if args.refine:
            if len(args.inputs) != 1:
                raise ValueError("--refine 모드는 TopoJSON 입력 하나만 받습니다.")
            result_path = built.topology_service.refine_file(args.inputs[0], args.output)
        else:
            result_path = built.topology_service.run_pipeline(args.inputs, args.output)

        logger.log(f"=== 토폴로지 변환 완료: {result_path} ===", level="INFO")
        return 0

    except Exception:
        error_msg = traceback.format_exc()
        logger.log(f"변환 중 치명적 오류 발생:\n{error_msg}", level="ERROR")
        return 1


if __name__ == "__main__":
    sys.exit(main())
