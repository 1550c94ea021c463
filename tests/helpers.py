from typing import List, Tuple


class RecordingLogger:
    """Log 대체용. 파일을 만들지 않고 메시지만 기록합니다."""

    def __init__(self):
        self.records: List[Tuple[str, str]] = []

    def log(self, msg, level="DEBUG"):
        self.records.append((level.upper(), str(msg)))

    def messages(self, level=None) -> List[str]:
        return [m for lv, m in self.records if level is None or lv == level]


def square(x0, y0, size=1.0):
    """반시계 방향 정사각형 폴리곤 geometry 입니다."""
    return {
        "type": "Polygon",
        "coordinates": [[
            [x0, y0], [x0 + size, y0], [x0 + size, y0 + size], [x0, y0 + size], [x0, y0],
        ]],
    }


def feature(geometry, fid=None, **properties):
    out = {"type": "Feature", "geometry": geometry, "properties": properties}
    if fid is not None:
        out["id"] = fid
    return out


def collection(*features):
    return {"type": "FeatureCollection", "features": list(features)}


def build(objects, quantization=10000, coordinate_system="cartesian", logger=None, **kwargs):
    """테스트용 기본 구성으로 Topology 를 생성합니다."""
    from Service.config import TopologyConfig
    from Service.topo_modules.topology import TopologyBuilder

    config = TopologyConfig(quantization=quantization, coordinate_system=coordinate_system)
    builder = TopologyBuilder.create(logger or RecordingLogger(), config)
    return builder.execute(objects, **kwargs)
