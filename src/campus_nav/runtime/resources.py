# campus_nav/runtime/resources.py
import json
from functools import lru_cache

from campus_nav.app.events import PositionFix
from campus_nav.domain.entities.geography import RoadSegment


@lru_cache(maxsize=8)
def load_road_network(file: str, fmt: str) -> tuple[RoadSegment, ...]:
    """
    json:    {"name": [[lat, lng], ...], ...} or [[[lat, lng], ...], ...]
    geojson: FeatureCollection of LineString / MultiLineString ([lng, lat] order)
    """
    with open(file, encoding="utf-8") as f:
        doc = json.load(f)
    if fmt == "json":
        return segments_from_json(doc)
    if fmt == "geojson":
        return segments_from_geojson(doc)
    raise ValueError(f"Unsupported road network fmt {fmt!r}")


def segments_from_json(doc) -> tuple[RoadSegment, ...]:
    items = doc.items() if isinstance(doc, dict) else ((f"road-{i}", pts) for i, pts in enumerate(doc))
    return tuple(RoadSegment.from_pairs(str(name), pts) for name, pts in items)


def segments_from_geojson(doc) -> tuple[RoadSegment, ...]:
    out = []
    for i, feat in enumerate(doc.get("features", ())):
        geom = feat.get("geometry") or {}
        name = str((feat.get("properties") or {}).get("name", f"road-{i}"))
        if geom.get("type") == "LineString":
            lines = [geom["coordinates"]]
        elif geom.get("type") == "MultiLineString":
            lines = geom["coordinates"]
        else:
            continue
        for line in lines:
            out.append(RoadSegment.from_pairs(name, [(c[1], c[0]) for c in line]))
    return tuple(out)


def load_panorama_table(file: str) -> dict[str, str]:
    with open(file, encoding="utf-8") as f:
        doc = json.load(f)
    if not isinstance(doc, dict):
        raise ValueError(f"{file}: panorama table must be a JSON object")
    return {str(k): str(v) for k, v in doc.items()}


def load_track(file: str) -> list[PositionFix]:
    fixes = []
    with open(file, encoding="utf-8") as f:
        for line in f:
            line = line.strip()
            if not line:
                continue
            row = json.loads(line)
            fixes.append(
                PositionFix(
                    t=float(row["t"]),
                    lat=float(row["lat"]),
                    lng=float(row["lng"]),
                    accuracy_m=row.get("accuracy_m"),
                )
            )
    return fixes
