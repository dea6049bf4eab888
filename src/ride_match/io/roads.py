# ride_match/io/roads.py
import logging
from collections.abc import Iterable
from pathlib import Path

from ride_match.domain.road_graph import RoadGraph

log = logging.getLogger(__name__)


def load_road_network(graph: RoadGraph, lines: Iterable[str], *, source: str = "<stream>") -> int:
    """Add `<from> <to> <cost>` lines to `graph`. Returns the number of edges added."""
    before = len(graph)
    added = graph.load_from_stream(lines)
    log.info("loaded %d roads (%d new places) from %s", added, len(graph) - before, source)
    return added


def load_road_file(graph: RoadGraph, path: str | Path, *, must_exist: bool = True) -> int:
    p = Path(path)
    if not p.exists():
        if must_exist:
            raise FileNotFoundError(str(p))
        log.info("road file %s not found; starting with an empty graph", p)
        return 0
    with p.open(encoding="utf-8") as f:
        return load_road_network(graph, f, source=str(p))
