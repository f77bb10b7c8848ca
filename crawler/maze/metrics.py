from collections import Counter
from typing import Dict

from .cells import ROOM_TYPES, Grid


def init_metrics() -> Dict[str, object]:
    return {
        'cells': 0,
        'passages': 0,
        'dead_ends': 0,
        'corridors': 0,
        'junctions': 0,
        'reachable': 0,
        'perfect': False,
        'room_types': {t: 0 for t in ROOM_TYPES},
        'phase_ms': {},
        'runtime_ms': 0.0,
    }


def record_structure(metrics: Dict[str, object], grid: Grid) -> None:
    """Fill opening-degree and room-type tallies from a classified grid."""
    degrees = Counter()
    types = Counter()
    for column in grid:
        for cell in column:
            degrees[cell.openings] += 1
            types[cell.room_type] += 1
    metrics['cells'] = sum(degrees.values())
    metrics['dead_ends'] = degrees[1]
    metrics['corridors'] = degrees[2]
    metrics['junctions'] = degrees[3] + degrees[4]
    metrics['room_types'] = {t: types.get(t, 0) for t in ROOM_TYPES}
