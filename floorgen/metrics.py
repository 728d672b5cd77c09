from typing import Dict


def init_metrics() -> Dict[str, int | float | bool | str | dict]:
    return {
        'strategy': '',
        'rooms': 0,
        'corridors': 0,
        'fallback_used': False,
        'coverage_before_repair': 0.0,
        'repairs_performed': 0,
        'repair_tiles_carved': 0,
        'special_rooms': 0,
        'secret_rooms': 0,
        'water_tiles': 0,
        'lava_tiles': 0,
        'heated_tiles': 0,
        'pillars': 0,
        'tiles_walkable': 0,
        'runtime_ms': 0.0,
        'phase_ms': {},
    }
