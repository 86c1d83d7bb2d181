"""Distance formatting for the line-drawing tooltip."""

from __future__ import annotations

FEET_PER_METRE = 3.2808399
FEET_PER_MILE = 5280.0
METRES_PER_KM = 1000.0


def readable_distance(distance_m: float, metric: bool = True) -> str:
    """Format a distance in metres for display.

    Metric output switches to kilometres (3 decimals) at 1 km and uses
    metres with 2 decimals below.  Imperial output switches to miles
    (3 decimals) above 5280 ft and uses feet with 2 decimals otherwise.

    >>> readable_distance(1500)
    '1.500 km'
    >>> readable_distance(12.3)
    '12.30 m'
    """
    if metric:
        if distance_m >= METRES_PER_KM:
            return f"{distance_m / METRES_PER_KM:.3f} km"
        return f"{distance_m:.2f} m"

    feet = distance_m * FEET_PER_METRE
    if feet > FEET_PER_MILE:
        return f"{feet / FEET_PER_MILE:.3f} mi"
    return f"{feet:.2f} ft"
