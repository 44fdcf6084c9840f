"""
Date alignment across multiple series.
Pure functions - the aligned axis only ever contains dates present in every input.
"""

from typing import Dict, List, Sequence, Tuple, Union

from analysis.models import PricePoint, ReturnPoint

Point = Union[PricePoint, ReturnPoint]


def date_key(value: str) -> str:
    """Truncate an ISO date/datetime string to its calendar day."""
    return value[:10]


def to_date_map(points: Sequence[Point]) -> Dict[str, float]:
    """
    Map calendar day -> value for a price or return series.

    Later points on the same day overwrite earlier ones.

    Args:
        points: PricePoint or ReturnPoint sequence

    Returns:
        Dictionary keyed by 'YYYY-MM-DD'
    """
    mapping = {}
    for point in points:
        value = point.close if isinstance(point, PricePoint) else point.value
        mapping[date_key(point.date)] = value
    return mapping


def intersect_dates(maps: Sequence[Dict[str, float]]) -> List[str]:
    """
    Sorted intersection of the date keys of every map.

    Stops intersecting as soon as the running intersection is empty.

    Args:
        maps: One date -> value mapping per series

    Returns:
        Sorted list of dates common to all maps (empty if no maps)
    """
    if not maps:
        return []

    intersection = set(maps[0].keys())
    for mapping in maps[1:]:
        intersection &= mapping.keys()
        if not intersection:
            break

    return sorted(intersection)


def align_pair(
    map_a: Dict[str, float],
    map_b: Dict[str, float],
    dates: Sequence[str]
) -> Tuple[List[str], List[float], List[float]]:
    """
    Extract paired values for two series on a shared date axis.

    Args:
        map_a: Date -> value mapping of the x series
        map_b: Date -> value mapping of the y series
        dates: Aligned axis, normally from intersect_dates

    Returns:
        Tuple of (dates, x_values, y_values) for dates present in both maps
    """
    aligned_dates = []
    x_values = []
    y_values = []

    for day in dates:
        if day in map_a and day in map_b:
            aligned_dates.append(day)
            x_values.append(map_a[day])
            y_values.append(map_b[day])

    return aligned_dates, x_values, y_values
