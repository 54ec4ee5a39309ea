"""
Route aggregation helpers.
"""

from typing import Dict, Iterable, List

from .models import GroupedRoutes, RouteSecurityRecord


def group_by_security(records: Iterable[RouteSecurityRecord]) -> GroupedRoutes:
    """Partition records by security tier, keeping their relative order."""
    grouped = GroupedRoutes()
    for record in records:
        grouped.bucket(record.security_type).append(record)
    return grouped


def unique_paths(records: Iterable) -> List[str]:
    """
    Return the sorted, deduplicated paths of the given records.

    Accepts records or plain path strings so the result can be fed back in.
    Kong path lists must not repeat a path that has several methods.
    """
    paths = {record if isinstance(record, str) else record.path for record in records}
    return sorted(paths)


def group_by_path(records: Iterable[RouteSecurityRecord]) -> Dict[str, List[str]]:
    """Map each path to its distinct methods, in first-seen order."""
    path_map: Dict[str, List[str]] = {}
    for record in records:
        methods = path_map.setdefault(record.path, [])
        if record.method not in methods:
            methods.append(record.method)
    return path_map
