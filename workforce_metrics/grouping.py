"""
Grouping Utility

Groups records by a key extractor or a dotted key path.
"""

from typing import Any, Callable, Iterable, Mapping, Union

UNKNOWN = "Unknown"

KeyFunc = Callable[[Any], Any]


def resolve_path(record: Any, path: str) -> Any:
    """
    Follow a dotted path through mappings and attributes.

    Returns None as soon as a segment is missing.
    """
    value = record
    for segment in path.split("."):
        if value is None:
            return None
        if isinstance(value, Mapping):
            value = value.get(segment)
        else:
            value = getattr(value, segment, None)
    return value


def key_extractor(key: Union[str, KeyFunc]) -> KeyFunc:
    """Turn a dotted path into an extractor; callables pass through."""
    if callable(key):
        return key
    return lambda record: resolve_path(record, key)


def group_by(records: Iterable[Any], key: Union[str, KeyFunc]) -> dict[Any, list]:
    """
    Group records sharing the same key.

    Groups appear in first-seen order and keep the input order of their
    records. Missing or empty keys fall into the "Unknown" group.

    Example:
        groups = group_by(logs, lambda log: project_names.get(log.project_id))
        groups = group_by(rows, "project.name")
    """
    extract = key_extractor(key)
    groups: dict[Any, list] = {}
    for record in records:
        group = extract(record)
        if group is None or group == "":
            group = UNKNOWN
        groups.setdefault(group, []).append(record)
    return groups


def sum_hours(records: Iterable[Any]) -> float:
    """Total hours of a group of work-log records."""
    return sum(record.logged_duration_seconds for record in records) / 3600
