"""Rewriting of serialized keys to their declared exposed names."""

from typing import Any, Mapping, MutableMapping


def apply_renames(raw: MutableMapping[Any, Any], renames: Mapping[str, str]) -> MutableMapping[Any, Any]:
    """
    Move values from source keys to exposed keys.

    Args:
        raw: Serialized mapping, modified in place
        renames: Resolved source -> exposed names

    Returns:
        The same mapping
    """
    for source, exposed in renames.items():
        if source == exposed:
            continue
        for key in (source, str(source)):
            if key in raw:
                raw[str(exposed)] = raw.pop(key)
                break
    return raw
