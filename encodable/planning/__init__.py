"""Serialization planning and key renaming."""

from encodable.planning.options import (
    DetailedInclude,
    ManyInclude,
    SerializationPlan,
    SingleInclude,
    parse_include,
)
from encodable.planning.planner import Planner
from encodable.planning.renamer import apply_renames

__all__ = [
    "DetailedInclude",
    "ManyInclude",
    "Planner",
    "SerializationPlan",
    "SingleInclude",
    "apply_renames",
    "parse_include",
]
