"""
Tool assignment.

Groups catalog holes into drill tools. Two holes share a tool exactly when
their grouping keys ``(shape kind, size, plating group)`` are equal; the
plating group is dropped when PTH and NPTH holes are merged into one file.

Tools are numbered from 1 in ascending size order, plated before not plated
for equal sizes, round before oblong after that. The same catalog always
yields the same numbering, which the drill files, the map legend and the
report all rely on.
"""

from __future__ import annotations

from typing import Dict, List, Optional, Sequence, Tuple, Union

from ..units import to_nanometres
from .models import HoleCatalog, HoleRecord, Plating, ShapeKind, ToolDefinition, ToolTable

GroupKey = Tuple[ShapeKind, int, Optional[Plating]]

_PLATING_ORDER = {Plating.PLATED: 0, None: 0, Plating.NOT_PLATED: 1}


def grouping_key(hole: HoleRecord, merge_pth_npth: bool) -> GroupKey:
    """Tool grouping key of a hole; sizes compare as integer nanometres."""
    plating = None if merge_pth_npth else hole.plating
    return (hole.shape.kind, to_nanometres(hole.size), plating)


def _sort_key(key: GroupKey) -> Tuple[int, int, int]:
    kind, size_nm, plating = key
    return (size_nm, _PLATING_ORDER[plating], kind.value)


def assign_tools(
    holes: Union[HoleCatalog, Sequence[HoleRecord]],
    merge_pth_npth: bool = False,
) -> ToolTable:
    """
    Partition holes into tool definitions.

    Args:
        holes: Hole catalog (or any ordered hole sequence)
        merge_pth_npth: Ignore plating when grouping

    Returns:
        ToolTable ordered by tool index; empty when there are no holes
    """
    groups: Dict[GroupKey, List[int]] = {}
    for index, hole in enumerate(holes):
        groups.setdefault(grouping_key(hole, merge_pth_npth), []).append(index)

    tools = []
    for tool_index, key in enumerate(sorted(groups, key=_sort_key), start=1):
        kind, size_nm, plating = key
        tools.append(
            ToolDefinition(
                tool_index=tool_index,
                shape_kind=kind,
                diameter=size_nm / 1_000_000,
                plating=plating,
                hole_indices=tuple(groups[key]),
            )
        )

    return ToolTable(tools=tuple(tools), merged=merge_pth_npth)
