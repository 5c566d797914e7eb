"""Conflict detection over computed periods.

Runs after the scheduler has converged. Conflicts use inclusive overlap
([start, end] against [start, end]), so two items that touch on a single day
and share a resource are reported even though the simulation did not split
capacity between them.
"""

from __future__ import annotations

from typing import Mapping, Sequence

from capacity_timeline.types import Conflict, Period


def detect_conflicts(
    periods: Sequence[Period],
    assignments: Mapping[str, Sequence[str]],
) -> list[Conflict]:
    """Pairwise conflicts between overlapping periods that share a resource.

    Args:
        periods: Computed periods, in input order.
        assignments: item_id -> assigned resource ids.

    Returns:
        One Conflict per unordered pair, items in input order, shared
        resources in the first item's assignment order, window = the
        intersection of the two periods. A pair is skipped when a recorded
        conflict already names the same items with an overlapping resource.
    """
    conflicts: list[Conflict] = []

    for i, a in enumerate(periods):
        a_resources = assignments.get(a.item_id, ())
        for b in periods[i + 1:]:
            if b.item_id == a.item_id or not a.overlaps(b):
                continue

            b_resources = set(assignments.get(b.item_id, ()))
            shared = tuple(rid for rid in a_resources if rid in b_resources)
            if not shared:
                continue

            items = frozenset((a.item_id, b.item_id))
            if any(
                c.key[0] == items and not c.key[1].isdisjoint(shared)
                for c in conflicts
            ):
                continue

            conflicts.append(
                Conflict(
                    item_ids=(a.item_id, b.item_id),
                    resource_ids=shared,
                    start=max(a.start, b.start),
                    end=min(a.end, b.end),
                )
            )

    return conflicts


def group_conflicts(conflicts: Sequence[Conflict]) -> list[Conflict]:
    """Merge conflicts that share an item and a resource into contention groups.

    Merging is transitive: A-B on R and B-C on R become one group {A, B, C}
    on R. Items and resources keep first-seen order; the window spans the
    earliest start to the latest end of the merged records.
    """
    # Each group is a sorted list of indices into ``conflicts``
    groups: list[list[int]] = []

    for n, conflict in enumerate(conflicts):
        items = set(conflict.item_ids)
        resources = set(conflict.resource_ids)
        touching = [
            g for g in groups
            if any(
                not items.isdisjoint(conflicts[k].item_ids)
                and not resources.isdisjoint(conflicts[k].resource_ids)
                for k in g
            )
        ]
        merged = [n]
        for g in touching:
            merged.extend(g)
            groups.remove(g)
        groups.append(sorted(merged))

    groups.sort(key=lambda g: g[0])

    result: list[Conflict] = []
    for indices in groups:
        group = [conflicts[k] for k in indices]
        result.append(
            Conflict(
                item_ids=tuple(dict.fromkeys(i for c in group for i in c.item_ids)),
                resource_ids=tuple(
                    dict.fromkeys(r for c in group for r in c.resource_ids)
                ),
                start=min(c.start for c in group),
                end=max(c.end for c in group),
            )
        )
    return result
