"""Heuristic horizontal placement that untangles rows before simulation."""

import logging
from typing import Optional

from kinforce.config import LayoutSettings
from kinforce.graph.layout.generations import band_y, group_by_level, level_band_y
from kinforce.models import Person, Relationship, RelationshipType

logger = logging.getLogger(__name__)


def _first_parent(relationships: list[Relationship]) -> dict[str, str]:
    """Child id -> source of its first PARENT relationship in input order."""
    parents: dict[str, str] = {}
    for r in relationships:
        if r.type == RelationshipType.PARENT and r.target not in parents:
            parents[r.target] = r.source
    return parents


def _first_spouse(relationships: list[Relationship]) -> dict[str, str]:
    """Person id -> the other end of their first SPOUSE relationship."""
    spouses: dict[str, str] = {}
    for r in relationships:
        if r.type != RelationshipType.SPOUSE:
            continue
        spouses.setdefault(r.source, r.target)
        spouses.setdefault(r.target, r.source)
    return spouses


def initial_positions(
    people: list[Person],
    relationships: list[Relationship],
    levels: dict[str, int],
    width: float,
    height: float,
    layout: Optional[LayoutSettings] = None,
) -> dict[str, tuple[float, float]]:
    """
    Place every person in its generation row, ordered to reduce crossings.

    Rows are processed top to bottom. Within a row, people whose parent was
    already placed come first, ordered by that parent's x; everyone else keeps
    input order. A person whose spouse is already placed goes directly to the
    right of the spouse instead of the next free slot.
    """
    layout = layout or LayoutSettings()
    if not people:
        return {}

    gap = layout.generation_gap
    spacing = layout.node_spacing
    parent_of = _first_parent(relationships)
    spouse_of = _first_spouse(relationships)
    rows = group_by_level(people, levels)
    start_y, min_level = level_band_y(levels, height, gap)

    placed_x: dict[str, float] = {}
    positions: dict[str, tuple[float, float]] = {}

    for level in sorted(rows):
        row = rows[level]

        def sort_key(person: Person):
            parent = parent_of.get(person.id)
            if parent is not None and parent in placed_x:
                return (0, placed_x[parent])
            return (1, 0.0)

        # sorted() is stable, so people without a placed parent keep input order
        row = sorted(row, key=sort_key)

        y = band_y(level, start_y, min_level, gap)
        cursor = width / 2 - (len(row) * spacing) / 2
        for person in row:
            spouse = spouse_of.get(person.id)
            if spouse is not None and spouse in placed_x:
                x = placed_x[spouse] + spacing
                cursor = x + spacing
            else:
                x = cursor
                cursor += spacing
            placed_x[person.id] = float(x)
            positions[person.id] = (float(x), float(y))

    logger.debug(f"Initial layout placed {len(positions)} people in {len(rows)} rows")
    return positions
