"""Generation level resolution from parent and spouse relationships."""

import logging
from typing import Iterable

from kinforce.models import Person, Relationship, RelationshipType

logger = logging.getLogger(__name__)


def resolve_generations(people: list[Person], relationships: Iterable[Relationship]) -> dict[str, int]:
    """
    Assign an integer generation level to every person.

    Levels start at 0 and are relaxed repeatedly: a child is pushed one row
    below its parent, and spouses are lifted to the deeper of their two rows.
    At most ``2 * len(people)`` passes run, so parent cycles and contradictory
    spouse links still terminate; the levels are then approximate but defined.

    Relationships naming an id that is not in ``people`` are ignored.
    Sibling relationships never affect levels.
    """
    levels = {p.id: 0 for p in people}
    edges = [
        r for r in relationships
        if r.type in (RelationshipType.PARENT, RelationshipType.SPOUSE)
        and r.source in levels and r.target in levels
    ]

    max_passes = len(people) * 2
    passes = 0
    for passes in range(1, max_passes + 1):
        changed = False
        for r in edges:
            if r.type == RelationshipType.PARENT:
                if levels[r.target] <= levels[r.source]:
                    levels[r.target] = levels[r.source] + 1
                    changed = True
            elif levels[r.source] != levels[r.target]:
                top = max(levels[r.source], levels[r.target])
                levels[r.source] = top
                levels[r.target] = top
                changed = True
        if not changed:
            break
    else:
        if max_passes:
            logger.debug(f"Generation levels did not settle after {max_passes} passes (cyclic input?)")

    logger.debug(f"Resolved {len(levels)} generation levels in {passes} passes")
    return levels


def group_by_level(people: list[Person], levels: dict[str, int]) -> dict[int, list[Person]]:
    """Group people by level, keeping input order inside each row."""
    rows: dict[int, list[Person]] = {}
    for p in people:
        rows.setdefault(levels.get(p.id, 0), []).append(p)
    return rows


def level_band_y(levels: dict[str, int], height: float, generation_gap: float) -> tuple[float, int]:
    """
    Return ``(start_y, min_level)`` for vertically centered generation rows.

    Row y for a level is ``start_y + (level - min_level) * generation_gap``.
    """
    if not levels:
        return height / 2, 0
    lo = min(levels.values())
    hi = max(levels.values())
    return (height - (hi - lo) * generation_gap) / 2, lo


def band_y(level: int, start_y: float, min_level: int, generation_gap: float) -> float:
    return start_y + (level - min_level) * generation_gap
