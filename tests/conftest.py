"""Shared pytest fixtures."""

import pytest

from kinforce.config import ForceSettings, InteractionSettings, LayoutSettings
from kinforce.models import Gender, TreeData
from tests.factories import parent, person, sibling, spouse


@pytest.fixture
def layout_settings():
    """Default layout constants (gap 160, spacing 140)."""
    return LayoutSettings()


@pytest.fixture
def force_settings():
    return ForceSettings()


@pytest.fixture
def interaction_settings():
    return InteractionSettings()


@pytest.fixture
def family_tree():
    """Grandparents -> parent couple -> two children, plus a sibling link."""
    people = [
        person("grandpa", Gender.MALE),
        person("grandma", Gender.FEMALE),
        person("dad", Gender.MALE),
        person("mum", Gender.FEMALE),
        person("kid1", Gender.FEMALE),
        person("kid2", Gender.MALE),
    ]
    relationships = [
        spouse("grandpa", "grandma"),
        parent("grandpa", "dad"),
        parent("grandma", "dad"),
        spouse("dad", "mum"),
        parent("dad", "kid1"),
        parent("mum", "kid1"),
        parent("dad", "kid2"),
        sibling("kid1", "kid2"),
    ]
    return TreeData(people=people, relationships=relationships)


@pytest.fixture
def loose_trio():
    """Three unrelated people laid out on one row."""
    return TreeData(people=[person("a"), person("b"), person("c")], relationships=[])
