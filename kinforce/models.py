"""Data models for the family tree supplied by collaborators."""

from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field


class Gender(str, Enum):
    MALE = "MALE"
    FEMALE = "FEMALE"
    OTHER = "OTHER"


class RelationshipType(str, Enum):
    PARENT = "PARENT"
    SPOUSE = "SPOUSE"
    SIBLING = "SIBLING"


ALL_RELATIONSHIP_TYPES = (
    RelationshipType.PARENT,
    RelationshipType.SPOUSE,
    RelationshipType.SIBLING,
)


class Person(BaseModel):
    """Person node with display attributes."""

    id: str
    first_name: str = ""
    last_name: str = ""
    gender: Gender = Gender.OTHER
    birth_date: Optional[str] = None
    death_date: Optional[str] = None
    birth_place: Optional[str] = None
    occupation: Optional[str] = None
    photo_url: Optional[str] = None
    biography: str = ""

    @property
    def display_name(self) -> str:
        """First and last name joined, or the id when both are blank."""
        name = f"{self.first_name} {self.last_name}".strip()
        return name or self.id


class Relationship(BaseModel):
    """Relationship between two persons.

    Direction only matters for PARENT (source is the parent, target the child).
    """

    id: str
    source: str
    target: str
    type: RelationshipType

    def connects(self, a: str, b: str) -> bool:
        """True when this relationship joins a and b in either direction."""
        return (self.source == a and self.target == b) or (self.source == b and self.target == a)


class TreeData(BaseModel):
    """People and relationships handed to the layout core."""

    people: list[Person] = Field(default_factory=list)
    relationships: list[Relationship] = Field(default_factory=list)

    def person(self, person_id: str) -> Optional[Person]:
        for p in self.people:
            if p.id == person_id:
                return p
        return None
