"""Sample family used by the demo page."""

from kinforce.models import Gender, Person, Relationship, RelationshipType, TreeData


def _p(pid: str, first: str, last: str, gender: Gender, **kwargs) -> Person:
    return Person(id=pid, first_name=first, last_name=last, gender=gender, **kwargs)


def _r(rid: str, source: str, target: str, rel_type: RelationshipType) -> Relationship:
    return Relationship(id=rid, source=source, target=target, type=rel_type)


def sample_tree() -> TreeData:
    """Three generations: two grandparent couples, their children, grandchildren."""
    people = [
        _p("ramesh", "Ramesh", "Mattegunta", Gender.MALE, birth_date="1948-03-02", occupation="Engineer"),
        _p("padma", "Padma", "Mattegunta", Gender.FEMALE, birth_date="1952-11-19"),
        _p("george", "George", "Alder", Gender.MALE, birth_date="1950-06-14"),
        _p("helen", "Helen", "Alder", Gender.FEMALE, birth_date="1953-01-08", birth_place="Leeds"),
        _p("suresh", "Suresh", "Mattegunta", Gender.MALE, birth_date="1975-07-21"),
        _p("anna", "Anna", "Alder", Gender.FEMALE, birth_date="1977-04-30", occupation="Teacher"),
        _p("lakshmi", "Lakshmi", "Rao", Gender.FEMALE, birth_date="1979-09-12"),
        _p("tom", "Tom", "Alder", Gender.MALE, birth_date="1981-02-03"),
        _p("maya", "Maya", "Mattegunta", Gender.FEMALE, birth_date="2004-05-17"),
        _p("arjun", "Arjun", "Mattegunta", Gender.MALE, birth_date="2007-10-01"),
        _p("sam", "Sam", "", Gender.OTHER),
    ]
    relationships = [
        _r("r1", "ramesh", "padma", RelationshipType.SPOUSE),
        _r("r2", "george", "helen", RelationshipType.SPOUSE),
        _r("r3", "ramesh", "suresh", RelationshipType.PARENT),
        _r("r4", "padma", "suresh", RelationshipType.PARENT),
        _r("r5", "ramesh", "lakshmi", RelationshipType.PARENT),
        _r("r6", "george", "anna", RelationshipType.PARENT),
        _r("r7", "helen", "anna", RelationshipType.PARENT),
        _r("r8", "helen", "tom", RelationshipType.PARENT),
        _r("r9", "suresh", "anna", RelationshipType.SPOUSE),
        _r("r10", "anna", "tom", RelationshipType.SIBLING),
        _r("r11", "suresh", "maya", RelationshipType.PARENT),
        _r("r12", "anna", "maya", RelationshipType.PARENT),
        _r("r13", "anna", "arjun", RelationshipType.PARENT),
        _r("r14", "maya", "arjun", RelationshipType.SIBLING),
    ]
    return TreeData(people=people, relationships=relationships)
