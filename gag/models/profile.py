from dataclasses import dataclass


@dataclass(frozen=True)
class Profile:
    """An entry in the profile registry. The save itself is stored separately under a key derived from id."""
    id: str
    name: str
    avatar: str
