"""Project-related data models."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Project:
    """Project information."""

    id: int
    key: str
    name: str
    description: str | None
    public: bool
