"""
petstore/models.py -- Domain dataclasses for the pet catalogue.

These are pure data containers with zero logic. Persistence lives in
petstore/store.py; validation of client input lives in the API layer.
"""

from dataclasses import dataclass, field
from typing import Optional

PET_STATUSES: tuple[str, ...] = ("available", "pending", "sold")


@dataclass
class Category:
    name: str
    id: Optional[int] = None


@dataclass
class Tag:
    name: str
    id: Optional[int] = None


@dataclass
class Pet:
    """A pet listed in the store.

    category and tags are filled in by the store when the pet is read back
    in expanded form. The pet_tags join rows are never exposed; tags holds
    the referenced Tag objects directly.

    id is None before the record is written to the database.
    """

    name: str
    status: str  # "available" | "pending" | "sold"
    category_id: int
    photo_urls: list[str] = field(default_factory=list)
    id: Optional[int] = None
    created_at: str = ""  # ISO 8601, set by store on insert
    category: Optional[Category] = None
    tags: list[Tag] = field(default_factory=list)
