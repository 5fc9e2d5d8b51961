"""
petstore/store.py -- SQLAlchemy-backed persistence layer for the pet catalogue.

Uses SQLAlchemy Core (not ORM) so the dataclasses in petstore/models.py
remain the authoritative domain representation. Swapping SQLite for
PostgreSQL is a connection string change, not a rewrite.

Pattern: Repository + Data Mapper. PetStore is the repository; the _row_to_*
functions are the mappers. Route handlers never touch SQL directly.

Referential rules (enforced by the schema, SQLite needs PRAGMA foreign_keys,
see core/db.py):
  pets.category_id  -> categories.id  ON DELETE RESTRICT
  pet_tags.pet_id   -> pets.id        ON DELETE CASCADE
  pet_tags.tag_id   -> tags.id        ON DELETE CASCADE
  pet_tags primary key (pet_id, tag_id) keeps each pair unique.

Multi-step writes (check category, then insert/update) run inside a single
engine.begin() transaction so they are all-or-nothing.

Usage:
    store = PetStore(engine)
    category_id = store.create_category(Category(name="Dogs"))
    pet = store.create_pet(Pet(name="Max", status="available", category_id=category_id))
    store.update_pet(pet.id, status="sold")
    store.delete_pet(pet.id)
"""

import json
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import (
    CheckConstraint,
    Column,
    ForeignKey,
    Integer,
    MetaData,
    String,
    Table,
    Text,
    func,
    select,
)
from sqlalchemy.engine import Connection, Engine

from petstore.models import PET_STATUSES, Category, Pet, Tag

# ---------------------------------------------------------------------------
# Schema
# ---------------------------------------------------------------------------

metadata = MetaData()

_categories = Table(
    "categories",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("name", String(255), nullable=False),
)

_tags = Table(
    "tags",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("name", String(255), nullable=False),
)

_pets = Table(
    "pets",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("name", String(255), nullable=False),
    Column("status", String(20), nullable=False),
    Column("photo_urls", Text, nullable=False, server_default="[]"),  # JSON array serialized as text
    Column(
        "category_id",
        Integer,
        ForeignKey("categories.id", ondelete="RESTRICT"),
        nullable=False,
    ),
    Column("created_at", String(32), nullable=False),
    CheckConstraint(
        "status IN ({})".format(", ".join(f"'{s}'" for s in PET_STATUSES)),
        name="ck_pets_status",
    ),
)

_pet_tags = Table(
    "pet_tags",
    metadata,
    Column("pet_id", Integer, ForeignKey("pets.id", ondelete="CASCADE"), primary_key=True),
    Column("tag_id", Integer, ForeignKey("tags.id", ondelete="CASCADE"), primary_key=True),
)

# Fields update_pet() accepts; each is also the column name.
_UPDATABLE_FIELDS = {"name", "status", "category_id", "photo_urls"}


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


class PetNotFoundError(LookupError):
    """The referenced pet does not exist."""


class CategoryNotFoundError(LookupError):
    """The referenced category does not exist."""


class CategoryInUseError(Exception):
    """A category cannot be deleted while pets still reference it."""


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="microseconds")


def _category_exists(conn: Connection, category_id: int) -> bool:
    row = conn.execute(select(_categories.c.id).where(_categories.c.id == category_id)).fetchone()
    return row is not None


def _pet_exists(conn: Connection, pet_id: int) -> bool:
    row = conn.execute(select(_pets.c.id).where(_pets.c.id == pet_id)).fetchone()
    return row is not None


def _load_pets(conn: Connection, pet_id: Optional[int] = None) -> list[Pet]:
    """Read pets with their category and flattened tag list.

    pet_id=None loads every pet, newest first (id breaks created_at ties).
    """
    stmt = select(
        _pets,
        _categories.c.name.label("category_name"),
    ).join(_categories, _pets.c.category_id == _categories.c.id)
    tag_stmt = (
        select(_pet_tags.c.pet_id, _tags.c.id, _tags.c.name)
        .join(_tags, _pet_tags.c.tag_id == _tags.c.id)
        .order_by(_tags.c.id)
    )
    if pet_id is not None:
        stmt = stmt.where(_pets.c.id == pet_id)
        tag_stmt = tag_stmt.where(_pet_tags.c.pet_id == pet_id)
    stmt = stmt.order_by(_pets.c.created_at.desc(), _pets.c.id.desc())

    rows = conn.execute(stmt).fetchall()
    if not rows:
        return []

    tags_by_pet: dict[int, list[Tag]] = {}
    for tag_row in conn.execute(tag_stmt):
        tags_by_pet.setdefault(tag_row.pet_id, []).append(Tag(id=tag_row.id, name=tag_row.name))
    return [_row_to_pet(r, tags_by_pet.get(r.id, [])) for r in rows]


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class PetStore:
    def __init__(self, engine: Engine) -> None:
        self.engine = engine
        metadata.create_all(self.engine)

    # ------------------------------------------------------------------
    # Categories
    # ------------------------------------------------------------------

    def create_category(self, category: Category) -> int:
        """Insert a category and return its assigned database ID."""
        with self.engine.begin() as conn:
            result = conn.execute(_categories.insert().values(name=category.name))
            return result.inserted_primary_key[0]

    def get_category(self, category_id: int) -> Optional[Category]:
        with self.engine.connect() as conn:
            row = conn.execute(_categories.select().where(_categories.c.id == category_id)).fetchone()
        return Category(id=row.id, name=row.name) if row is not None else None

    def delete_category(self, category_id: int) -> bool:
        """Delete a category that no pet references.

        Raises CategoryInUseError when pets still point at it; dependent pets
        are never cascaded away. Returns False if the category does not exist.
        """
        with self.engine.begin() as conn:
            in_use = conn.execute(
                select(func.count()).select_from(_pets).where(_pets.c.category_id == category_id)
            ).scalar()
            if in_use:
                raise CategoryInUseError(f"Category {category_id} is referenced by {in_use} pet(s)")
            result = conn.execute(_categories.delete().where(_categories.c.id == category_id))
        return result.rowcount > 0

    # ------------------------------------------------------------------
    # Tags
    # ------------------------------------------------------------------

    def create_tag(self, tag: Tag) -> int:
        """Insert a tag and return its assigned database ID."""
        with self.engine.begin() as conn:
            result = conn.execute(_tags.insert().values(name=tag.name))
            return result.inserted_primary_key[0]

    def get_tag(self, tag_id: int) -> Optional[Tag]:
        with self.engine.connect() as conn:
            row = conn.execute(_tags.select().where(_tags.c.id == tag_id)).fetchone()
        return Tag(id=row.id, name=row.name) if row is not None else None

    def attach_tag(self, pet_id: int, tag_id: int) -> None:
        """Link a tag to a pet.

        Raises sqlalchemy.exc.IntegrityError if the pair already exists or
        either side is missing.
        """
        with self.engine.begin() as conn:
            conn.execute(_pet_tags.insert().values(pet_id=pet_id, tag_id=tag_id))

    # ------------------------------------------------------------------
    # Pets
    # ------------------------------------------------------------------

    def list_pets(self) -> list[Pet]:
        """Return every pet, newest first, with category and tags expanded.

        Full-table read; there is no paging.
        """
        with self.engine.connect() as conn:
            return _load_pets(conn)

    def get_pet(self, pet_id: int) -> Optional[Pet]:
        """Fetch one pet in expanded form. Returns None if not found."""
        with self.engine.connect() as conn:
            pets = _load_pets(conn, pet_id)
        return pets[0] if pets else None

    def create_pet(self, pet: Pet) -> Pet:
        """Insert a pet and return it with its category expanded.

        The category check and the insert share one transaction.
        Raises CategoryNotFoundError if pet.category_id does not resolve.
        """
        with self.engine.begin() as conn:
            if not _category_exists(conn, pet.category_id):
                raise CategoryNotFoundError(pet.category_id)
            result = conn.execute(
                _pets.insert().values(
                    name=pet.name,
                    status=pet.status,
                    photo_urls=json.dumps(pet.photo_urls),
                    category_id=pet.category_id,
                    created_at=_now_iso(),
                )
            )
            pet_id = result.inserted_primary_key[0]
            return _load_pets(conn, pet_id)[0]

    def update_pet(self, pet_id: int, **fields) -> Pet:
        """Apply a partial update and return the pet in expanded form.

        Accepts any subset of: name, status, category_id, photo_urls.
        Only the keys passed are written; photo_urls must be a list[str].

        Raises PetNotFoundError if the pet does not exist and
        CategoryNotFoundError if a supplied category_id does not resolve.
        Both checks happen before any write, in the same transaction.
        """
        unknown = set(fields) - _UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Unknown pet fields: {unknown!r}")
        if "photo_urls" in fields:
            fields["photo_urls"] = json.dumps(fields["photo_urls"])
        with self.engine.begin() as conn:
            if not _pet_exists(conn, pet_id):
                raise PetNotFoundError(pet_id)
            if "category_id" in fields and not _category_exists(conn, fields["category_id"]):
                raise CategoryNotFoundError(fields["category_id"])
            if fields:
                conn.execute(_pets.update().where(_pets.c.id == pet_id).values(**fields))
            return _load_pets(conn, pet_id)[0]

    def delete_pet(self, pet_id: int) -> bool:
        """Delete a pet. Its pet_tags rows go with it; Tag rows are kept.

        Returns True if deleted, False if not found.
        """
        with self.engine.begin() as conn:
            result = conn.execute(_pets.delete().where(_pets.c.id == pet_id))
        return result.rowcount > 0

    def count_pet_tags(self, pet_id: int) -> int:
        """Return how many tags are linked to pet_id."""
        with self.engine.connect() as conn:
            return (
                conn.execute(select(func.count()).select_from(_pet_tags).where(_pet_tags.c.pet_id == pet_id)).scalar()
                or 0
            )

    def clear_all(self) -> None:
        """Delete every pet, tag link, tag and category. Used by the seed command."""
        with self.engine.begin() as conn:
            conn.execute(_pet_tags.delete())
            conn.execute(_pets.delete())
            conn.execute(_categories.delete())
            conn.execute(_tags.delete())


# ---------------------------------------------------------------------------
# Row mappers (Data Mapper pattern)
# ---------------------------------------------------------------------------


def _row_to_pet(row, tags: list[Tag]) -> Pet:
    return Pet(
        id=row.id,
        name=row.name,
        status=row.status,
        photo_urls=json.loads(row.photo_urls) if row.photo_urls else [],
        category_id=row.category_id,
        created_at=row.created_at,
        category=Category(id=row.category_id, name=row.category_name),
        tags=tags,
    )
