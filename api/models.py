"""
API request and response models for the pet store REST endpoints.

These Pydantic v2 models define the HTTP transport contract for the API layer.
They are intentionally separate from the dataclasses in petstore/models.py and
auth/models.py, which own the internal domain representation. Route handlers
map between the two.

Wire format is camelCase (photoUrls, categoryId, createdAt); Python attributes
stay snake_case through an alias generator.

Request models declare every field Optional on purpose: a missing required
field must produce 400 MISSING_FIELDS from the route, not a generic 422, and
PetUpdate relies on model_fields_set to tell "key absent" from "key sent".
"""

from typing import Generic, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, EmailStr, field_validator
from pydantic.alias_generators import to_camel

from auth.models import Identity, User
from petstore.models import Category, Pet, Tag

T = TypeVar("T")


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ---------------------------------------------------------------------------
# Envelope
# ---------------------------------------------------------------------------


class SuccessResponse(BaseModel, Generic[T]):
    """Top-level envelope for every 2xx response."""

    success: bool = True
    data: T


class ErrorDetail(BaseModel):
    """Machine-readable error payload."""

    model_config = ConfigDict(frozen=True)

    message: str
    code: str


class ErrorResponse(BaseModel):
    """Top-level error envelope returned on 4xx/5xx responses."""

    model_config = ConfigDict(frozen=True)

    success: bool = False
    error: ErrorDetail


class HealthResponse(BaseModel):
    """Response for GET /health."""

    model_config = ConfigDict(frozen=True)

    status: str = "ok"
    version: str


# ---------------------------------------------------------------------------
# Auth
# ---------------------------------------------------------------------------


class LoginRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


class RegisterRequest(BaseModel):
    email: Optional[EmailStr] = None
    password: Optional[str] = None

    @field_validator("email", mode="before")
    @classmethod
    def blank_email_is_missing(cls, value):
        """Treat "" like an absent key so the route reports MISSING_FIELDS."""
        if isinstance(value, str) and not value.strip():
            return None
        return value


class UserResponse(_CamelModel):
    id: int
    email: str
    created_at: str

    @classmethod
    def from_user(cls, user: User) -> "UserResponse":
        return cls(id=user.id, email=user.email, created_at=user.created_at or "")


class IdentityResponse(BaseModel):
    id: int
    email: str

    @classmethod
    def from_identity(cls, identity: Identity) -> "IdentityResponse":
        return cls(id=identity.id, email=identity.email)


class LoginResponse(_CamelModel):
    token: str
    token_type: str = "bearer"
    expires_in: int
    user: IdentityResponse


# ---------------------------------------------------------------------------
# Categories and tags
# ---------------------------------------------------------------------------


class NamedCreate(BaseModel):
    """Request body for POST /categories and POST /tags."""

    model_config = ConfigDict(str_strip_whitespace=True)

    name: Optional[str] = None


class CategoryResponse(BaseModel):
    id: int
    name: str

    @classmethod
    def from_category(cls, category: Category) -> "CategoryResponse":
        return cls(id=category.id, name=category.name)


class TagResponse(BaseModel):
    id: int
    name: str

    @classmethod
    def from_tag(cls, tag: Tag) -> "TagResponse":
        return cls(id=tag.id, name=tag.name)


# ---------------------------------------------------------------------------
# Pets
# ---------------------------------------------------------------------------


class PetCreate(_CamelModel):
    """Request body for POST /pets. name, status and categoryId are required."""

    name: Optional[str] = None
    status: Optional[str] = None
    category_id: Optional[int] = None
    photo_urls: Optional[list[str]] = None


class PetUpdate(_CamelModel):
    """Request body for PUT /pets/{id}. Every key is optional.

    Only keys present in the request body are applied; a key sent with an
    empty value ("" or []) is applied as that empty value.
    """

    name: Optional[str] = None
    status: Optional[str] = None
    category_id: Optional[int] = None
    photo_urls: Optional[list[str]] = None


class PetResponse(_CamelModel):
    """A pet with its category expanded and tags flattened to Tag objects."""

    id: int
    name: str
    status: str
    photo_urls: list[str]
    category_id: int
    created_at: str
    category: Optional[CategoryResponse] = None
    tags: list[TagResponse] = []

    @classmethod
    def from_pet(cls, pet: Pet) -> "PetResponse":
        """Build a PetResponse from a domain Pet read back in expanded form."""
        return cls(
            id=pet.id,
            name=pet.name,
            status=pet.status,
            photo_urls=pet.photo_urls,
            category_id=pet.category_id,
            created_at=pet.created_at,
            category=CategoryResponse.from_category(pet.category) if pet.category else None,
            tags=[TagResponse.from_tag(t) for t in pet.tags],
        )


class PetDeletedResponse(BaseModel):
    message: str = "Pet deleted successfully"
    id: int
