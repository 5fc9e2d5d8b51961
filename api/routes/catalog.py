"""
api/routes/catalog.py -- Create-only endpoints for categories and tags.

Routes (require a bearer token):
  POST /categories -- create a category (201)
  POST /tags       -- create a tag (201)

Neither entity can be updated or deleted over HTTP; both are read through
pet expansion.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Request

from api.errors import ValidationError
from api.models import CategoryResponse, NamedCreate, SuccessResponse, TagResponse
from auth.dependencies import get_current_identity
from petstore.models import Category, Tag
from petstore.store import PetStore

router = APIRouter(dependencies=[Depends(get_current_identity)])


def _require_name(body: Optional[NamedCreate]) -> str:
    if body is None or not body.name:
        raise ValidationError("MISSING_FIELDS", "Name is required")
    return body.name


@router.post("/categories", response_model=SuccessResponse[CategoryResponse], status_code=201)
def create_category(request: Request, body: Optional[NamedCreate] = None) -> SuccessResponse[CategoryResponse]:
    name = _require_name(body)
    store: PetStore = request.app.state.pet_store
    category_id = store.create_category(Category(name=name))
    return SuccessResponse[CategoryResponse](data=CategoryResponse.from_category(store.get_category(category_id)))


@router.post("/tags", response_model=SuccessResponse[TagResponse], status_code=201)
def create_tag(request: Request, body: Optional[NamedCreate] = None) -> SuccessResponse[TagResponse]:
    name = _require_name(body)
    store: PetStore = request.app.state.pet_store
    tag_id = store.create_tag(Tag(name=name))
    return SuccessResponse[TagResponse](data=TagResponse.from_tag(store.get_tag(tag_id)))
