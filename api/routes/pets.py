"""
api/routes/pets.py -- Pet CRUD routes.

Routes (mounted under /pets, all require a bearer token):
  GET    /pets          -- list every pet, newest first
  GET    /pets/{pet_id} -- one pet
  POST   /pets          -- create a pet (201)
  PUT    /pets/{pet_id} -- partial update
  DELETE /pets/{pet_id} -- delete a pet and its tag links

Every pet in a response carries its category and a flat list of tags.
Validation and existence checks run before the store is asked to write.
Persistence failures surface as 500 INTERNAL_ERROR via the SQLAlchemyError
handler in api/main.py.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Request

from api.errors import NotFoundError, ValidationError
from api.models import PetCreate, PetDeletedResponse, PetResponse, PetUpdate, SuccessResponse
from auth.dependencies import get_current_identity
from auth.models import Identity
from petstore.models import PET_STATUSES, Pet
from petstore.store import CategoryNotFoundError, PetNotFoundError, PetStore

logger = logging.getLogger("petstore.api.pets")

# Router-level dependency applies to every route registered on this router.
router = APIRouter(dependencies=[Depends(get_current_identity)])


def _pet_not_found() -> NotFoundError:
    return NotFoundError("PET_NOT_FOUND", "Pet not found")


def _category_not_found() -> NotFoundError:
    return NotFoundError("CATEGORY_NOT_FOUND", "Category not found")


def _validate_status(status: str) -> None:
    if status not in PET_STATUSES:
        raise ValidationError("INVALID_STATUS", f"Status must be one of: {', '.join(PET_STATUSES)}")


def _is_blank(value) -> bool:
    return value is None or (isinstance(value, str) and value == "")


# ---------------------------------------------------------------------------
# GET /pets
# ---------------------------------------------------------------------------


@router.get("", response_model=SuccessResponse[list[PetResponse]])
def list_pets(request: Request) -> SuccessResponse[list[PetResponse]]:
    """Return all pets ordered by creation time, newest first."""
    store: PetStore = request.app.state.pet_store
    pets = store.list_pets()
    return SuccessResponse[list[PetResponse]](data=[PetResponse.from_pet(p) for p in pets])


# ---------------------------------------------------------------------------
# GET /pets/{pet_id}
# ---------------------------------------------------------------------------


@router.get("/{pet_id}", response_model=SuccessResponse[PetResponse])
def get_pet(request: Request, pet_id: int) -> SuccessResponse[PetResponse]:
    store: PetStore = request.app.state.pet_store
    pet = store.get_pet(pet_id)
    if pet is None:
        raise _pet_not_found()
    return SuccessResponse[PetResponse](data=PetResponse.from_pet(pet))


# ---------------------------------------------------------------------------
# POST /pets
# ---------------------------------------------------------------------------


@router.post("", response_model=SuccessResponse[PetResponse], status_code=201)
def create_pet(
    request: Request,
    body: Optional[PetCreate] = None,
    identity: Identity = Depends(get_current_identity),
) -> SuccessResponse[PetResponse]:
    """Create a pet. photoUrls defaults to an empty list; no tags are attached.

    A request without a body is treated as an empty one. categoryId 0 counts
    as missing, the same as an absent key.

    Check order: required fields, status, category existence.
    """
    if body is None:
        body = PetCreate()
    if _is_blank(body.name) or _is_blank(body.status) or not body.category_id:
        raise ValidationError("MISSING_FIELDS", "Name, status, and categoryId are required")
    _validate_status(body.status)

    store: PetStore = request.app.state.pet_store
    try:
        pet = store.create_pet(
            Pet(
                name=body.name,
                status=body.status,
                category_id=body.category_id,
                photo_urls=body.photo_urls or [],
            )
        )
    except CategoryNotFoundError:
        raise _category_not_found() from None

    logger.info("Pet %d created by user %d", pet.id, identity.id)
    return SuccessResponse[PetResponse](data=PetResponse.from_pet(pet))


# ---------------------------------------------------------------------------
# PUT /pets/{pet_id}
# ---------------------------------------------------------------------------


@router.put("/{pet_id}", response_model=SuccessResponse[PetResponse])
def update_pet(
    request: Request,
    pet_id: int,
    body: Optional[PetUpdate] = None,
    identity: Identity = Depends(get_current_identity),
) -> SuccessResponse[PetResponse]:
    """Apply a partial update.

    A field is written only when its key is present in the body, so
    {"photoUrls": []} clears the photos while {} changes nothing. Sending
    null for a key is rejected: every pet column is non-nullable.

    Check order: pet existence, null keys, status, category existence.
    """
    if body is None:
        body = PetUpdate()
    store: PetStore = request.app.state.pet_store
    if store.get_pet(pet_id) is None:
        raise _pet_not_found()

    updates = {name: getattr(body, name) for name in body.model_fields_set}
    for name, value in updates.items():
        if value is None:
            alias = PetUpdate.model_fields[name].alias or name
            raise ValidationError("VALIDATION_ERROR", f"{alias} cannot be null")
    if "status" in updates:
        _validate_status(updates["status"])

    try:
        pet = store.update_pet(pet_id, **updates)
    except PetNotFoundError:
        # Deleted between the existence check and the update transaction
        raise _pet_not_found() from None
    except CategoryNotFoundError:
        raise _category_not_found() from None

    logger.info("Pet %d updated by user %d (%s)", pet_id, identity.id, ", ".join(sorted(updates)) or "no changes")
    return SuccessResponse[PetResponse](data=PetResponse.from_pet(pet))


# ---------------------------------------------------------------------------
# DELETE /pets/{pet_id}
# ---------------------------------------------------------------------------


@router.delete("/{pet_id}", response_model=SuccessResponse[PetDeletedResponse])
def delete_pet(
    request: Request,
    pet_id: int,
    identity: Identity = Depends(get_current_identity),
) -> SuccessResponse[PetDeletedResponse]:
    """Delete a pet. Its tag links are removed by cascade; tags themselves stay."""
    store: PetStore = request.app.state.pet_store
    links = store.count_pet_tags(pet_id)
    if not store.delete_pet(pet_id):
        raise _pet_not_found()
    logger.info("Pet %d deleted by user %d (%d tag links removed)", pet_id, identity.id, links)
    return SuccessResponse[PetDeletedResponse](data=PetDeletedResponse(id=pet_id))
