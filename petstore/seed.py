"""
petstore/seed.py -- Demo data bootstrap.

Wipes every table and loads a fixed catalogue: three categories, five tags,
eight pets with tag links, and two login accounts sharing the password
"password123". Run through `python main.py seed`.
"""

import logging

from auth.models import User
from auth.store import UserStore
from auth.tokens import hash_password
from petstore.models import Category, Pet, Tag
from petstore.store import PetStore

logger = logging.getLogger("petstore.seed")

SEED_PASSWORD = "password123"
SEED_USERS = ("admin@petstore.com", "user@petstore.com")

_CATEGORIES = ("Dogs", "Cats", "Rabbits")
_TAGS = ("Friendly", "Trained", "Vaccinated", "Romeo", "Hypoallergenic")

# (name, status, photo URL, category, tag names)
_PETS = (
    ("Max", "available", "https://images.unsplash.com/photo-1587300003388-59208cc962cb", "Dogs",
     ("Friendly", "Trained", "Vaccinated")),
    ("Bella", "available", "https://images.unsplash.com/photo-1583511655857-d19b40a7a54e", "Dogs",
     ("Friendly", "Romeo")),
    ("Whiskers", "available", "https://images.unsplash.com/photo-1514888286974-6c03e2ca1dba", "Cats",
     ("Friendly", "Vaccinated")),
    ("Shadow", "pending", "https://images.unsplash.com/photo-1573865526739-10c1d3a1bc64", "Cats",
     ("Hypoallergenic", "Vaccinated")),
    ("Fluffy", "available", "https://images.unsplash.com/photo-1585110396000-c9ffd4e4b308", "Rabbits",
     ("Friendly", "Vaccinated")),
    ("Thumper", "available", "https://images.unsplash.com/photo-1535241749838-299277b6305f", "Rabbits",
     ("Friendly", "Trained")),
    ("Luna", "sold", "https://images.unsplash.com/photo-1552053831-71594a27632d", "Dogs",
     ("Trained", "Romeo", "Vaccinated")),
    ("Oliver", "available", "https://images.unsplash.com/photo-1574158622682-e40e69881006", "Cats",
     ("Friendly",)),
)


def seed(user_store: UserStore, pet_store: PetStore) -> None:
    """Reset the database to the demo catalogue. Exceptions propagate."""
    logger.info("Starting seed")

    pet_store.clear_all()
    user_store.clear_all()

    category_ids = {name: pet_store.create_category(Category(name=name)) for name in _CATEGORIES}
    logger.info("Created %d categories", len(category_ids))

    tag_ids = {name: pet_store.create_tag(Tag(name=name)) for name in _TAGS}
    logger.info("Created %d tags", len(tag_ids))

    for name, status, photo_url, category, tag_names in _PETS:
        pet = pet_store.create_pet(
            Pet(name=name, status=status, photo_urls=[photo_url], category_id=category_ids[category])
        )
        for tag_name in tag_names:
            pet_store.attach_tag(pet.id, tag_ids[tag_name])
    logger.info("Created %d pets", len(_PETS))

    hashed = hash_password(SEED_PASSWORD)
    for email in SEED_USERS:
        user_store.create_user(User(email=email, hashed_password=hashed))
    logger.info("Created %d users", user_store.count_users())

    logger.info("Seed completed successfully")
