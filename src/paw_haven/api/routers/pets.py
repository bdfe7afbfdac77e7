from typing import Any

from fastapi import APIRouter, Body, Depends

from paw_haven.api.guards import get_current_user, owns_path_email, owns_pet
from paw_haven.api.schemas import (
    AdoptionStatusRequest,
    CategoryCount,
    DeleteResult,
    InsertResult,
    Page,
    PetRequest,
    SessionUser,
    UpdateResult,
)
from paw_haven.core.dependencies import get_pet_service
from paw_haven.services.pet_service import PetService

router = APIRouter(tags=["pets"])

@router.get("/pets", response_model=Page)
def list_pets(
    page: int = 1,
    limit: int = 9,
    search: str = "",
    category: str = "",
    pets: PetService = Depends(get_pet_service),
):
    return pets.list_available(page, limit, search=search, category=category)

@router.get("/featuredPets")
def featured_pets(pets: PetService = Depends(get_pet_service)):
    return pets.featured()

@router.get("/pet-categories", response_model=list[CategoryCount])
def pet_categories(pets: PetService = Depends(get_pet_service)):
    return pets.categories()

@router.get("/all-pets")
def all_pets(pets: PetService = Depends(get_pet_service)):
    return pets.all_pets()

@router.get("/pets/{id}", dependencies=[Depends(get_current_user)])
def get_pet(id: str, pets: PetService = Depends(get_pet_service)):
    return pets.get(id)

@router.get("/my-pets/{email}", dependencies=[Depends(owns_path_email)])
def my_pets(email: str, pets: PetService = Depends(get_pet_service)):
    return pets.by_owner(email)

@router.post("/add-pet", response_model=InsertResult)
def add_pet(
    pet: PetRequest,
    user: SessionUser = Depends(get_current_user),
    pets: PetService = Depends(get_pet_service),
):
    return pets.add(pet.model_dump(), owner_email=user.email)

@router.put(
    "/update-pet/{id}",
    response_model=UpdateResult,
    response_model_exclude_none=True,
    dependencies=[Depends(owns_pet)],
)
def update_pet(
    id: str,
    patch: dict[str, Any] = Body(...),
    upsert: bool = False,
    user: SessionUser = Depends(get_current_user),
    pets: PetService = Depends(get_pet_service),
):
    return pets.update(id, patch, owner_email=user.email, upsert=upsert)

@router.patch(
    "/pet/{id}",
    response_model=UpdateResult,
    response_model_exclude_none=True,
    dependencies=[Depends(owns_pet)],
)
def set_adoption_status(
    id: str,
    body: AdoptionStatusRequest | None = None,
    pets: PetService = Depends(get_pet_service),
):
    return pets.set_adopted(id, body.adopted if body else True)

@router.delete("/pet/{id}", response_model=DeleteResult, dependencies=[Depends(owns_pet)])
def delete_pet(id: str, pets: PetService = Depends(get_pet_service)):
    return pets.delete(id)
