from paw_haven.core.exceptions import InvalidInputError
from paw_haven.data_access.dynamodb import DynamoDataAccess
from paw_haven.models.pet import Pet

FEATURED_PETS = 6

class PetService:
    def __init__(self, data_access: DynamoDataAccess):
        self.pets = data_access.pets

    def list_available(self, page: int, limit: int, search: str = "", category: str = "") -> dict:
        filters = {"adopted": False}
        if category:
            filters["category"] = category
        return self.pets.list_page(page=page, limit=limit, filters=filters, search=search or None)

    def featured(self) -> list[dict]:
        return self.pets.find({"adopted": False}, limit=FEATURED_PETS)

    def categories(self) -> list[dict]:
        return self.pets.category_counts("category")

    def all_pets(self) -> list[dict]:
        return self.pets.find()

    def by_owner(self, email: str) -> list[dict]:
        return self.pets.find({"addedBy": email})

    def get(self, pet_id: str) -> dict:
        return self.pets.get(pet_id)

    def add(self, pet: dict, owner_email: str) -> dict:
        doc = Pet(**{**pet, "addedBy": owner_email, "adopted": False})
        return self.pets.create(doc.model_dump())

    def update(self, pet_id: str, patch: dict, owner_email: str, upsert: bool = False) -> dict:
        if "adopted" in patch and not isinstance(patch["adopted"], bool):
            raise InvalidInputError("adopted must be true or false", field="adopted")
        insert = {"addedBy": owner_email, "adopted": patch.get("adopted", False)}
        return self.pets.update(pet_id, patch, upsert=upsert, insert=insert)

    def set_adopted(self, pet_id: str, adopted: bool) -> dict:
        return self.pets.update(pet_id, {"adopted": adopted})

    def delete(self, pet_id: str) -> dict:
        return self.pets.delete(pet_id)
