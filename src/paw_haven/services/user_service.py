import logging

from pydantic import ValidationError

from paw_haven.core.exceptions import ConflictError, InvalidInputError, NotFoundError
from paw_haven.data_access.dynamodb import DynamoDataAccess
from paw_haven.models.user import UserProfile

logger = logging.getLogger(__name__)

class UserService:
    def __init__(self, data_access: DynamoDataAccess):
        self.users = data_access.users

    def get_or_create(self, email: str, profile: dict) -> dict:
        existing = self.get_by_email(email)
        if existing:
            return existing

        try:
            user = UserProfile(**{**profile, "email": email, "role": "user", "isBanned": False})
        except ValidationError:
            raise InvalidInputError(f"'{email}' is not a valid email address", field="email")

        try:
            self.users.create(user.model_dump(exclude_none=True))
            logger.info(f"Created user profile for {email}")
        except ConflictError:
            # created by a concurrent request
            pass
        return self.users.get(email)

    def get_by_email(self, email: str) -> dict | None:
        try:
            return self.users.get(email)
        except NotFoundError:
            return None

    def get_role(self, email: str) -> dict:
        user = self.users.get(email)
        return {"role": user.get("role", "user"), "isBanned": user.get("isBanned", False)}

    def is_admin(self, email: str) -> bool:
        user = self.get_by_email(email)
        return bool(user) and user.get("role") == "admin"

    def list_others(self, email: str) -> list[dict]:
        return self.users.find(exclude={"email": email})

    def _by_id(self, user_id: str) -> dict:
        user = self.users.find_one(id=user_id)
        if user is None:
            raise NotFoundError("user", user_id)
        return user

    def promote(self, user_id: str) -> dict:
        user = self._by_id(user_id)
        logger.info(f"Promoting {user['email']} to admin")
        return self.users.update(user["email"], {"role": "admin"})

    def ban(self, user_id: str) -> dict:
        user = self._by_id(user_id)
        logger.info(f"Banning {user['email']}")
        return self.users.update(user["email"], {"isBanned": True})
