"""Route-level authorization.

Routes declare the checks they need through ``Depends``:

* ``get_current_user`` - a valid session cookie
* ``require_admin`` - the caller's stored role is ``admin``
* ``require_owner()`` - the ``email`` path parameter is the caller's
* ``require_owner_or_admin()`` - the caller added the document or is an admin
"""
import logging

from fastapi import Depends, Request

from paw_haven.api.schemas import SessionUser
from paw_haven.core.config import settings
from paw_haven.core.dependencies import get_data_access, get_user_service
from paw_haven.core.exceptions import ForbiddenError, NotFoundError, UnauthorizedError
from paw_haven.core.security import decode_token
from paw_haven.data_access.dynamodb import DynamoDataAccess
from paw_haven.services.user_service import UserService

logger = logging.getLogger(__name__)


def get_current_user(request: Request) -> SessionUser:
    token = request.cookies.get(settings.SESSION_COOKIE_NAME)
    if not token:
        raise UnauthorizedError()

    user = SessionUser(**decode_token(token))
    request.state.user = user
    return user


def require_admin(
    user: SessionUser = Depends(get_current_user),
    users: UserService = Depends(get_user_service),
) -> SessionUser:
    if not users.is_admin(user.email):
        logger.info(f"Admin access denied for {user.email}")
        raise ForbiddenError("Admin access required")
    return user


def require_owner(param: str = "email"):
    def _owner(request: Request, user: SessionUser = Depends(get_current_user)) -> SessionUser:
        claimed = request.path_params.get(param, request.query_params.get(param))
        if claimed != user.email:
            raise UnauthorizedError()
        return user

    return _owner


def require_owner_or_admin(store: str, owner_field: str = "addedBy", param: str = "id"):
    def _owner_or_admin(
        request: Request,
        user: SessionUser = Depends(get_current_user),
        data_access: DynamoDataAccess = Depends(get_data_access),
    ) -> SessionUser:
        documents = getattr(data_access, store)
        try:
            doc = documents.get(request.path_params[param])
        except NotFoundError:
            # nothing to own; the handler decides between 404 and upsert
            return user

        if doc.get(owner_field) == user.email or UserService(data_access).is_admin(user.email):
            return user
        raise ForbiddenError(f"Only the owner or an admin can change this {documents.resource}")

    return _owner_or_admin


owns_path_email = require_owner("email")
owns_pet = require_owner_or_admin("pets")
owns_campaign = require_owner_or_admin("campaigns")
owns_donation = require_owner_or_admin("donations", owner_field="donorEmail")
