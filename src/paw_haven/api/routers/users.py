from fastapi import APIRouter, Depends

from paw_haven.api.guards import require_admin
from paw_haven.api.schemas import RoleResponse, StatsResponse, UpdateResult, UserProfileRequest
from paw_haven.core.dependencies import get_stats_service, get_user_service
from paw_haven.services.stats_service import StatsService
from paw_haven.services.user_service import UserService

router = APIRouter(tags=["users"])

@router.post("/users/{email}")
def save_user(
    email: str,
    profile: UserProfileRequest | None = None,
    users: UserService = Depends(get_user_service),
):
    body = profile.model_dump(exclude_none=True) if profile else {}
    return users.get_or_create(email, body)

@router.get("/users/role/{email}", response_model=RoleResponse)
def get_role(email: str, users: UserService = Depends(get_user_service)):
    return users.get_role(email)

@router.get("/all-users/{email}", dependencies=[Depends(require_admin)])
def list_users(email: str, users: UserService = Depends(get_user_service)):
    return users.list_others(email)

@router.patch(
    "/user/role/{id}",
    response_model=UpdateResult,
    response_model_exclude_none=True,
    dependencies=[Depends(require_admin)],
)
def make_admin(id: str, users: UserService = Depends(get_user_service)):
    return users.promote(id)

@router.patch(
    "/user/ban/{id}",
    response_model=UpdateResult,
    response_model_exclude_none=True,
    dependencies=[Depends(require_admin)],
)
def ban_user(id: str, users: UserService = Depends(get_user_service)):
    return users.ban(id)

@router.get("/admin-stats", response_model=StatsResponse, dependencies=[Depends(require_admin)])
def admin_stats(stats: StatsService = Depends(get_stats_service)):
    return stats.totals()
