from fastapi import APIRouter, Response

from paw_haven.api.schemas import SessionUser, SuccessResponse
from paw_haven.core.security import clear_session_cookie, issue_token, set_session_cookie

router = APIRouter(tags=["auth"])

@router.post("/jwt", response_model=SuccessResponse)
def create_session(claims: SessionUser, response: Response):
    token = issue_token(claims.model_dump())
    set_session_cookie(response, token)
    return SuccessResponse(success=True)

@router.get("/logout", response_model=SuccessResponse)
def logout(response: Response):
    clear_session_cookie(response)
    return SuccessResponse(success=True)
