"""
User endpoints.

Read access for any authenticated user; changes only to one's own account.
"""

from fastapi import APIRouter, Depends, Query

from app.api.dependencies import get_auth_service, get_current_user
from app.core.errors import AccessDeniedError
from app.core.security import AccessTokenClaims
from app.schemas.response import Envelope, success
from app.schemas.user import PasswordChange, UserListResponse, UserResponse, UserUpdate
from app.services.auth_service import AuthService

router = APIRouter()


def _ensure_self(current: AccessTokenClaims, user_id: str) -> None:
    if current.user_id != user_id:
        raise AccessDeniedError("You can only change your own account")


@router.get("/me", summary="Current user profile.", response_model=Envelope[UserResponse])
def me(current: AccessTokenClaims = Depends(get_current_user), service: AuthService = Depends(get_auth_service)):
    return success(UserResponse.model_validate(service.get_user(current.user_id)))


@router.get("", summary="List users.", response_model=Envelope[UserListResponse])
def list_users(limit: int = Query(10, description="Page size (1-100, other values fall back to 10)"),
               offset: int = Query(0, description="Number of users to skip"),
               _: AccessTokenClaims = Depends(get_current_user), service: AuthService = Depends(get_auth_service), ):
    page = service.list_users(limit=limit, offset=offset)
    return success(UserListResponse(items=[UserResponse.model_validate(u) for u in page.items], total=page.total,
                                    limit=page.limit, offset=page.offset, ))


@router.get("/{user_id}", summary="Get a user by id.", response_model=Envelope[UserResponse])
def get_user(user_id: str, _: AccessTokenClaims = Depends(get_current_user),
             service: AuthService = Depends(get_auth_service), ):
    return success(UserResponse.model_validate(service.get_user(user_id)))


@router.put("/{user_id}", summary="Update name and email.", response_model=Envelope[UserResponse])
def update_user(user_id: str, data: UserUpdate, current: AccessTokenClaims = Depends(get_current_user),
                service: AuthService = Depends(get_auth_service), ):
    _ensure_self(current, user_id)
    user = service.update_profile(user_id, name=data.name, email=data.email)
    return success(UserResponse.model_validate(user))


@router.post("/{user_id}/password", summary="Change password.", response_model=Envelope[None])
def change_password(user_id: str, data: PasswordChange, current: AccessTokenClaims = Depends(get_current_user),
                    service: AuthService = Depends(get_auth_service), ):
    _ensure_self(current, user_id)
    service.change_password(user_id, data.old_password, data.new_password)
    return success(None, message="Password changed")


@router.delete("/{user_id}", summary="Delete account.", response_model=Envelope[None])
def delete_user(user_id: str, current: AccessTokenClaims = Depends(get_current_user),
                service: AuthService = Depends(get_auth_service), ):
    _ensure_self(current, user_id)
    service.delete_user(user_id)
    return success(None, message="User deleted")
