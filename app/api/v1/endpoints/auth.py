"""
Authentication endpoints.

Handles registration, login, token refresh and logout.
"""

from fastapi import APIRouter, Depends, Request, status

from app.api.dependencies import get_auth_service, get_current_user
from app.core.errors import SessionNotFoundError
from app.core.security import AccessTokenClaims
from app.schemas.response import Envelope, success
from app.schemas.token import LoginResponse, LogoutResponse, RefreshRequest, Token
from app.schemas.user import UserCreate, UserLogin, UserResponse
from app.services.auth_service import AuthService

router = APIRouter()


@router.post("/register",
             summary="User registration endpoint.",
             response_model=Envelope[UserResponse],
             status_code=status.HTTP_201_CREATED)
def register(user_data: UserCreate, service: AuthService = Depends(get_auth_service)):
    """
    Register a new user.

    Returns:
        Created user data (without password)
    """
    user = service.register(user_data.email, user_data.name, user_data.password)
    return success(UserResponse.model_validate(user))


@router.post("/login",
             summary="User login endpoint.",
             response_model=Envelope[LoginResponse])
def login(login_data: UserLogin, request: Request, service: AuthService = Depends(get_auth_service)):
    """
    Authenticate user via JSON body.

    Opens a new session tied to the caller's address and user agent and
    returns an access token plus the refresh token for that session.
    """
    result = service.login(login_data.email, login_data.password,
                           ip_address=request.client.host if request.client else None,
                           user_agent=request.headers.get("user-agent"), )
    return success(LoginResponse(access_token=result.access_token, refresh_token=result.refresh_token,
                                 expires_in=int(service.tokens.access_token_ttl.total_seconds()),
                                 session_id=result.session.id, session_expires_at=result.session.expires_at,
                                 user=UserResponse.model_validate(result.user), ))


@router.post("/token/refresh",
             summary="Exchange a refresh token for a new access token.",
             response_model=Envelope[Token])
def refresh(data: RefreshRequest, service: AuthService = Depends(get_auth_service)):
    access_token = service.refresh_token(data.refresh_token)
    return success(Token(access_token=access_token, expires_in=int(service.tokens.access_token_ttl.total_seconds())))


@router.post("/logout",
             summary="End the session the access token belongs to.",
             response_model=Envelope[LogoutResponse])
def logout(current: AccessTokenClaims = Depends(get_current_user), service: AuthService = Depends(get_auth_service)):
    if not current.session_id:
        raise SessionNotFoundError()
    service.logout(current.session_id)
    return success(LogoutResponse(sessions_deleted=1))


@router.post("/logout-all",
             summary="End every session of the current user.",
             response_model=Envelope[LogoutResponse])
def logout_all(current: AccessTokenClaims = Depends(get_current_user),
               service: AuthService = Depends(get_auth_service)):
    deleted = service.logout_all_sessions(current.user_id)
    return success(LogoutResponse(sessions_deleted=deleted))
