"""Authentication API routes."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from turma.api.deps import AUTH_COOKIE, get_db, require_auth
from turma.config import get_settings
from turma.models.user import User
from turma.schemas.auth import (
    LoginRequest,
    OAuthRequest,
    RegisterRequest,
    TokenResponse,
    UserRead,
)
from turma.services.auth import (
    EmailAlreadyRegisteredError,
    authenticate_user,
    authenticate_with_oauth,
    create_access_token_for_user,
    register_user,
)

router = APIRouter()


def _issue_token(user: User, response: Response) -> TokenResponse:
    """Sign a token for user and set it as an httponly cookie for browser sessions."""
    token = create_access_token_for_user(user)
    response.set_cookie(
        key=AUTH_COOKIE,
        value=token,
        httponly=True,
        samesite="lax",
        max_age=60 * 60 * get_settings().access_token_expire_hours,
        path="/",
    )
    return TokenResponse(access_token=token, user=UserRead.model_validate(user))


@router.post("/register", response_model=TokenResponse, status_code=201)
def register(
    body: RegisterRequest,
    response: Response,
    db: Session = Depends(get_db),
) -> TokenResponse:
    """Create an account and log it in."""
    try:
        user = register_user(db, body.name, body.email, body.password)
    except EmailAlreadyRegisteredError as exc:
        raise HTTPException(status_code=409, detail=str(exc))
    return _issue_token(user, response)


@router.post("/login", response_model=TokenResponse)
def login(
    body: LoginRequest,
    response: Response,
    db: Session = Depends(get_db),
) -> TokenResponse:
    """Authenticate user and return JWT token."""
    user = authenticate_user(db, body.email, body.password)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password",
        )
    return _issue_token(user, response)


@router.post("/oauth", response_model=TokenResponse)
def oauth(
    body: OAuthRequest,
    response: Response,
    db: Session = Depends(get_db),
) -> TokenResponse:
    """Log in (creating the account if needed) with an identity verified by an OAuth provider."""
    user = authenticate_with_oauth(
        db,
        provider=body.provider,
        oauth_id=body.oauth_id,
        email=body.email,
        name=body.name,
        image=body.image,
    )
    return _issue_token(user, response)


@router.post("/logout")
def logout(response: Response) -> dict:
    """Clear the authentication cookie."""
    response.delete_cookie(key=AUTH_COOKIE, path="/")
    return {"detail": "Logged out"}


@router.get("/profile", response_model=UserRead)
def profile(current_user: User = Depends(require_auth)) -> UserRead:
    """Return the currently authenticated user's information."""
    return UserRead.model_validate(current_user)
