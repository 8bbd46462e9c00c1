"""Authentication router: registration, JSON and OAuth2-form login, current user."""

# =====================================================
# ==================== Imports ========================
# =====================================================
from fastapi import APIRouter, Depends, Request, status
from fastapi.security.oauth2 import OAuth2PasswordRequestForm
from sqlalchemy.orm import Session

from app import oauth2
from app.core.config import settings
from app.core.database import get_db
from app.core.middleware.rate_limit import limiter
from app.modules.users import (
    RegisterResponse,
    Token,
    User,
    UserCreate,
    UserLogin,
    UserOut,
    UserService,
)

# =====================================================
# =============== Global Constants ====================
# =====================================================
router = APIRouter(prefix="/auth", tags=["Authentication"])


def get_user_service(db: Session = Depends(get_db)) -> UserService:
    """Provide a UserService instance via FastAPI dependency injection."""
    return UserService(db)


def _issue_token(user: User) -> Token:
    access_token = oauth2.create_access_token(data={"user_id": user.id})
    return Token(access_token=access_token, token_type="bearer", user_id=user.id)


# =====================================================
# ==================== Endpoints ======================
# =====================================================


@router.post(
    "/register",
    status_code=status.HTTP_201_CREATED,
    response_model=RegisterResponse,
)
@limiter.limit(settings.rate_limit_register)
def register_user(
    request: Request,
    payload: UserCreate,
    service: UserService = Depends(get_user_service),
):
    """Register a new account; username and email must both be unused."""
    new_user = service.create_user(payload)
    return RegisterResponse(message="User registered successfully", user_id=new_user.id)


@router.post("/login", response_model=Token)
@limiter.limit(settings.rate_limit_login)
def login(
    request: Request,
    credentials: UserLogin,
    service: UserService = Depends(get_user_service),
):
    """Exchange a JSON username/password pair for a bearer token."""
    user = service.authenticate(credentials.username, credentials.password)
    return _issue_token(user)


@router.post("/token", response_model=Token)
@limiter.limit(settings.rate_limit_login)
def login_for_access_token(
    request: Request,
    form_data: OAuth2PasswordRequestForm = Depends(),
    service: UserService = Depends(get_user_service),
):
    """OAuth2 password-form login used by the interactive API docs."""
    user = service.authenticate(form_data.username, form_data.password)
    return _issue_token(user)


@router.get("/me", response_model=UserOut)
def read_current_user(current_user: User = Depends(oauth2.get_current_user)):
    return current_user
