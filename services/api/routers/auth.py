from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.orm import Session

from membership import auth, users
from membership.database import get_db
from membership.models import User
from membership.rate_limit import AUTH_RATE_LIMIT, limiter
from membership.schemas import AuthResponse, LoginRequest, RegisterRequest, UserRead

router = APIRouter(prefix="/auth", tags=["auth"])


def _signed_in(user: User) -> AuthResponse:
    return AuthResponse(access_token=auth.create_user_token(user), user=UserRead.model_validate(user))


def _authenticate(db: Session, username: str, password: str) -> User:
    user = auth.authenticate_user(db, username, password)
    if not user:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")
    return user


@router.post("/login", response_model=AuthResponse)
@limiter.limit(AUTH_RATE_LIMIT)
def login(request: Request, credentials: LoginRequest, db: Session = Depends(get_db)) -> AuthResponse:
    return _signed_in(_authenticate(db, credentials.username, credentials.password))


@router.post("/token", response_model=AuthResponse)
@limiter.limit(AUTH_RATE_LIMIT)
def token(
    request: Request, form_data: OAuth2PasswordRequestForm = Depends(), db: Session = Depends(get_db)
) -> AuthResponse:
    """Form-encoded login used by the OpenAPI "Authorize" dialog."""
    return _signed_in(_authenticate(db, form_data.username, form_data.password))


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit(AUTH_RATE_LIMIT)
def register(request: Request, user_in: RegisterRequest, db: Session = Depends(get_db)) -> AuthResponse:
    """Self-service sign up; always creates a MEMBER and signs them in."""
    return _signed_in(users.create_user(db, user_in))
