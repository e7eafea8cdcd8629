"""Auth API — registration, login, profile.

- POST /users → create an account
- POST /auth/login → email/password → bearer token (1 hour)
- GET /profile → the authenticated user
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from linkvault.auth.dependencies import get_current_user
from linkvault.db.engine import get_db
from linkvault.db.models import User
from linkvault.schemas.user import (
    Credentials,
    TokenResponse,
    UserEnvelope,
    UserRead,
)
from linkvault.services.auth_service import AuthService

router = APIRouter()


def _svc(db: AsyncSession = Depends(get_db)) -> AuthService:
    return AuthService(db)


@router.post("/users", response_model=UserEnvelope, status_code=201)
async def register(body: Credentials, svc: AuthService = Depends(_svc)):
    """Create a new user account. Only non-secret fields are returned."""
    user = await svc.register(body.email, body.password)
    return {
        "message": "User created successfully!",
        "user": UserRead.model_validate(user),
    }


@router.post("/auth/login", response_model=TokenResponse)
async def login(body: Credentials, svc: AuthService = Depends(_svc)):
    """Login with email and password → signed bearer token."""
    token = await svc.login(body.email, body.password)
    return {"message": "Logged in successfully!", "token": token}


@router.get("/profile", response_model=UserEnvelope)
async def profile(user: User = Depends(get_current_user)):
    """The user resolved by the request gate."""
    return {"message": "Profile loaded.", "user": UserRead.model_validate(user)}
