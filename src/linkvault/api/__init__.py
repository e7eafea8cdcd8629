"""API route aggregation.

All routers registered here get mounted in main.py under /api.

Auth is applied at the include_router level using FastAPI's dependencies
parameter for the links router, so every link route runs the request
gate. Health, registration and login are open; the profile route
declares the gate itself because it needs the resolved user.
"""

from fastapi import APIRouter, Depends

from linkvault.api.auth import router as auth_router
from linkvault.api.health import router as health_router
from linkvault.api.links import router as links_router
from linkvault.auth.dependencies import get_current_user

_auth = [Depends(get_current_user)]

api_router = APIRouter(prefix="/api")

# Open routes — no auth required
api_router.include_router(health_router, tags=["health"])
api_router.include_router(auth_router, tags=["auth"])

# Protected routes — require a valid bearer token
api_router.include_router(links_router, tags=["links"], dependencies=_auth)
