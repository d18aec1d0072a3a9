"""API route aggregation.

All routers registered here get mounted in main.py.

Learn: Auth is applied at the include_router level using FastAPI's
dependencies parameter. This protects all routes in each router
without modifying individual handlers. Health and auth routers are
open; /auth/me declares its own get_current_user dependency.
"""

from fastapi import APIRouter, Depends

from inkpost.api.auth import router as auth_router
from inkpost.api.health import router as health_router
from inkpost.api.posts import router as posts_router
from inkpost.api.users import router as users_router
from inkpost.auth.dependencies import get_current_user

# All protected routers require authentication
_auth = [Depends(get_current_user)]

api_router = APIRouter(prefix="/api")

# Open routes (no auth required)
api_router.include_router(health_router, tags=["health"])
api_router.include_router(auth_router, tags=["auth"])

# Protected routes (valid bearer token required)
api_router.include_router(users_router, tags=["users"], dependencies=_auth)
api_router.include_router(posts_router, tags=["posts"], dependencies=_auth)
