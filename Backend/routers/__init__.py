from routers.auth import router as auth_router
from routers.users import router as users_router
from routers.medications import router as medications_router
from routers.home import router as home_router

__all__ = [
    "auth_router",
    "users_router",
    "medications_router",
    "home_router",
]
