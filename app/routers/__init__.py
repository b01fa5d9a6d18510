# Routers package
from . import auth_router
from . import users_router
from . import upload_router

__all__ = [
    "auth_router",
    "users_router",
    "upload_router",
]
