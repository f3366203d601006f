# API routers
from .posts import router as posts_router
from .comments import router as comments_router
from .complaints import router as complaints_router
from .ai import router as ai_router
from .users import router as users_router

__all__ = [
    "posts_router",
    "comments_router",
    "complaints_router",
    "ai_router",
    "users_router",
]
