from moodmate.web.routers.auth import router as auth_router
from moodmate.web.routers.journal import router as journal_router
from moodmate.web.routers.mood import router as mood_router
from moodmate.web.routers.profile import router as profile_router

__all__ = [
    "auth_router",
    "journal_router",
    "mood_router",
    "profile_router",
]
