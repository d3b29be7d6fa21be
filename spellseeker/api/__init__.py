from spellseeker.api.health import router as health_router
from spellseeker.api.translate import router as translate_router

__all__ = [
    "health_router",
    "translate_router",
]
