from .donations import router as donations_router
from .programs import router as programs_router
from .public import router as public_router
from .webhooks import router as webhooks_router

__all__ = [
     "donations_router",
     "programs_router",
     "public_router",
     "webhooks_router",
]
