from moviefinder.routers.commands import router as commands_router
from moviefinder.routers.callbacks import router as callbacks_router
from moviefinder.routers.messages import router as messages_router

__all__ = ["commands_router", "callbacks_router", "messages_router"]
