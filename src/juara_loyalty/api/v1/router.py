"""Primary API router definition."""

from fastapi import APIRouter

from . import auth, chat, dashboard, inventory, members, navigation, redemptions, settings

api_router = APIRouter()

api_router.include_router(auth.router)
api_router.include_router(members.router)
api_router.include_router(redemptions.router)
api_router.include_router(inventory.router)
api_router.include_router(dashboard.router)
api_router.include_router(settings.router)
api_router.include_router(chat.router)
api_router.include_router(navigation.router)


@api_router.get("/health", tags=["health"])
async def healthcheck() -> dict[str, str]:
    """Basic health check endpoint."""
    return {"status": "ok"}
