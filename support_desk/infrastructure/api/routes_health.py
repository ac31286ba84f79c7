"""Health check endpoint."""

from fastapi import APIRouter, Depends

from support_desk.adapters.zammad.client import ZammadClient
from support_desk.infrastructure.api.dependencies import get_zammad_client

router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check(client: ZammadClient = Depends(get_zammad_client)):
    """Check API and ticketing backend connectivity."""
    backend = await client.health_check()
    return {
        "status": "ok" if backend["status"] == "connected" else "degraded",
        "backend": backend,
        "service": "Support Desk — access control & auto-assignment",
    }
