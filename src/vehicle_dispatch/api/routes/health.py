"""Health endpoints."""

from __future__ import annotations

from fastapi import APIRouter, status

from ...config import settings

router = APIRouter(tags=["health"])


@router.get("/health", status_code=status.HTTP_200_OK)
def health_root() -> dict:
    """Simple health check endpoint that doesn't require any dependencies."""
    return {"status": "ok"}


@router.get("/health/store", status_code=status.HTTP_200_OK)
def check_store() -> dict:
    """Check that the configured store can serve the zone network."""
    from ...persistence.store import get_dispatch_store
    from ...services.dispatch.service import load_snapshot

    try:
        snapshot = load_snapshot(get_dispatch_store())
        return {
            "backend": settings.store_backend,
            "connected": True,
            "zones_count": len(snapshot.zones),
            "edges_count": len(snapshot.edges),
            "message": f"Store connected. Found {len(snapshot.zones)} zones and {len(snapshot.edges)} edges.",
        }
    except Exception as exc:
        return {
            "backend": settings.store_backend,
            "connected": False,
            "error": str(exc),
            "message": f"Store connection error: {exc}",
        }
