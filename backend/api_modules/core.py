"""
Core API utilities and basic endpoints.
Contains general-purpose endpoints used to check the service.
"""

from django.conf import settings
from ninja import Schema

from api.content_services import is_store_configured

# ============================================================================
# Schemas
# ============================================================================


class StatusSchema(Schema):
    """Response schema for service status."""
    status: str
    store_configured: bool
    debug: bool

# ============================================================================
# Basic API Endpoints
# ============================================================================


def register_core_endpoints(api):
    """Register core/basic API endpoints."""

    @api.get("/status", response=StatusSchema)
    def status(request):
        """
        Service status.

        ``store_configured`` is false in demo mode: listings come back empty
        and writes answer 503.
        """
        configured = is_store_configured()
        return {
            "status": "ok" if configured else "demo",
            "store_configured": configured,
            "debug": settings.DEBUG,
        }
