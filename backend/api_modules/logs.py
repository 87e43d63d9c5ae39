"""
Zaazu System Logs API Module

Audit trail of admin actions and events reported by the kids' app.

Public API Overview:
==================

Base URL: /api/

Public Endpoints (No Authentication Required):
- POST /logs/app                 - Report an app event (used by the mobile app)

Protected Endpoints (JWT Token Required):
- GET    /logs?limit=100         - Admin and app logs merged, newest first
- DELETE /logs?older_than_days=30 - Remove old entries

Log Entry Structure:
===================

- id: "admin-<n>" or "app-<n>"
- type: "Admin" or "App"
- action, details, user, level (info/warning/error), metadata
- timestamp: ISO 8601

Example Usage:
=============

curl -X POST /api/logs/app \
  -H "Content-Type: application/json" \
  -d '{"action":"video_watched","details":"Episódio 3","user":"familia@exemplo.com"}'
"""

from datetime import datetime
from typing import Optional

from ninja import Schema

from api.models import LOG_LEVELS
from api.system_logs import ADMIN_ACTIONS, clear_logs, load_system_logs, log_admin_action, log_app_action
from .auth import ErrorSchema, JWTAuth, admin_identity

LOG_LEVEL_VALUES = [value for value, _ in LOG_LEVELS]

# ============================================================================
# Schemas
# ============================================================================


class LogEntrySchema(Schema):
    id: str
    type: str
    action: str
    details: str
    user: str
    timestamp: datetime
    level: str
    metadata: dict = {}


class AppLogCreateSchema(Schema):
    """Request schema for app events."""
    action: str
    details: str
    user: str
    user_id: Optional[str] = None
    session_id: Optional[str] = None
    device_info: Optional[str] = None
    level: str = "info"
    metadata: dict = {}

# ============================================================================
# API Endpoints
# ============================================================================


def register_log_endpoints(api):
    """Register system log endpoints with the API router."""

    @api.post("/logs/app", response={201: dict, 400: ErrorSchema})
    def create_app_log(request, data: AppLogCreateSchema):
        """
        Record an event from the kids' app.

        Public endpoint. ``action``, ``details`` and ``user`` are required.
        The request never fails because of the log store: when the entry
        cannot be written the response says so with ``stored: false``.
        """
        if not (data.action.strip() and data.details.strip() and data.user.strip()):
            return 400, {"message": "Campos obrigatórios: action, details, user"}
        if data.level not in LOG_LEVEL_VALUES:
            return 400, {"message": f"Nível inválido: {data.level}"}

        entry = log_app_action(
            data.action, data.details, data.user,
            user_id=data.user_id,
            session_id=data.session_id,
            device_info=data.device_info,
            level=data.level,
            metadata=data.metadata,
        )
        return 201, {"stored": entry is not None}

    @api.get("/logs", auth=JWTAuth(), response={200: list[LogEntrySchema], 400: ErrorSchema, 401: ErrorSchema})
    def list_logs(request, limit: int = 100):
        """``limit`` caps each source (admin, app) and must be at least 1."""
        try:
            return 200, load_system_logs(limit)
        except ValueError as e:
            return 400, {"message": str(e)}

    @api.delete("/logs", auth=JWTAuth(), response={200: dict, 401: ErrorSchema})
    def delete_old_logs(request, older_than_days: int = 30):
        deleted = clear_logs(older_than_days)
        log_admin_action(ADMIN_ACTIONS["LOGS_CLEARED"],
                         f"{deleted} registros com mais de {older_than_days} dias removidos",
                         admin_identity(request.auth), metadata={"deleted": deleted})
        return 200, {"deleted": deleted}
