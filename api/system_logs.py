"""
Audit trail for admin and app actions.

Writing a log entry must never break the action being logged, so
``log_admin_action`` / ``log_app_action`` swallow store errors after
reporting them through the module logger.
"""

import logging
from datetime import timedelta

from django.utils import timezone

from .content_services import is_store_configured
from .models import AdminActionLog, AppActionLog

logger = logging.getLogger(__name__)

# Action names used by the admin endpoints.
ADMIN_ACTIONS = {
    "CONTENT_CREATED": "content_created",
    "CONTENT_UPDATED": "content_updated",
    "CONTENT_DELETED": "content_deleted",
    "GRID_CREATED": "grid_created",
    "GRID_UPDATED": "grid_updated",
    "GRID_DELETED": "grid_deleted",
    "GRID_ACTIVATED": "grid_activated",
    "ROW_UPDATED": "grid_row_updated",
    "LOGIN": "admin_login",
    "LOGS_CLEARED": "logs_cleared",
    "DRIVE_CONFIGURED": "google_drive_configured",
}


def log_admin_action(action: str, details: str, admin: str, level: str = "info", metadata: dict = None):
    if not is_store_configured():
        logger.debug("Skipping admin log %s (store not configured)", action)
        return None
    try:
        return AdminActionLog.objects.create(
            action=action,
            details=details,
            admin=admin or "admin@zaazu.app",
            level=level or "info",
            metadata=metadata or {},
        )
    except Exception:
        logger.exception("Error writing admin log %s", action)
        return None


def log_app_action(action: str, details: str, user: str, user_id: str = None, session_id: str = None,
                   device_info: str = None, level: str = "info", metadata: dict = None):
    if not is_store_configured():
        logger.debug("Skipping app log %s (store not configured)", action)
        return None
    try:
        return AppActionLog.objects.create(
            action=action,
            details=details,
            user=user,
            user_id=user_id,
            session_id=session_id,
            device_info=device_info,
            level=level or "info",
            metadata=metadata or {},
        )
    except Exception:
        logger.exception("Error writing app log %s", action)
        return None


def _entry(log, log_type: str, user: str) -> dict:
    return {
        "id": f"{log_type.lower()}-{log.pk}",
        "type": log_type,
        "action": log.action or "N/A",
        "details": log.details or "N/A",
        "user": user or "N/A",
        "timestamp": log.timestamp,
        "level": log.level or "info",
        "metadata": log.metadata or {},
    }


def load_system_logs(limit: int = 100) -> list[dict]:
    """
    Admin and app logs merged, newest first.

    Each source contributes at most ``limit`` entries. Store errors propagate.

    Raises:
        ValueError: ``limit`` below 1
    """
    if limit < 1:
        raise ValueError("O limite deve ser maior que zero")
    if not is_store_configured():
        return []

    admin_logs = [
        _entry(log, "Admin", log.admin)
        for log in AdminActionLog.objects.order_by('-timestamp', '-id')[:limit]
    ]
    app_logs = [
        _entry(log, "App", log.user or log.user_id)
        for log in AppActionLog.objects.order_by('-timestamp', '-id')[:limit]
    ]
    return sorted(admin_logs + app_logs, key=lambda entry: entry["timestamp"], reverse=True)


def clear_logs(older_than_days: int = 30) -> int:
    """Delete log entries older than the given number of days. Returns how many went."""
    cutoff = timezone.now() - timedelta(days=older_than_days)
    admin_deleted, _ = AdminActionLog.objects.filter(timestamp__lt=cutoff).delete()
    app_deleted, _ = AppActionLog.objects.filter(timestamp__lt=cutoff).delete()
    logger.info("Cleared %s admin and %s app log entries older than %s days",
                admin_deleted, app_deleted, older_than_days)
    return admin_deleted + app_deleted
