"""
Zaazu Authentication API Module

JWT authentication for the admin panel. Only active staff accounts of the
Django auth system may log in; the app's end users (PlatformUser) never
authenticate here.

Public API Overview:
==================

Base URL: /api/

Endpoints:
- POST /login                    - Staff login with username/password
- GET  /profile                  - Current admin profile
- POST /refresh-token            - Refresh JWT token

Authentication Flow:
==================

1. Login with username/password to receive JWT token
2. Include token in Authorization header: "Bearer {token}"
3. Tokens expire after JWT_EXPIRATION_HOURS (default 8) - use refresh-token

Error Handling:
==============

- 200: Success
- 401: Unauthorized (invalid credentials/token, or not a staff account)

Example Usage:
=============

Login:
curl -X POST /api/login -d "username=admin&password=secret"

Authenticated request:
curl -H "Authorization: Bearer {your-jwt-token}" /api/grids
"""

import logging
from datetime import datetime, timedelta, timezone

import jwt
from django.conf import settings
from django.contrib.auth.models import User
from django.http import HttpRequest
from django.utils import timezone as django_timezone
from ninja import Form, Schema
from ninja.security import HttpBearer

from api.system_logs import ADMIN_ACTIONS, log_admin_action

logger = logging.getLogger(__name__)

# ============================================================================
# JWT Authentication Class
# ============================================================================


def token_expiration() -> timedelta:
    return timedelta(hours=getattr(settings, 'JWT_EXPIRATION_HOURS', 8))


class JWTAuth(HttpBearer):
    """JWT Bearer token authentication for admin endpoints."""

    def authenticate(self, request: HttpRequest, token: str):
        """
        Authenticate a staff user based on JWT token.

        Returns:
            User object if authentication successful, None otherwise
        """
        try:
            payload = jwt.decode(token, settings.SECRET_KEY, algorithms=["HS256"])
        except jwt.ExpiredSignatureError:
            logger.info("Rejected expired JWT token")
            return None
        except jwt.InvalidTokenError as e:
            logger.info("Rejected invalid JWT token: %s", e)
            return None

        user_id = payload.get("user_id")
        if not user_id:
            logger.info("JWT payload without user_id")
            return None

        user = User.objects.filter(id=user_id).first()
        if user is None:
            logger.info("User with id %s does not exist", user_id)
            return None
        if not (user.is_active and user.is_staff):
            logger.info("User %s is not an active staff member", user.username)
            return None
        return user

# ============================================================================
# Response Schemas
# ============================================================================


class LoginSchema(Schema):
    """Response schema for successful login."""
    token: str
    user_id: int
    username: str
    email: str
    is_superuser: bool


class ErrorSchema(Schema):
    """Standard error response schema."""
    message: str

# ============================================================================
# Utility Functions
# ============================================================================


def generate_jwt_token(user: User) -> str:
    now = datetime.now(timezone.utc)
    payload = {
        "user_id": user.id,
        "username": user.username,
        "exp": now + token_expiration(),
        "iat": now,
    }
    return jwt.encode(payload, settings.SECRET_KEY, algorithm="HS256")


def admin_identity(user: User) -> str:
    """Name recorded as ``admin`` in the audit log."""
    return user.email or user.username


def create_user_response(user: User, token: str = None) -> dict:
    return {
        "token": token or "current_session",
        "user_id": user.id,
        "username": user.username,
        "email": user.email,
        "is_superuser": user.is_superuser,
    }

# ============================================================================
# API Endpoints
# ============================================================================


def register_auth_endpoints(api):
    """Register all authentication endpoints with the API router."""

    @api.post("/login", response={200: LoginSchema, 401: ErrorSchema})
    def login(request, username: Form[str], password: Form[str]):
        """
        Admin login endpoint.

        Returns:
            200: Login successful with token and user info
            401: Authentication failed
        """
        user = User.objects.filter(username=username).first()
        if not user or not user.check_password(password):
            logger.info("Failed login for %s", username)
            return 401, {"message": "Credenciais inválidas"}

        if not (user.is_active and user.is_staff):
            logger.info("Login refused for %s: not an active staff member", username)
            return 401, {"message": "Acesso restrito a administradores"}

        user.last_login = django_timezone.now()
        user.save(update_fields=['last_login'])

        token = generate_jwt_token(user)
        log_admin_action(ADMIN_ACTIONS["LOGIN"], f"Login de {user.username}", admin_identity(user))
        logger.info("Login successful for %s", username)

        return 200, create_user_response(user, token)

    @api.get("/profile", auth=JWTAuth(), response={200: LoginSchema, 401: ErrorSchema})
    def get_profile(request):
        return 200, create_user_response(request.auth)

    @api.post("/refresh-token", auth=JWTAuth(), response={200: dict, 401: ErrorSchema})
    def refresh_token(request):
        """
        Refresh JWT token.

        Returns:
            200: New token generated
            401: Authentication failed
        """
        return 200, {
            "token": generate_jwt_token(request.auth),
            "message": "Token renovado com sucesso"
        }
