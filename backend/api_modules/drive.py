"""
Zaazu Google Drive API Module

Server-side proxy to Google Drive, used to keep off-site copies of admin
backups. The OAuth client and the obtained tokens are stored in the
``DriveConfig`` record; the browser never talks to Google directly except
for the consent screen.

Public API Overview:
==================

Base URL: /api/

All endpoints require a staff JWT token.

- GET    /drive/config           - Configuration status (secrets never returned)
- PUT    /drive/config           - Save OAuth client id/secret/redirect URI
- GET    /drive/auth-url         - Google consent screen URL
- POST   /drive/exchange         - Exchange the authorization code for tokens
- GET    /drive/files            - Files in the backup folder, newest first
- POST   /drive/files            - Upload a file (multipart, field "file")
- GET    /drive/files/{file_id}  - Download file content
- DELETE /drive/files/{file_id}  - Delete file

Setup Flow:
==========

1. PUT /drive/config with the OAuth client credentials
2. GET /drive/auth-url and open the URL in the browser
3. Google redirects back with ?code=...; POST it to /drive/exchange

Error Handling:
==============

- 400: Drive not configured or not authorized yet
- 401: Authentication required
- 502: Google answered with an error
"""

import logging
from typing import Optional

import requests
from django.http import HttpResponse
from ninja import File, Schema
from ninja.files import UploadedFile

from api.exceptions import DriveNotAuthorizedError
from api.google_drive import GoogleDriveClient
from api.models import DriveConfig
from api.system_logs import ADMIN_ACTIONS, log_admin_action
from .auth import ErrorSchema, JWTAuth, admin_identity

logger = logging.getLogger(__name__)

# ============================================================================
# Schemas
# ============================================================================


class DriveConfigSchema(Schema):
    client_id: str
    redirect_uri: str
    folder_id: str = ""
    is_configured: bool
    is_authenticated: bool


class DriveConfigUpdateSchema(Schema):
    client_id: Optional[str] = None
    client_secret: Optional[str] = None
    redirect_uri: Optional[str] = None


class DriveCodeSchema(Schema):
    code: str


class DriveFileSchema(Schema):
    id: str
    name: str = ""
    size: Optional[str] = None
    createdTime: Optional[str] = None
    description: Optional[str] = None

# ============================================================================
# Utility Functions
# ============================================================================


def create_config_response(config: DriveConfig) -> dict:
    return {
        "client_id": config.client_id,
        "redirect_uri": config.redirect_uri,
        "folder_id": config.folder_id,
        "is_configured": config.is_configured,
        "is_authenticated": config.is_authenticated,
    }


def google_error_response(error: requests.RequestException):
    logger.error("Google Drive request failed: %s", error)
    return 502, {"message": f"Erro ao comunicar com o Google Drive: {error}"}

# ============================================================================
# API Endpoints
# ============================================================================


def register_drive_endpoints(api):
    """Register Google Drive endpoints with the API router."""

    @api.get("/drive/config", auth=JWTAuth(), response={200: DriveConfigSchema, 401: ErrorSchema})
    def get_drive_config(request):
        return 200, create_config_response(DriveConfig.load())

    @api.put("/drive/config", auth=JWTAuth(), response={200: DriveConfigSchema, 401: ErrorSchema})
    def update_drive_config(request, data: DriveConfigUpdateSchema):
        """
        Save the OAuth client configuration.

        Changing the client discards stored tokens and the cached folder id.
        """
        config = DriveConfig.load()
        changes = data.model_dump(exclude_unset=True)
        client_changed = any(
            key in changes and changes[key] != getattr(config, key)
            for key in ("client_id", "client_secret")
        )
        for key, value in changes.items():
            setattr(config, key, value or "")
        if client_changed:
            config.access_token = ""
            config.refresh_token = ""
            config.folder_id = ""
        config.save()

        log_admin_action(ADMIN_ACTIONS["DRIVE_CONFIGURED"], "Configuração do Google Drive atualizada",
                         admin_identity(request.auth))
        return 200, create_config_response(config)

    @api.get("/drive/auth-url", auth=JWTAuth(), response={200: dict, 400: ErrorSchema, 401: ErrorSchema})
    def get_drive_auth_url(request):
        config = DriveConfig.load()
        if not config.is_configured:
            return 400, {"message": "Google Drive não configurado"}
        return 200, {"url": GoogleDriveClient(config).generate_auth_url()}

    @api.post("/drive/exchange", auth=JWTAuth(),
              response={200: DriveConfigSchema, 400: ErrorSchema, 401: ErrorSchema, 502: ErrorSchema})
    def exchange_drive_code(request, data: DriveCodeSchema):
        config = DriveConfig.load()
        if not config.is_configured:
            return 400, {"message": "Google Drive não configurado"}
        try:
            GoogleDriveClient(config).exchange_code(data.code)
        except requests.RequestException as e:
            return google_error_response(e)

        log_admin_action(ADMIN_ACTIONS["DRIVE_CONFIGURED"], "Google Drive autorizado", admin_identity(request.auth))
        return 200, create_config_response(config)

    @api.get("/drive/files", auth=JWTAuth(),
             response={200: list[DriveFileSchema], 400: ErrorSchema, 401: ErrorSchema, 502: ErrorSchema})
    def list_drive_files(request, limit: int = 10):
        try:
            return 200, GoogleDriveClient(DriveConfig.load()).list_files(limit)
        except DriveNotAuthorizedError as e:
            return 400, {"message": str(e)}
        except requests.RequestException as e:
            return google_error_response(e)

    @api.post("/drive/files", auth=JWTAuth(),
              response={201: DriveFileSchema, 400: ErrorSchema, 401: ErrorSchema, 502: ErrorSchema})
    def upload_drive_file(request, file: UploadedFile = File(...)):
        try:
            uploaded = GoogleDriveClient(DriveConfig.load()).upload_file(
                file.name, file.read(), file.content_type or "application/octet-stream"
            )
        except DriveNotAuthorizedError as e:
            return 400, {"message": str(e)}
        except requests.RequestException as e:
            return google_error_response(e)
        return 201, uploaded

    @api.get("/drive/files/{file_id}", auth=JWTAuth(), response={400: ErrorSchema, 401: ErrorSchema, 502: ErrorSchema})
    def download_drive_file(request, file_id: str):
        try:
            content = GoogleDriveClient(DriveConfig.load()).download_file(file_id)
        except DriveNotAuthorizedError as e:
            return 400, {"message": str(e)}
        except requests.RequestException as e:
            return google_error_response(e)

        response = HttpResponse(content, content_type="application/octet-stream")
        response["Content-Disposition"] = f'attachment; filename="{file_id}"'
        return response

    @api.delete("/drive/files/{file_id}", auth=JWTAuth(),
                response={200: dict, 400: ErrorSchema, 401: ErrorSchema, 502: ErrorSchema})
    def delete_drive_file(request, file_id: str):
        try:
            GoogleDriveClient(DriveConfig.load()).delete_file(file_id)
        except DriveNotAuthorizedError as e:
            return 400, {"message": str(e)}
        except requests.RequestException as e:
            return google_error_response(e)
        return 200, {"message": "Arquivo excluído"}
