"""
Google Drive client used as the off-site target for admin backups.

The OAuth client configuration lives in the ``DriveConfig`` record: load it
with ``DriveConfig.load()``, change it, ``save()`` it. The client receives the
config object explicitly and writes obtained tokens back to it.

Calls go to Google's REST endpoints through ``requests``; HTTP errors are
raised as ``requests.HTTPError``. Token refresh is not handled here.
"""

import json
import logging
from urllib.parse import urlencode

import requests
from django.conf import settings

from .exceptions import DriveNotAuthorizedError

logger = logging.getLogger(__name__)

AUTH_URL = "https://accounts.google.com/o/oauth2/v2/auth"
TOKEN_URL = "https://oauth2.googleapis.com/token"
FILES_URL = "https://www.googleapis.com/drive/v3/files"
UPLOAD_URL = "https://www.googleapis.com/upload/drive/v3/files"

SCOPES = [
    "https://www.googleapis.com/auth/drive.file",
    "https://www.googleapis.com/auth/drive.appfolder",
]

BACKUP_FOLDER_NAME = "Zaazu_Backups"
FOLDER_MIME_TYPE = "application/vnd.google-apps.folder"


class GoogleDriveClient:

    def __init__(self, config, session=None):
        self.config = config
        self.session = session or requests.Session()
        self.timeout = getattr(settings, 'GOOGLE_DRIVE_TIMEOUT', 30)

    # ------------------------------------------------------------------
    # OAuth
    # ------------------------------------------------------------------

    def generate_auth_url(self) -> str:
        params = {
            "client_id": self.config.client_id,
            "redirect_uri": self.config.redirect_uri,
            "response_type": "code",
            "scope": " ".join(SCOPES),
            "access_type": "offline",
            "prompt": "consent",
        }
        return f"{AUTH_URL}?{urlencode(params)}"

    def exchange_code(self, code: str) -> dict:
        """Trade an authorization code for tokens and store them on the config."""
        response = self.session.post(TOKEN_URL, data={
            "code": code,
            "client_id": self.config.client_id,
            "client_secret": self.config.client_secret,
            "redirect_uri": self.config.redirect_uri,
            "grant_type": "authorization_code",
        }, timeout=self.timeout)
        response.raise_for_status()
        tokens = response.json()

        self.config.access_token = tokens.get("access_token", "")
        if tokens.get("refresh_token"):
            self.config.refresh_token = tokens["refresh_token"]
        self.config.save()
        logger.info("Google Drive authorized")
        return tokens

    # ------------------------------------------------------------------
    # Files
    # ------------------------------------------------------------------

    def _headers(self) -> dict:
        if not self.config.access_token:
            raise DriveNotAuthorizedError()
        return {"Authorization": f"Bearer {self.config.access_token}"}

    def ensure_backup_folder(self) -> str:
        """Id of the backup folder, created on first use and cached on the config."""
        if self.config.folder_id:
            return self.config.folder_id

        response = self.session.get(FILES_URL, headers=self._headers(), params={
            "q": f"name='{BACKUP_FOLDER_NAME}' and mimeType='{FOLDER_MIME_TYPE}' and trashed=false",
            "fields": "files(id, name)",
            "spaces": "drive",
        }, timeout=self.timeout)
        response.raise_for_status()
        files = response.json().get("files", [])

        if files:
            folder_id = files[0]["id"]
        else:
            response = self.session.post(FILES_URL, headers=self._headers(), json={
                "name": BACKUP_FOLDER_NAME,
                "mimeType": FOLDER_MIME_TYPE,
                "parents": ["root"],
            }, params={"fields": "id"}, timeout=self.timeout)
            response.raise_for_status()
            folder_id = response.json()["id"]

        self.config.folder_id = folder_id
        self.config.save()
        return folder_id

    def list_files(self, limit: int = 10) -> list[dict]:
        folder_id = self.ensure_backup_folder()
        response = self.session.get(FILES_URL, headers=self._headers(), params={
            "q": f"'{folder_id}' in parents and trashed=false",
            "orderBy": "createdTime desc",
            "pageSize": limit,
            "fields": "files(id, name, size, createdTime, description)",
        }, timeout=self.timeout)
        response.raise_for_status()
        return response.json().get("files", [])

    def upload_file(self, name: str, content: bytes, mime_type: str = "application/json") -> dict:
        """Upload ``content`` into the backup folder; returns the file metadata."""
        folder_id = self.ensure_backup_folder()

        response = self.session.post(
            UPLOAD_URL,
            headers={**self._headers(), "Content-Type": mime_type},
            params={"uploadType": "media", "fields": "id"},
            data=content,
            timeout=self.timeout,
        )
        response.raise_for_status()
        file_id = response.json()["id"]

        response = self.session.patch(
            f"{FILES_URL}/{file_id}",
            headers=self._headers(),
            params={"addParents": folder_id, "fields": "id, name, size"},
            json={"name": name},
            timeout=self.timeout,
        )
        response.raise_for_status()
        logger.info("Uploaded %s to Google Drive (%s bytes)", name, len(content))
        return response.json()

    def upload_json(self, name: str, payload) -> dict:
        return self.upload_file(name, json.dumps(payload, indent=2, default=str).encode("utf-8"))

    def download_file(self, file_id: str) -> bytes:
        response = self.session.get(f"{FILES_URL}/{file_id}", headers=self._headers(),
                                    params={"alt": "media"}, timeout=self.timeout)
        response.raise_for_status()
        return response.content

    def delete_file(self, file_id: str) -> None:
        response = self.session.delete(f"{FILES_URL}/{file_id}", headers=self._headers(), timeout=self.timeout)
        response.raise_for_status()
        logger.info("Deleted Google Drive file %s", file_id)
