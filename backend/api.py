"""
Zaazu Admin API - Public API Documentation

This is the main API configuration file for the Zaazu admin panel, the
back office of the Zaazu kids' app.

🧸 OVERVIEW
============

Zaazu shows children (2 to 9 years old) curated videos, series, games and
activities. The admin panel decides what the app's home screen shows and
manages the content behind it:

- Home grids: one active grid per content tag (entretenimento, atividade,
  educativo), each an ordered list of rows of content items
- Content catalog: videos (grouped into series), games, activities
- App users, avatars, achievements and daily time limits
- Audit logs of admin and app actions
- Google Drive backups

The API is built with Django Ninja for automatic OpenAPI documentation and
type-safe request/response handling.

📚 API STRUCTURE
================

🔐 AUTHENTICATION (/api/login, /api/profile, /api/refresh-token)
   - JWT-based authentication for staff accounts

🧱 GRIDS (/api/grids/, /api/rows/)
   - Grid CRUD and activation (one active grid per tag)
   - Rows: create, edit, delete, reorder
   - Row items: add (type/duplicate/capacity checked), remove, reorder, shuffle
   - Report of items pointing to deleted content

🎬 CONTENT (/api/videos/, /api/games/, /api/activities/, ...)
   - CRUD for every collection
   - Series computed from videos
   - Thumbnail, avatar SVG and achievement audio uploads

📋 LOGS (/api/logs/)
   - Public app event reporting
   - Merged admin/app audit trail

☁️ GOOGLE DRIVE (/api/drive/)
   - OAuth setup and backup file management

🛠 CORE (/api/status)
   - Connectivity and demo mode check

🔑 AUTHENTICATION
=================

1. POST /api/login with username/password (form data) of a staff account
2. Send the token in the Authorization header: `Bearer YOUR_JWT_TOKEN`
3. POST /api/refresh-token before it expires

📊 RESPONSE FORMAT
==================

**Error Response (400/401/404/503):**
```json
{
  "message": "Detailed error description"
}
```

Messages are in Portuguese (pt-BR) and meant to be shown to the admin.

🧪 DEMO MODE
============

Without content store credentials the API still starts: listings return
empty lists and writes answer 503. GET /api/status reports which mode is on.

For detailed endpoint documentation, visit the interactive docs at `/api/docs`
when the server is running.
"""

from ninja import NinjaAPI

from .api_modules.auth import register_auth_endpoints
from .api_modules.content import register_content_endpoints
from .api_modules.core import register_core_endpoints
from .api_modules.drive import register_drive_endpoints
from .api_modules.grids import register_grid_endpoints
from .api_modules.logs import register_log_endpoints

# ============================================================================
# API Configuration
# ============================================================================

api = NinjaAPI(
    title="Zaazu Admin API",
    description="API do painel administrativo Zaazu: grades, conteúdo, logs e backups",
    version="1.0.0"
)

# ============================================================================
# Register API Modules
# ============================================================================

register_core_endpoints(api)            # /status
register_auth_endpoints(api)            # Login and token endpoints
register_grid_endpoints(api)            # Grids, rows and row items
register_content_endpoints(api)         # Videos, games, activities, users, avatars, ...
register_log_endpoints(api)             # Audit trail
register_drive_endpoints(api)           # Google Drive backups
