"""
Zaazu Grids API Module

Curation of the app's home screen: grids (one active per content tag), their
ordered rows, and the content items embedded in each row.

Public API Overview:
==================

Base URL: /api/

All endpoints require a staff JWT token.

Grids:
- GET    /grids                          - List grids (newest first) with rows
- GET    /grids/active?tag=educativo     - Active grid (optionally for one tag)
- POST   /grids/defaults                 - Seed the default grids when none exist
- GET    /grids/{id}                     - Grid with rows
- POST   /grids                          - Create grid
- PUT    /grids/{id}                     - Update grid
- POST   /grids/{id}/activate            - Activate grid (deactivates same-tag grids)
- POST   /grids/{id}/deactivate          - Deactivate grid
- DELETE /grids/{id}                     - Delete grid and all its rows
- GET    /grids/{id}/dangling            - Items pointing to content that no longer exists

Rows:
- GET    /grids/{id}/rows                - Rows in display order
- POST   /grids/{id}/rows                - Create row
- PUT    /grids/{id}/rows/reorder        - Persist a new row order
- PUT    /rows/{id}                      - Update row
- DELETE /rows/{id}                      - Delete row

Row items:
- POST   /rows/{id}/items                - Add content to a row
- DELETE /rows/{id}/items/{item_id}      - Remove item
- PUT    /rows/{id}/items/reorder        - Persist a new item order
- POST   /rows/{id}/items/randomize      - Shuffle items

Row Rules:
=========

- A row with a ``content_type`` only accepts items of that type; rows without
  one are mixed.
- The same content cannot appear twice in a row.
- A row never holds more than ``max_items`` items (at least 1).
- Item ``order`` is 0-based and always matches the item's position.
- Content is identified by type and id together: video 1 and game 1 are
  different items.

Rejected additions answer 400 with the reason, e.g.:
{"message": "Este conteúdo já foi adicionado à lista."}

Error Handling:
==============

- 200/201: Success
- 400: Validation errors (unknown field, invalid tag/type, rejected item)
- 401: Authentication required
- 404: Grid, row or item not found
- 503: Content store not configured (demo mode); listings come back empty
"""

from typing import Optional

from ninja import Schema

from api import grid_service
from api.content_catalog import ContentCatalog
from api.content_services import require_store
from api.exceptions import StoreNotConfiguredError
from api.models import Grid, GridRow
from api.system_logs import ADMIN_ACTIONS, log_admin_action
from .auth import ErrorSchema, JWTAuth, admin_identity

# ============================================================================
# Schemas
# ============================================================================


class GridItemSchema(Schema):
    """Content reference embedded in a row."""
    id: str
    content_id: str
    content_type: str
    order: int
    is_series: bool = False


class GridRowSchema(Schema):
    """Response schema for grid rows."""
    id: int
    grid_id: int
    title: str
    description: str = ""
    content_type: Optional[str] = None
    items: list[GridItemSchema] = []
    is_active: bool
    order: int
    max_items: int
    created_at: str
    updated_at: str


class GridSchema(Schema):
    """Response schema for grids with their rows."""
    id: int
    name: str
    description: str = ""
    tag: str
    is_active: bool
    rows: list[GridRowSchema] = []
    created_at: str
    updated_at: str


class GridCreateSchema(Schema):
    name: str
    description: str = ""
    tag: str
    is_active: bool = False


class GridUpdateSchema(Schema):
    name: Optional[str] = None
    description: Optional[str] = None
    tag: Optional[str] = None
    is_active: Optional[bool] = None


class GridRowCreateSchema(Schema):
    title: str
    description: str = ""
    content_type: Optional[str] = None
    max_items: int = 10
    is_active: bool = True
    order: Optional[int] = None


class GridRowUpdateSchema(Schema):
    title: Optional[str] = None
    description: Optional[str] = None
    content_type: Optional[str] = None
    max_items: Optional[int] = None
    is_active: Optional[bool] = None


class RowReorderSchema(Schema):
    row_ids: list[int]


class ItemAddSchema(Schema):
    content_id: str
    content_type: str


class ItemReorderSchema(Schema):
    item_ids: list[str]


class ItemsResponseSchema(Schema):
    items: list[GridItemSchema]
    message: str = ""


class DanglingItemSchema(Schema):
    row_id: int
    row_title: str
    item: GridItemSchema

# ============================================================================
# Utility Functions
# ============================================================================


def create_row_response(row: GridRow) -> dict:
    return {
        "id": row.id,
        "grid_id": row.grid_id,
        "title": row.title,
        "description": row.description or "",
        "content_type": row.content_type,
        "items": row.items or [],
        "is_active": row.is_active,
        "order": row.order,
        "max_items": row.max_items,
        "created_at": row.created_at.isoformat(),
        "updated_at": row.updated_at.isoformat(),
    }


def create_grid_response(grid: Grid) -> dict:
    """
    Create standardized grid response dictionary.

    Rows come from the prefetched ``rows`` relation, already in display order.
    """
    return {
        "id": grid.id,
        "name": grid.name,
        "description": grid.description or "",
        "tag": grid.tag,
        "is_active": grid.is_active,
        "rows": [create_row_response(row) for row in grid.rows.all()],
        "created_at": grid.created_at.isoformat(),
        "updated_at": grid.updated_at.isoformat(),
    }


def provided_fields(data: Schema) -> dict:
    """Only the fields the client actually sent."""
    return data.model_dump(exclude_unset=True)

# ============================================================================
# API Endpoints
# ============================================================================


def register_grid_endpoints(api):
    """Register all grid, row and row item endpoints with the API router."""

    # ------------------------------------------------------------------
    # Grids
    # ------------------------------------------------------------------

    @api.get("/grids", auth=JWTAuth(), response={200: list[GridSchema], 401: ErrorSchema})
    def list_grids(request):
        return 200, [create_grid_response(grid) for grid in grid_service.get_grids()]

    @api.get("/grids/active", auth=JWTAuth(), response={200: GridSchema, 401: ErrorSchema, 404: ErrorSchema})
    def get_active_grid(request, tag: str = None):
        """
        Active grid.

        Without ``tag`` returns the most recently updated active grid of any
        tag; with ``tag`` the active grid of that category.
        """
        grid = grid_service.get_active_grid(tag)
        if grid is None:
            return 404, {"message": "Nenhuma grade ativa encontrada"}
        return 200, create_grid_response(grid)

    @api.post("/grids/defaults", auth=JWTAuth(),
              response={200: list[GridSchema], 401: ErrorSchema, 503: ErrorSchema})
    def create_default_grids(request):
        """
        Seed the three default grids.

        Returns the grids created; an empty list when grids already exist.
        """
        try:
            created_ids = grid_service.create_default_grids()
        except StoreNotConfiguredError as e:
            return 503, {"message": str(e)}

        if created_ids:
            log_admin_action(
                ADMIN_ACTIONS["GRID_CREATED"],
                f"Grades padrão criadas ({len(created_ids)})",
                admin_identity(request.auth),
            )
        return 200, [create_grid_response(grid_service.get_grid(grid_id)) for grid_id in created_ids]

    @api.get("/grids/{grid_id}", auth=JWTAuth(), response={200: GridSchema, 401: ErrorSchema, 404: ErrorSchema})
    def get_grid(request, grid_id: int):
        grid = grid_service.get_grid(grid_id)
        if grid is None:
            return 404, {"message": "Grade não encontrada"}
        return 200, create_grid_response(grid)

    @api.post("/grids", auth=JWTAuth(),
              response={201: GridSchema, 400: ErrorSchema, 401: ErrorSchema, 503: ErrorSchema})
    def create_grid(request, data: GridCreateSchema):
        """
        Create new grid (without rows).

        Creating an active grid deactivates the other active grid of the
        same tag.
        """
        try:
            grid_id = grid_service.create_grid(data.model_dump())
        except StoreNotConfiguredError as e:
            return 503, {"message": str(e)}
        except ValueError as e:
            return 400, {"message": str(e)}

        grid = grid_service.get_grid(grid_id)
        log_admin_action(ADMIN_ACTIONS["GRID_CREATED"], f"Grade criada: {grid.name}",
                         admin_identity(request.auth), metadata={"grid_id": grid_id, "tag": grid.tag})
        return 201, create_grid_response(grid)

    @api.put("/grids/{grid_id}", auth=JWTAuth(),
             response={200: GridSchema, 400: ErrorSchema, 401: ErrorSchema, 404: ErrorSchema, 503: ErrorSchema})
    def update_grid(request, grid_id: int, data: GridUpdateSchema):
        try:
            grid_service.update_grid(grid_id, provided_fields(data))
        except StoreNotConfiguredError as e:
            return 503, {"message": str(e)}
        except Grid.DoesNotExist:
            return 404, {"message": "Grade não encontrada"}
        except ValueError as e:
            return 400, {"message": str(e)}

        grid = grid_service.get_grid(grid_id)
        log_admin_action(ADMIN_ACTIONS["GRID_UPDATED"], f"Grade atualizada: {grid.name}",
                         admin_identity(request.auth), metadata={"grid_id": grid_id})
        return 200, create_grid_response(grid)

    @api.post("/grids/{grid_id}/activate", auth=JWTAuth(),
              response={200: GridSchema, 401: ErrorSchema, 404: ErrorSchema, 503: ErrorSchema})
    def activate_grid(request, grid_id: int):
        """Activate the grid; any other active grid with the same tag is deactivated."""
        try:
            grid_service.set_grid_active(grid_id, True)
        except StoreNotConfiguredError as e:
            return 503, {"message": str(e)}
        except Grid.DoesNotExist:
            return 404, {"message": "Grade não encontrada"}

        grid = grid_service.get_grid(grid_id)
        log_admin_action(ADMIN_ACTIONS["GRID_ACTIVATED"], f"Grade ativada: {grid.name}",
                         admin_identity(request.auth), metadata={"grid_id": grid_id, "tag": grid.tag})
        return 200, create_grid_response(grid)

    @api.post("/grids/{grid_id}/deactivate", auth=JWTAuth(),
              response={200: GridSchema, 401: ErrorSchema, 404: ErrorSchema, 503: ErrorSchema})
    def deactivate_grid(request, grid_id: int):
        try:
            grid_service.set_grid_active(grid_id, False)
        except StoreNotConfiguredError as e:
            return 503, {"message": str(e)}
        except Grid.DoesNotExist:
            return 404, {"message": "Grade não encontrada"}

        grid = grid_service.get_grid(grid_id)
        log_admin_action(ADMIN_ACTIONS["GRID_UPDATED"], f"Grade desativada: {grid.name}",
                         admin_identity(request.auth), metadata={"grid_id": grid_id})
        return 200, create_grid_response(grid)

    @api.delete("/grids/{grid_id}", auth=JWTAuth(),
                response={200: dict, 401: ErrorSchema, 404: ErrorSchema, 503: ErrorSchema})
    def delete_grid(request, grid_id: int):
        """Delete the grid together with all its rows."""
        try:
            deleted = grid_service.delete_grid(grid_id)
        except StoreNotConfiguredError as e:
            return 503, {"message": str(e)}
        if not deleted:
            return 404, {"message": "Grade não encontrada"}

        log_admin_action(ADMIN_ACTIONS["GRID_DELETED"], f"Grade {grid_id} excluída",
                         admin_identity(request.auth), level="warning", metadata={"grid_id": grid_id})
        return 200, {"message": "Grade excluída com sucesso"}

    @api.get("/grids/{grid_id}/dangling", auth=JWTAuth(),
             response={200: list[DanglingItemSchema], 401: ErrorSchema, 404: ErrorSchema})
    def get_dangling_items(request, grid_id: int):
        """
        Items whose referenced content was deleted.

        Such items stay stored (references are not cascaded); clients hide
        them and this report lets an admin clean them up.
        """
        if grid_service.get_grid(grid_id) is None:
            return 404, {"message": "Grade não encontrada"}
        return 200, grid_service.find_dangling_items(grid_id, ContentCatalog.load())

    # ------------------------------------------------------------------
    # Rows
    # ------------------------------------------------------------------

    @api.get("/grids/{grid_id}/rows", auth=JWTAuth(),
             response={200: list[GridRowSchema], 401: ErrorSchema, 404: ErrorSchema})
    def list_grid_rows(request, grid_id: int):
        if grid_service.get_grid(grid_id) is None:
            return 404, {"message": "Grade não encontrada"}
        return 200, [create_row_response(row) for row in grid_service.get_grid_rows(grid_id)]

    @api.post("/grids/{grid_id}/rows", auth=JWTAuth(),
              response={201: GridRowSchema, 400: ErrorSchema, 401: ErrorSchema, 404: ErrorSchema,
                        503: ErrorSchema})
    def create_grid_row(request, grid_id: int, data: GridRowCreateSchema):
        """
        Create a row at the end of the grid (or at ``order`` when given).

        Leave ``content_type`` empty for a mixed row. ``max_items`` must be
        at least 1.
        """
        if not data.title.strip():
            return 400, {"message": "Informe um título para a linha."}
        try:
            row_id = grid_service.create_grid_row(grid_id, {**data.model_dump(), "items": []})
        except StoreNotConfiguredError as e:
            return 503, {"message": str(e)}
        except Grid.DoesNotExist:
            return 404, {"message": "Grade não encontrada"}
        except ValueError as e:
            return 400, {"message": str(e)}

        row = GridRow.objects.get(pk=row_id)
        log_admin_action(ADMIN_ACTIONS["ROW_UPDATED"], f"Linha criada: {row.title}",
                         admin_identity(request.auth), metadata={"grid_id": grid_id, "row_id": row_id})
        return 201, create_row_response(row)

    @api.put("/grids/{grid_id}/rows/reorder", auth=JWTAuth(),
             response={200: list[GridRowSchema], 400: ErrorSchema, 401: ErrorSchema, 404: ErrorSchema,
                       503: ErrorSchema})
    def reorder_grid_rows(request, grid_id: int, data: RowReorderSchema):
        """Persist a new row order; ``row_ids`` must list every row of the grid."""
        try:
            require_store()
        except StoreNotConfiguredError as e:
            return 503, {"message": str(e)}
        if grid_service.get_grid(grid_id) is None:
            return 404, {"message": "Grade não encontrada"}

        current_ids = {row.pk for row in grid_service.get_grid_rows(grid_id)}
        if set(data.row_ids) != current_ids or len(data.row_ids) != len(current_ids):
            return 400, {"message": "A nova ordem deve conter todas as linhas da grade"}

        grid_service.reorder_grid_rows(grid_id, data.row_ids)
        return 200, [create_row_response(row) for row in grid_service.get_grid_rows(grid_id)]

    @api.put("/rows/{row_id}", auth=JWTAuth(),
             response={200: GridRowSchema, 400: ErrorSchema, 401: ErrorSchema, 404: ErrorSchema, 503: ErrorSchema})
    def update_grid_row(request, row_id: int, data: GridRowUpdateSchema):
        """
        Update a row.

        Changing ``content_type`` answers 400 while the row holds items of
        another type.
        """
        try:
            row = grid_service.update_grid_row(row_id, provided_fields(data))
        except StoreNotConfiguredError as e:
            return 503, {"message": str(e)}
        except GridRow.DoesNotExist:
            return 404, {"message": "Linha não encontrada"}
        except ValueError as e:
            return 400, {"message": str(e)}

        log_admin_action(ADMIN_ACTIONS["ROW_UPDATED"], f"Linha atualizada: {row.title}",
                         admin_identity(request.auth), metadata={"row_id": row_id})
        return 200, create_row_response(row)

    @api.delete("/rows/{row_id}", auth=JWTAuth(),
                response={200: dict, 401: ErrorSchema, 404: ErrorSchema, 503: ErrorSchema})
    def delete_grid_row(request, row_id: int):
        try:
            deleted = grid_service.delete_grid_row(row_id)
        except StoreNotConfiguredError as e:
            return 503, {"message": str(e)}
        if not deleted:
            return 404, {"message": "Linha não encontrada"}

        log_admin_action(ADMIN_ACTIONS["ROW_UPDATED"], f"Linha {row_id} excluída",
                         admin_identity(request.auth), metadata={"row_id": row_id})
        return 200, {"message": "Linha excluída com sucesso"}

    # ------------------------------------------------------------------
    # Row items
    # ------------------------------------------------------------------

    @api.post("/rows/{row_id}/items", auth=JWTAuth(),
              response={201: ItemsResponseSchema, 400: ErrorSchema, 401: ErrorSchema, 404: ErrorSchema,
                        503: ErrorSchema})
    def add_row_item(request, row_id: int, data: ItemAddSchema):
        """
        Add content to a row.

        Returns:
            201: Item added, full item list in order
            400: Rejected (wrong type for the row, duplicate, row full) or
                 unknown content
            404: Row not found
            503: Store not configured
        """
        try:
            require_store()
        except StoreNotConfiguredError as e:
            return 503, {"message": str(e)}

        catalog = ContentCatalog.load()
        if catalog.get(data.content_id, data.content_type) is None:
            return 400, {"message": "Conteúdo não encontrado."}

        try:
            result = grid_service.add_item_to_row(row_id, data.model_dump())
        except GridRow.DoesNotExist:
            return 404, {"message": "Linha não encontrada"}

        if not result.ok:
            return 400, {"message": result.message}
        return 201, {"items": result.items, "message": "Conteúdo adicionado à linha."}

    @api.put("/rows/{row_id}/items/reorder", auth=JWTAuth(),
             response={200: ItemsResponseSchema, 400: ErrorSchema, 401: ErrorSchema, 404: ErrorSchema,
                       503: ErrorSchema})
    def reorder_row_items(request, row_id: int, data: ItemReorderSchema):
        """Persist a new item order; ``item_ids`` must list every item of the row."""
        try:
            require_store()
        except StoreNotConfiguredError as e:
            return 503, {"message": str(e)}

        row = GridRow.objects.filter(pk=row_id).first()
        if row is None:
            return 404, {"message": "Linha não encontrada"}

        items_by_id = {item["id"]: item for item in row.items or []}
        if set(data.item_ids) != set(items_by_id) or len(data.item_ids) != len(items_by_id):
            return 400, {"message": "A nova ordem deve conter todos os itens da linha"}

        items = grid_service.reorder_row_items(row_id, [items_by_id[item_id] for item_id in data.item_ids])
        return 200, {"items": items}

    @api.post("/rows/{row_id}/items/randomize", auth=JWTAuth(),
              response={200: ItemsResponseSchema, 401: ErrorSchema, 404: ErrorSchema, 503: ErrorSchema})
    def randomize_row_items(request, row_id: int):
        try:
            items = grid_service.randomize_row_items(row_id)
        except StoreNotConfiguredError as e:
            return 503, {"message": str(e)}
        except GridRow.DoesNotExist:
            return 404, {"message": "Linha não encontrada"}
        return 200, {"items": items, "message": "Itens embaralhados."}

    # Keep below /items/reorder and /items/randomize.
    @api.delete("/rows/{row_id}/items/{item_id}", auth=JWTAuth(),
                response={200: ItemsResponseSchema, 401: ErrorSchema, 404: ErrorSchema, 503: ErrorSchema})
    def remove_row_item(request, row_id: int, item_id: str):
        try:
            result = grid_service.remove_item_from_row(row_id, item_id)
        except StoreNotConfiguredError as e:
            return 503, {"message": str(e)}
        except GridRow.DoesNotExist:
            return 404, {"message": "Linha não encontrada"}

        if not result.ok:
            return 404, {"message": result.message}
        return 200, {"items": result.items, "message": "Item removido."}
