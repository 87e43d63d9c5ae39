"""
Row editing session for one grid.

The manager keeps the edited row in memory (``editing_row``) apart from the
persisted rows until ``save()``. Validation problems and store failures come
back as ``Feedback`` with a message for the admin; nothing is raised to the
caller. After a failed save the in-memory edits are kept as they were.

States: idle -> editing -> (saving -> idle | cancelled -> idle).
Row drag-and-drop (``move_row``) is persisted immediately; item moves inside
the edited row wait for ``save()``.
"""

import copy
import logging
from dataclasses import dataclass, field

from . import grid_service
from .content_catalog import ContentCatalog, Feedback

logger = logging.getLogger(__name__)

IDLE = 'idle'
EDITING = 'editing'
SAVING = 'saving'
CANCELLED = 'cancelled'

DEFAULT_NEW_ROW_MAX_ITEMS = 10


@dataclass
class EditingRow:
    id: int
    title: str
    description: str
    content_type: str
    max_items: int
    items: list = field(default_factory=list)

    @classmethod
    def from_row(cls, row):
        return cls(
            id=row.pk,
            title=row.title,
            description=row.description,
            content_type=row.content_type,
            max_items=row.max_items,
            items=copy.deepcopy(row.items or []),
        )


def _move(items: list, old_index: int, new_index: int) -> list:
    moved = list(items)
    moved.insert(new_index, moved.pop(old_index))
    return moved


class GridRowManager:

    def __init__(self, grid_id, catalog=None):
        self.grid_id = grid_id
        self.catalog = catalog
        self.grid = None
        self.rows = []
        self.editing_row = None
        self.state = IDLE

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def load(self) -> Feedback:
        """(Re)load the grid, its rows and, once, the content catalog."""
        try:
            grid = grid_service.get_grid(self.grid_id)
            if self.catalog is None:
                self.catalog = ContentCatalog.load()
        except Exception as e:
            logger.exception("Error loading grid %s", self.grid_id)
            return Feedback(ok=False, message=f"Erro ao carregar a grade: {e}")

        if grid is None:
            return Feedback(ok=False, message="Grade não encontrada.")

        self.grid = grid
        self.rows = list(grid.rows.all())
        return Feedback(ok=True)

    def _find_row(self, row_id):
        return next((row for row in self.rows if row.pk == row_id), None)

    # ------------------------------------------------------------------
    # Row list (idle)
    # ------------------------------------------------------------------

    def create_row(self, title, description="", max_items=DEFAULT_NEW_ROW_MAX_ITEMS, content_type=None) -> Feedback:
        if not title or not title.strip():
            return Feedback(ok=False, message="Informe um título para a linha.")

        try:
            grid_service.create_grid_row(self.grid_id, {
                "title": title.strip(),
                "description": description,
                "content_type": content_type,
                "items": [],
                "is_active": True,
                "order": len(self.rows),
                "max_items": max_items,
            })
        except Exception as e:
            logger.exception("Error creating row in grid %s", self.grid_id)
            return Feedback(ok=False, message=f"Erro ao criar linha: {e}")

        return self.load()

    def delete_row(self, row_id) -> Feedback:
        try:
            grid_service.delete_grid_row(row_id)
        except Exception as e:
            logger.exception("Error deleting row %s", row_id)
            return Feedback(ok=False, message=f"Erro ao excluir linha: {e}")

        if self.editing_row and self.editing_row.id == row_id:
            self.editing_row = None
            self.state = IDLE
        return self.load()

    def move_row(self, old_index: int, new_index: int) -> Feedback:
        """Drag-and-drop of a whole row; the new order is stored right away."""
        if old_index == new_index:
            return Feedback(ok=True)
        if not (0 <= old_index < len(self.rows) and 0 <= new_index < len(self.rows)):
            return Feedback(ok=False, message="Posição de linha inválida.")

        self.rows = _move(self.rows, old_index, new_index)
        for index, row in enumerate(self.rows):
            row.order = index

        try:
            grid_service.reorder_grid_rows(self.grid_id, [row.pk for row in self.rows])
        except Exception as e:
            logger.exception("Error updating rows order of grid %s", self.grid_id)
            return Feedback(ok=False, message=f"Erro ao salvar a ordem das linhas: {e}")
        return Feedback(ok=True)

    # ------------------------------------------------------------------
    # Editing one row
    # ------------------------------------------------------------------

    def edit_row(self, row_id) -> Feedback:
        row = self._find_row(row_id)
        if row is None:
            return Feedback(ok=False, message="Linha não encontrada.")

        self.editing_row = EditingRow.from_row(row)
        self.state = EDITING
        return Feedback(ok=True)

    def add_content(self, content_id, content_type) -> Feedback:
        if self.editing_row is None:
            return Feedback(ok=False, message="Nenhuma linha em edição.")

        row = self.editing_row
        problem = grid_service.check_item_addition(
            row.content_type, row.max_items, row.items, content_id, content_type
        )
        if problem:
            return Feedback(ok=False, message=problem)

        if self.catalog is None or self.catalog.get(content_id, content_type) is None:
            return Feedback(ok=False, message="Conteúdo não encontrado.")

        row.items.append(grid_service.make_item(content_id, content_type, len(row.items)))
        return Feedback(ok=True)

    def remove_content(self, content_id, content_type) -> Feedback:
        if self.editing_row is None:
            return Feedback(ok=False, message="Nenhuma linha em edição.")

        remaining = [item for item in self.editing_row.items
                     if not grid_service.same_content(item, content_id, content_type)]
        self.editing_row.items = grid_service.resequence(remaining)
        return Feedback(ok=True)

    def move_item(self, old_index: int, new_index: int) -> Feedback:
        if self.editing_row is None:
            return Feedback(ok=False, message="Nenhuma linha em edição.")

        items = self.editing_row.items
        if not (0 <= old_index < len(items) and 0 <= new_index < len(items)):
            return Feedback(ok=False, message="Posição de item inválida.")

        self.editing_row.items = grid_service.resequence(_move(items, old_index, new_index))
        return Feedback(ok=True)

    def save(self) -> Feedback:
        if self.editing_row is None:
            return Feedback(ok=False, message="Nenhuma linha em edição.")

        row = self.editing_row
        self.state = SAVING
        try:
            grid_service.update_grid_row(row.id, {
                "title": row.title,
                "description": row.description,
                "items": row.items,
                "max_items": row.max_items,
            })
        except Exception as e:
            logger.exception("Error saving row %s", row.id)
            self.state = EDITING
            return Feedback(ok=False, message=f"Erro ao salvar linha: {e}")

        self.editing_row = None
        self.state = IDLE
        reloaded = self.load()
        if not reloaded.ok:
            return reloaded
        return Feedback(ok=True, message="Linha salva com sucesso.")

    def cancel(self) -> Feedback:
        self.editing_row = None
        self.state = CANCELLED
        feedback = self.load()
        self.state = IDLE
        return feedback

    # ------------------------------------------------------------------
    # Display
    # ------------------------------------------------------------------

    def describe_row(self, row) -> list[dict]:
        """Item previews for a row; items whose content is gone are skipped."""
        previews = []
        for item in row.items or []:
            content = self.catalog.get(item["content_id"], item["content_type"]) if self.catalog else None
            if content is None:
                continue
            previews.append({
                "item_id": item["id"],
                "content_id": item["content_id"],
                "content_type": item["content_type"],
                "title": content.title or "Sem título",
                "category": content.category or "Sem categoria",
            })
        return previews
