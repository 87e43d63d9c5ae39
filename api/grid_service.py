"""
Grid and row persistence for the home screen curation.

A Grid belongs to one content tag and holds ordered GridRows. Each row embeds
its items (references to videos, series, games or activities) as a JSON list.

Rules kept here:
- per tag, at most one Grid is active: activating a grid deactivates its
  active siblings in the same transaction;
- item ``order`` is dense and 0-based, rewritten on every add/remove/reorder;
- a row never holds more than ``max_items`` items, never mixes in a content
  type other than its own (when it has one) and never holds the same
  content twice.

A piece of content is identified by its ``(content_type, content_id)`` pair:
videos, games and activities are numbered independently.

In demo mode (no content store configured) reads return nothing and writes
raise ``StoreNotConfiguredError`` before touching the database. Other store
errors are not wrapped: ``Grid.DoesNotExist`` / ``GridRow.DoesNotExist`` and
database errors reach the caller unchanged.
"""

import logging
import random
import uuid
from dataclasses import dataclass, field

from django.db import transaction
from django.db.models import Prefetch
from django.utils import timezone

from .content_services import is_store_configured, require_store
from .models import CONTENT_TAG_VALUES, CONTENT_TYPE_VALUES, Grid, GridRow

logger = logging.getLogger(__name__)

DEFAULT_MAX_ITEMS = 20

GRID_FIELDS = ('name', 'description', 'tag', 'is_active')
ROW_FIELDS = ('title', 'description', 'content_type', 'items', 'is_active', 'order', 'max_items')

# Keys callers may send along that are owned by the store.
IGNORED_FIELDS = ('id', 'rows', 'grid', 'grid_id', 'created_at', 'updated_at')

DEFAULT_GRIDS = [
    {
        "name": "🎉 Diversão e Entretenimento",
        "description": "Conteúdo divertido para momentos de lazer das crianças",
        "tag": "entretenimento",
        "is_active": True,
    },
    {
        "name": "🏃‍♀️ Atividades Físicas e Movimento",
        "description": "Conteúdo para movimentar o corpo e se exercitar de forma divertida",
        "tag": "atividade",
        "is_active": False,
    },
    {
        "name": "📚 Aprendizado e Educação",
        "description": "Conteúdo educativo para aprender brincando",
        "tag": "educativo",
        "is_active": False,
    },
]


@dataclass
class ItemChangeResult:
    """Outcome of an item add/remove. Rejections carry a user-facing message."""
    ok: bool
    message: str = ""
    item: dict = None
    items: list = field(default_factory=list)

# ============================================================================
# Item helpers
# ============================================================================


def make_item(content_id, content_type: str, order: int, item_id: str = None) -> dict:
    return {
        "id": item_id or str(uuid.uuid4()),
        "content_id": str(content_id),
        "content_type": content_type,
        "order": order,
        "is_series": content_type == 'series',
    }


def normalize_item(item: dict, order: int) -> dict:
    return make_item(item["content_id"], item["content_type"], order, item_id=item.get("id"))


def resequence(items) -> list:
    """Rewrite ``order`` so it matches list position (0..n-1)."""
    return [normalize_item(item, index) for index, item in enumerate(items)]


def same_content(item: dict, content_id, content_type: str) -> bool:
    return item.get("content_type") == content_type and str(item.get("content_id")) == str(content_id)


def check_item_addition(row_content_type, max_items, items, content_id, content_type):
    """
    Validate adding one content reference to a row. ``max_items=None`` means
    the row has no explicit limit and ``DEFAULT_MAX_ITEMS`` applies.

    Returns:
        None when the item can be added, otherwise the message to show
    """
    if content_type not in CONTENT_TYPE_VALUES:
        return f'Tipo de conteúdo inválido: "{content_type}".'

    if row_content_type and row_content_type != content_type:
        return (f'Esta linha só aceita conteúdo do tipo "{row_content_type}". '
                f'Você está tentando adicionar "{content_type}".')

    if any(same_content(item, content_id, content_type) for item in items):
        return "Este conteúdo já foi adicionado à lista."

    limit = DEFAULT_MAX_ITEMS if max_items is None else max_items
    if len(items) >= limit:
        return f"Esta linha já atingiu o limite máximo de {limit} itens."

    return None


def _pick(data: dict, allowed: tuple) -> dict:
    values = {}
    for key, value in data.items():
        if key in IGNORED_FIELDS:
            continue
        if key not in allowed:
            raise ValueError(f"Campo desconhecido: {key}")
        values[key] = value
    return values


def _validate_grid_values(values: dict):
    if "tag" in values and values["tag"] not in CONTENT_TAG_VALUES:
        raise ValueError(f"Tag inválida: {values['tag']}")


def _validate_row_values(content_type, max_items, items):
    """Raise ValueError unless ``items`` fit a row of this type and size."""
    if content_type and content_type not in CONTENT_TYPE_VALUES:
        raise ValueError(f"Tipo de conteúdo inválido: {content_type}")
    if max_items is None or max_items < 1:
        raise ValueError("A linha deve aceitar pelo menos 1 item.")

    items = items or []
    if len(items) > max_items:
        raise ValueError(f"A linha aceita no máximo {max_items} itens.")

    seen = set()
    for item in items:
        item_type = item.get("content_type")
        if item_type not in CONTENT_TYPE_VALUES:
            raise ValueError(f"Tipo de conteúdo inválido: {item_type}")
        if content_type and item_type != content_type:
            raise ValueError(f'Esta linha só aceita conteúdo do tipo "{content_type}", '
                             f'mas contém "{item_type}".')
        key = (item_type, str(item.get("content_id")))
        if key in seen:
            raise ValueError("Este conteúdo já foi adicionado à lista.")
        seen.add(key)


def _ordered_rows():
    return Prefetch('rows', queryset=GridRow.objects.order_by('order', 'id'))

# ============================================================================
# Grids
# ============================================================================


def _deactivate_siblings(tag: str, exclude_id=None) -> int:
    siblings = Grid.objects.filter(tag=tag, is_active=True)
    if exclude_id is not None:
        siblings = siblings.exclude(pk=exclude_id)
    count = siblings.update(is_active=False, updated_at=timezone.now())
    if count:
        logger.info("Deactivated %s grid(s) tagged %s", count, tag)
    return count


def create_grid(data: dict) -> int:
    """Persist a new Grid (without rows) and return its id."""
    require_store()
    values = _pick(data, GRID_FIELDS)
    _validate_grid_values(values)

    with transaction.atomic():
        if values.get("is_active"):
            _deactivate_siblings(values["tag"])
        grid = Grid.objects.create(**values)

    logger.info("Created grid %s (%s)", grid.pk, grid.tag)
    return grid.pk


def get_grids() -> list:
    """All grids, newest first, rows prefetched in ``order``."""
    if not is_store_configured():
        return []
    return list(Grid.objects.order_by('-created_at', '-id').prefetch_related(_ordered_rows()))


def get_grid(grid_id):
    """Grid with rows, or None."""
    if not is_store_configured():
        return None
    return Grid.objects.filter(pk=grid_id).prefetch_related(_ordered_rows()).first()


def update_grid(grid_id, updates: dict) -> Grid:
    """
    Merge ``updates`` into a grid and refresh ``updated_at``.

    When the grid ends up active, other active grids with the same tag are
    deactivated first.
    """
    require_store()
    values = _pick(updates, GRID_FIELDS)
    _validate_grid_values(values)

    with transaction.atomic():
        grid = Grid.objects.select_for_update().get(pk=grid_id)
        for key, value in values.items():
            setattr(grid, key, value)
        if grid.is_active:
            _deactivate_siblings(grid.tag, exclude_id=grid.pk)
        grid.save()

    return grid


def set_grid_active(grid_id, is_active: bool) -> Grid:
    return update_grid(grid_id, {"is_active": is_active})


def delete_grid(grid_id) -> bool:
    """Delete the grid's rows, then the grid, as one transaction."""
    require_store()
    with transaction.atomic():
        rows_deleted, _ = GridRow.objects.filter(grid_id=grid_id).delete()
        grids_deleted, _ = Grid.objects.filter(pk=grid_id).delete()

    logger.info("Deleted grid %s with %s row(s)", grid_id, rows_deleted)
    return grids_deleted > 0


def get_active_grid(tag: str = None):
    """
    Most recently updated active grid.

    Without ``tag`` this looks across every tag and returns a single grid;
    pass a tag to get the active grid of that category.
    """
    if not is_store_configured():
        return None
    grids = Grid.objects.filter(is_active=True)
    if tag:
        grids = grids.filter(tag=tag)
    return grids.order_by('-updated_at', '-id').prefetch_related(_ordered_rows()).first()


def create_default_grids() -> list:
    """
    Seed one grid per tag (only the entertainment grid active), each with a
    mixed "Conteúdo em Destaque" row of 6 slots. Does nothing when any grid
    already exists.
    """
    require_store()
    if Grid.objects.exists():
        return []

    created = []
    with transaction.atomic():
        for grid_data in DEFAULT_GRIDS:
            grid_id = create_grid(grid_data)
            create_grid_row(grid_id, {
                "title": "Conteúdo em Destaque",
                "description": "Seleção especial com vídeos, jogos e atividades para as crianças",
                "items": [],
                "is_active": True,
                "order": 0,
                "max_items": 6,
            })
            created.append(grid_id)
    return created

# ============================================================================
# Rows
# ============================================================================


def create_grid_row(grid_id, data: dict) -> int:
    """Persist a new row under ``grid_id`` and return its id."""
    require_store()
    values = _pick(data, ROW_FIELDS)
    grid = Grid.objects.get(pk=grid_id)

    if values.get("max_items") is None:
        values["max_items"] = GridRow._meta.get_field('max_items').default
    values["content_type"] = values.get("content_type") or None
    _validate_row_values(values["content_type"], values["max_items"], values.get("items"))

    values["items"] = resequence(values.get("items") or [])
    if values.get("order") is None:
        values["order"] = GridRow.objects.filter(grid=grid).count()

    row = GridRow.objects.create(grid=grid, **values)
    logger.info("Created row %s in grid %s", row.pk, grid.pk)
    return row.pk


def get_grid_rows(grid_id) -> list:
    if not is_store_configured():
        return []
    return list(GridRow.objects.filter(grid_id=grid_id).order_by('order', 'id'))


def update_grid_row(row_id, updates: dict) -> GridRow:
    """
    Merge ``updates`` into a row.

    Touching ``content_type``, ``max_items`` or ``items`` re-checks the row as
    a whole: a type change is refused while the row holds items of another
    type, and passed items may not repeat content.
    """
    require_store()
    values = _pick(updates, ROW_FIELDS)
    if "content_type" in values:
        values["content_type"] = values["content_type"] or None
    if "items" in values:
        values["items"] = values["items"] or []

    with transaction.atomic():
        row = GridRow.objects.select_for_update().get(pk=row_id)
        if values.keys() & {"content_type", "max_items", "items"}:
            _validate_row_values(
                values.get("content_type", row.content_type),
                values.get("max_items", row.max_items),
                values.get("items", row.items),
            )
        if "items" in values:
            values["items"] = resequence(values["items"])
        for key, value in values.items():
            setattr(row, key, value)
        row.save()

    return row


def delete_grid_row(row_id) -> bool:
    require_store()
    deleted, _ = GridRow.objects.filter(pk=row_id).delete()
    return deleted > 0


def reorder_grid_rows(grid_id, row_ids) -> None:
    """Set each row's ``order`` to its position in ``row_ids``."""
    require_store()
    now = timezone.now()
    with transaction.atomic():
        for index, row_id in enumerate(row_ids):
            GridRow.objects.filter(pk=row_id, grid_id=grid_id).update(order=index, updated_at=now)

# ============================================================================
# Row items
# ============================================================================


def add_item_to_row(row_id, item: dict) -> ItemChangeResult:
    """
    Append a content reference to a row.

    The row is locked for the read-modify-write so concurrent editors cannot
    overwrite each other. Incompatible type, duplicate content and a full row
    are rejected without touching the stored items.
    """
    require_store()
    content_id = str(item["content_id"])
    content_type = item["content_type"]

    with transaction.atomic():
        row = GridRow.objects.select_for_update().get(pk=row_id)
        items = list(row.items or [])

        problem = check_item_addition(row.content_type, row.max_items, items, content_id, content_type)
        if problem:
            logger.info("Rejected %s %s for row %s: %s", content_type, content_id, row_id, problem)
            return ItemChangeResult(ok=False, message=problem, items=items)

        new_item = make_item(content_id, content_type, len(items))
        row.items = resequence(items + [new_item])
        row.save(update_fields=['items', 'updated_at'])

    return ItemChangeResult(ok=True, item=new_item, items=row.items)


def remove_item_from_row(row_id, item_id: str) -> ItemChangeResult:
    require_store()
    with transaction.atomic():
        row = GridRow.objects.select_for_update().get(pk=row_id)
        items = list(row.items or [])
        remaining = [item for item in items if item.get("id") != item_id]

        if len(remaining) == len(items):
            return ItemChangeResult(ok=False, message="Item não encontrado nesta linha.", items=items)

        row.items = resequence(remaining)
        row.save(update_fields=['items', 'updated_at'])

    return ItemChangeResult(ok=True, items=row.items)


def reorder_row_items(row_id, items) -> list:
    """Persist ``items`` in the given order; each item's ``order`` becomes its index."""
    require_store()
    with transaction.atomic():
        row = GridRow.objects.select_for_update().get(pk=row_id)
        row.items = resequence(items)
        row.save(update_fields=['items', 'updated_at'])
    return row.items


def randomize_row_items(row_id, rng=None) -> list:
    require_store()
    rng = rng or random
    with transaction.atomic():
        row = GridRow.objects.select_for_update().get(pk=row_id)
        items = list(row.items or [])
        rng.shuffle(items)
        return reorder_row_items(row_id, items)


def find_dangling_items(grid_id, catalog) -> list:
    """
    Items of a grid whose content no longer exists in ``catalog``.

    References are soft: deleting content elsewhere leaves the items in place,
    this only reports them.
    """
    dangling = []
    for row in get_grid_rows(grid_id):
        for item in row.items or []:
            if catalog.get(item["content_id"], item["content_type"]) is None:
                dangling.append({"row_id": row.pk, "row_title": row.title, "item": item})
    return dangling
