"""
Content catalog and picker used when attaching content to grid rows.

The catalog resolves grid item references by their explicit
``(content_id, content_type)`` pair; it never guesses a record's type from the
fields it happens to carry. The picker lists what can be attached for one
content type, filters it, and tracks a capped selection. Neither persists
anything.
"""

from dataclasses import dataclass, field

from .content_services import activity_service, game_service, video_service
from .series import group_videos_by_series

DEFAULT_MAX_SELECTION = 20

# Values accepted by ContentPicker.filter(kind=...)
KIND_SERIES = 'series'
KIND_INDIVIDUAL = 'individual'


@dataclass
class Feedback:
    """Result of a UI-level operation; ``message`` is shown to the admin."""
    ok: bool
    message: str = ""


@dataclass
class CatalogEntry:
    content_id: str
    content_type: str
    title: str
    description: str = ""
    category: str = ""
    min_age: int = 2
    tag: str = ""
    thumbnail: str = ""
    is_active: bool = True
    total_episodes: int = None
    tags: list = field(default_factory=list)

    @property
    def is_series(self):
        return self.content_type == 'series'

    @classmethod
    def from_content(cls, content):
        return cls(
            content_id=str(content.id),
            content_type=content.CONTENT_TYPE,
            title=content.title,
            description=content.description or "",
            category=content.category or "",
            min_age=content.min_age,
            tag=content.tag or "",
            thumbnail=content.thumbnail or "",
            is_active=content.is_active,
            total_episodes=getattr(content, 'total_episodes', None),
            tags=list(getattr(content, 'tags', None) or []),
        )

    def matches(self, search: str) -> bool:
        needle = search.lower()
        return (
            needle in self.title.lower()
            or needle in self.description.lower()
            or any(needle in tag.lower() for tag in self.tags)
        )


def filter_content_by_age(items, child_age: int) -> list:
    """Content a child of ``child_age`` may see (``min_age <= child_age``)."""
    return [item for item in items if item.min_age <= child_age]


class ContentCatalog:
    """In-memory snapshot of every attachable piece of content."""

    def __init__(self, videos=(), games=(), activities=()):
        self.videos = list(videos)
        self.games = list(games)
        self.activities = list(activities)
        self.series = group_videos_by_series(self.videos)

        self._index = {}
        for content in self.videos + self.games + self.activities + self.series:
            self._index[(content.CONTENT_TYPE, str(content.id))] = content

    @classmethod
    def load(cls):
        return cls(
            videos=video_service.get_all(),
            games=game_service.get_all(),
            activities=activity_service.get_all(),
        )

    def get(self, content_id, content_type):
        """Content referenced by a grid item, or None when it no longer exists."""
        return self._index.get((content_type, str(content_id)))

    def standalone_videos(self):
        return [video for video in self.videos if not video.series_id]

    def entries_for(self, content_type: str) -> list[CatalogEntry]:
        """
        Attachable entries for one content type. Videos and series share one
        listing: every series aggregate followed by the videos outside any
        series.
        """
        if content_type in ('video', 'series'):
            contents = self.series + self.standalone_videos()
        elif content_type == 'game':
            contents = self.games
        elif content_type == 'activity':
            contents = self.activities
        else:
            raise ValueError(f"Tipo de conteúdo inválido: {content_type}")
        return [CatalogEntry.from_content(content) for content in contents]


class ContentPicker:
    """
    Filterable listing for one content type with a capped selection.

    ``on_select`` / ``on_deselect`` callbacks receive the content id when the
    selection changes.
    """

    def __init__(self, content_type, catalog, selected=None, max_selection=DEFAULT_MAX_SELECTION,
                 on_select=None, on_deselect=None):
        self.content_type = content_type
        self.catalog = catalog
        self.selected = [str(content_id) for content_id in (selected or [])]
        self.max_selection = max_selection
        self.on_select = on_select
        self.on_deselect = on_deselect

    def entries(self):
        return self.catalog.entries_for(self.content_type)

    def filter(self, search="", category="", age=None, kind=None) -> list[CatalogEntry]:
        """
        Active entries matching every given filter.

        Args:
            search: text looked up in title, description and tags
            category: exact category
            age: child's age; keeps entries with ``min_age <= age``
            kind: ``series`` for series only, ``individual`` for single items
        """
        entries = [entry for entry in self.entries() if entry.is_active]
        if search:
            entries = [entry for entry in entries if entry.matches(search)]
        if category:
            entries = [entry for entry in entries if entry.category == category]
        if age is not None:
            entries = filter_content_by_age(entries, age)
        if kind == KIND_SERIES:
            entries = [entry for entry in entries if entry.is_series]
        elif kind == KIND_INDIVIDUAL:
            entries = [entry for entry in entries if not entry.is_series]
        return entries

    def categories(self) -> list[str]:
        return sorted({entry.category for entry in self.entries() if entry.category})

    def is_selected(self, content_id) -> bool:
        return str(content_id) in self.selected

    def can_select(self) -> bool:
        return len(self.selected) < self.max_selection

    def toggle(self, content_id) -> Feedback:
        content_id = str(content_id)
        if self.is_selected(content_id):
            self.selected.remove(content_id)
            if self.on_deselect:
                self.on_deselect(content_id)
            return Feedback(ok=True)

        if not self.can_select():
            return Feedback(ok=False, message=f"Limite máximo de {self.max_selection} itens atingido!")

        self.selected.append(content_id)
        if self.on_select:
            self.on_select(content_id)
        return Feedback(ok=True)
