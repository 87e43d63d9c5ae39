"""
Content store services.

One service per collection (videos, games, activities, users, avatars,
achievements, daily time limits). Every service follows the same contract:

- read paths return empty/default values when the store is not configured
  (demo mode) or when the database fails; the failure is logged;
- write paths raise ``StoreNotConfiguredError`` in demo mode and log then
  re-raise any store error so the caller can report it.

Uploads go to the blob store (``default_storage``) and return a public URL.
"""

import logging
import re
import time

from django.conf import settings
from django.core.files.storage import default_storage
from django.db import DatabaseError, transaction
from django.db.models import Max

from .exceptions import BlobUploadError, StoreNotConfiguredError
from .models import (
    Achievement, Activity, Avatar, DailyTimeLimit, Game, PlatformUser, Video,
)
from .series import group_videos_by_series

logger = logging.getLogger(__name__)

# ============================================================================
# Store / blob helpers
# ============================================================================


def is_store_configured() -> bool:
    return bool(getattr(settings, 'CONTENT_STORE_CONFIGURED', False))


def require_store():
    """Fail fast, before any query, when running in demo mode."""
    if not is_store_configured():
        raise StoreNotConfiguredError()


def save_blob(path: str, file_obj) -> str:
    """Store a file and return its name in the blob store (may differ from ``path``)."""
    require_store()
    try:
        return default_storage.save(path, file_obj)
    except Exception:
        logger.exception("Error uploading blob to %s", path)
        raise


def upload_blob(path: str, file_obj) -> str:
    """
    Upload a file to the blob store.

    Args:
        path: Storage path, e.g. ``videos/thumbnails/12``
        file_obj: Django File / UploadedFile

    Returns:
        Public URL of the stored file
    """
    return default_storage.url(save_blob(path, file_obj))

# ============================================================================
# Generic collection service
# ============================================================================


class ContentService:
    model = None
    label = None
    read_only_fields = ('id', 'pk', 'created_at', 'updated_at')

    def _queryset(self):
        return self.model.objects.order_by('-created_at', '-id')

    def get_all(self):
        """All records, newest first. Empty in demo mode or on store failure."""
        if not is_store_configured():
            return []
        try:
            return list(self._queryset())
        except DatabaseError:
            logger.exception("Error fetching %s", self.label)
            return []

    def get(self, record_id):
        """Single record or None."""
        if not is_store_configured():
            return None
        try:
            return self.model.objects.filter(pk=record_id).first()
        except (DatabaseError, ValueError):
            logger.exception("Error fetching %s %s", self.label, record_id)
            return None

    def _clean(self, data: dict) -> dict:
        field_names = {f.name for f in self.model._meta.concrete_fields}
        cleaned = {}
        for key, value in data.items():
            if key in self.read_only_fields:
                continue
            if key not in field_names:
                raise ValueError(f"Campo desconhecido para {self.label}: {key}")
            cleaned[key] = value
        return cleaned

    def create(self, data: dict) -> int:
        require_store()
        try:
            with transaction.atomic():
                record = self.model.objects.create(**self._clean(data))
            logger.info("Created %s %s", self.label, record.pk)
            return record.pk
        except Exception:
            logger.exception("Error creating %s", self.label)
            raise

    def update(self, record_id, data: dict):
        require_store()
        try:
            with transaction.atomic():
                record = self.model.objects.get(pk=record_id)
                for key, value in self._clean(data).items():
                    setattr(record, key, value)
                record.save()
            return record
        except Exception:
            logger.exception("Error updating %s %s", self.label, record_id)
            raise

    def delete(self, record_id):
        require_store()
        try:
            self.model.objects.get(pk=record_id).delete()
            logger.info("Deleted %s %s", self.label, record_id)
        except Exception:
            logger.exception("Error deleting %s %s", self.label, record_id)
            raise


class ThumbnailMixin:
    thumbnail_prefix = None

    def upload_thumbnail(self, record_id, file_obj) -> str:
        """Store the thumbnail and point the record at it."""
        url = upload_blob(f"{self.thumbnail_prefix}/thumbnails/{record_id}", file_obj)
        self.update(record_id, {"thumbnail": url})
        return url

# ============================================================================
# Collections
# ============================================================================


class VideoService(ThumbnailMixin, ContentService):
    model = Video
    label = 'videos'
    thumbnail_prefix = 'videos'

    def get_all_series(self):
        return group_videos_by_series(self.get_all())

    def get_videos_by_series(self, series_id: str):
        if not is_store_configured():
            return []
        try:
            return list(
                Video.objects.filter(series_id=series_id).order_by('season_number', 'episode_number', 'id')
            )
        except DatabaseError:
            logger.exception("Error fetching videos of series %s", series_id)
            return []

    def get_next_episode_number(self, series_id: str, season_number: int = 1) -> int:
        if not is_store_configured():
            return 1
        try:
            last = Video.objects.filter(
                series_id=series_id, season_number=season_number
            ).aggregate(last=Max('episode_number'))['last']
        except DatabaseError:
            logger.exception("Error getting next episode number for %s", series_id)
            return 1
        return (last or 0) + 1

    def get_existing_series_titles(self) -> list[str]:
        if not is_store_configured():
            return []
        try:
            titles = Video.objects.exclude(series_title__isnull=True).exclude(series_title='') \
                .values_list('series_title', flat=True).distinct()
            return sorted(set(titles))
        except DatabaseError:
            logger.exception("Error fetching existing series titles")
            return []


class GameService(ThumbnailMixin, ContentService):
    model = Game
    label = 'games'
    thumbnail_prefix = 'games'


class ActivityService(ThumbnailMixin, ContentService):
    model = Activity
    label = 'activities'
    thumbnail_prefix = 'activities'


class PlatformUserService(ContentService):
    model = PlatformUser
    label = 'users'


class AvatarService(ContentService):
    model = Avatar
    label = 'avatars'

    def _svg_path(self, file_obj, avatar_name: str) -> str:
        content_type = getattr(file_obj, 'content_type', '') or ''
        if 'svg' not in content_type and not file_obj.name.lower().endswith('.svg'):
            raise BlobUploadError("O arquivo deve ser um SVG")

        max_bytes = settings.AVATAR_MAX_SVG_BYTES
        if file_obj.size > max_bytes:
            raise BlobUploadError(f"O arquivo SVG deve ter no máximo {max_bytes // 1024}KB")

        safe_name = re.sub(r'[^a-zA-Z0-9]', '_', avatar_name)
        return f"avatars/{int(time.time() * 1000)}_{safe_name}.svg"

    def create_from_svg(self, file_obj, avatar_name: str, category: str = None) -> int:
        """
        Upload the SVG and create its Avatar record.

        When the record cannot be created the uploaded file is deleted again
        and the error is re-raised.

        Raises:
            BlobUploadError: not an SVG, or larger than AVATAR_MAX_SVG_BYTES
        """
        stored_name = save_blob(self._svg_path(file_obj, avatar_name), file_obj)
        try:
            return self.create({
                "name": avatar_name,
                "svg_url": default_storage.url(stored_name),
                "file_name": file_obj.name,
                "size": file_obj.size,
                "category": category or None,
                "tags": [],
                "is_active": True,
            })
        except Exception:
            logger.warning("Removing uploaded avatar %s after failed create", stored_name)
            default_storage.delete(stored_name)
            raise


# Pre-defined achievement kinds offered by the achievement form.
ACHIEVEMENT_TEMPLATES = [
    {
        "type": "time_spent",
        "title": "Explorador do Tempo",
        "description_template": "Passou {target_value} minutos explorando o app",
        "suggested_targets": [30, 60, 120, 300, 600],
        "category": "engagement",
    },
    {
        "type": "activities_completed",
        "title": "Colecionador de Atividades",
        "description_template": "Completou {target_value} atividades incríveis",
        "suggested_targets": [5, 15, 30, 50, 100],
        "category": "engagement",
    },
    {
        "type": "streak_days",
        "title": "Aprendiz Consistente",
        "description_template": "Usou o app por {target_value} dias seguidos",
        "suggested_targets": [3, 7, 14, 30, 100],
        "category": "consistency",
    },
    {
        "type": "category_master",
        "title": "Mestre da Categoria",
        "description_template": "Dominou {target_value} atividades de {category}",
        "suggested_targets": [10, 25, 50, 100],
        "category": "learning",
    },
    {
        "type": "daily_goal",
        "title": "Conquistador de Metas",
        "description_template": "Atingiu sua meta diária {target_value} vezes",
        "suggested_targets": [5, 10, 25, 50, 100],
        "category": "consistency",
    },
    {
        "type": "speed_learner",
        "title": "Aprendiz Relâmpago",
        "description_template": "Completou {target_value} atividades em menos de 5 minutos",
        "suggested_targets": [5, 15, 30, 50],
        "category": "mastery",
    },
    {
        "type": "explorer",
        "title": "Grande Explorador",
        "description_template": "Explorou {target_value} tipos diferentes de conteúdo",
        "suggested_targets": [3, 5, 10, 15],
        "category": "exploration",
    },
    {
        "type": "perfectionist",
        "title": "Perfeccionista",
        "description_template": "Acertou 100% em {target_value} atividades",
        "suggested_targets": [3, 10, 25, 50],
        "category": "mastery",
    },
]


class AchievementService(ContentService):
    model = Achievement
    label = 'achievements'

    def get_by_type(self, achievement_type: str):
        """Active achievements of one type."""
        if not is_store_configured():
            return []
        try:
            return list(self._queryset().filter(type=achievement_type, is_active=True))
        except DatabaseError:
            logger.exception("Error fetching achievements of type %s", achievement_type)
            return []

    def upload_audio(self, achievement_id, file_obj) -> str:
        url = upload_blob(f"achievements/audio/{achievement_id}/{file_obj.name}", file_obj)
        self.update(achievement_id, {"audio_file": url})
        return url


class DailyTimeLimitService(ContentService):
    model = DailyTimeLimit
    label = 'daily time limits'

    DEFAULTS = {
        "entretenimento_limit": 30,
        "atividade_limit": 20,
        "educativo_limit": 15,
        "reward_type": "medalha",
        "reward_title": "Explorador do Dia",
    }

    def get_by_age_group(self, age_group: str):
        """The active limit for an age group, or None."""
        if not is_store_configured():
            return None
        try:
            return self._queryset().filter(age_group=age_group, is_active=True).first()
        except DatabaseError:
            logger.exception("Error fetching daily time limit for %s", age_group)
            return None

    def create_or_update(self, age_group: str, data: dict):
        existing = self.get_by_age_group(age_group)
        if existing:
            return self.update(existing.pk, data)

        values = dict(self.DEFAULTS)
        values.update({key: value for key, value in data.items() if value is not None})
        values.update({"age_group": age_group, "is_active": True})
        return self.get(self.create(values))


video_service = VideoService()
game_service = GameService()
activity_service = ActivityService()
user_service = PlatformUserService()
avatar_service = AvatarService()
achievement_service = AchievementService()
daily_time_limit_service = DailyTimeLimitService()
