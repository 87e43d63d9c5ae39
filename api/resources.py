"""
Django Import-Export Resources for the content collections.
Bulk import/export of videos, games, activities, achievements and app users
from the admin site (CSV/XLSX).
"""

import logging

from django.utils.text import slugify
from import_export import fields, resources
from import_export.widgets import BooleanWidget, JSONWidget

from .models import Achievement, Activity, Game, PlatformUser, Video

logger = logging.getLogger(__name__)


class ContentResource(resources.ModelResource):
    """Shared behaviour: rows without a title are skipped."""

    is_active = fields.Field(column_name='is_active', attribute='is_active', widget=BooleanWidget())

    def skip_row(self, instance, original, row, import_validation_errors=None):
        title = row.get('title')
        if not title or not str(title).strip():
            return True
        return super().skip_row(instance, original, row, import_validation_errors)


# ============================================================================
# 🎬 CONTENT RESOURCES
# ============================================================================

class VideoResource(ContentResource):
    """
    Video import/export.

    Episodes may be imported with only ``series_title``; the ``series_id`` is
    derived from it so all episodes of the title land in the same series.
    """

    class Meta:
        model = Video
        fields = (
            'id', 'title', 'description', 'url', 'thumbnail', 'duration', 'category', 'min_age', 'tag',
            'series_id', 'series_title', 'season_number', 'episode_number', 'views', 'is_active',
        )
        export_order = fields

    def before_import_row(self, row, **kwargs):
        series_title = row.get('series_title')
        if series_title and str(series_title).strip() and not row.get('series_id'):
            row['series_id'] = slugify(str(series_title).strip())
            logger.debug("Derived series_id %s for %s", row['series_id'], row.get('title'))
        if not row.get('season_number'):
            row['season_number'] = 1


class GameResource(ContentResource):
    """Game import/export"""

    class Meta:
        model = Game
        fields = (
            'id', 'title', 'description', 'url', 'thumbnail', 'game_type', 'category', 'min_age', 'tag',
            'plays', 'is_active',
        )
        export_order = fields


class ActivityResource(ContentResource):
    """Activity import/export; objectives and materials are JSON lists."""

    objectives = fields.Field(column_name='objectives', attribute='objectives', widget=JSONWidget())
    materials = fields.Field(column_name='materials', attribute='materials', widget=JSONWidget())

    class Meta:
        model = Activity
        fields = (
            'id', 'title', 'description', 'thumbnail', 'instruction_video', 'age', 'difficulty', 'category',
            'min_age', 'tag', 'objectives', 'materials', 'completions', 'is_active',
        )
        export_order = fields


# ============================================================================
# 🏆 ACHIEVEMENTS & USERS
# ============================================================================

class AchievementResource(resources.ModelResource):

    class Meta:
        model = Achievement
        fields = (
            'id', 'type', 'name', 'description', 'target_value', 'category', 'rarity', 'points', 'is_active',
        )
        export_order = fields


class PlatformUserResource(resources.ModelResource):
    """App user import/export, matched by e-mail"""

    class Meta:
        model = PlatformUser
        import_id_fields = ('email',)
        fields = ('email', 'name', 'role', 'last_login', 'created_at')
        export_order = fields

    def skip_row(self, instance, original, row, import_validation_errors=None):
        email = row.get('email')
        if not email or not str(email).strip():
            return True
        return super().skip_row(instance, original, row, import_validation_errors)
