from django.contrib import admin
from django.utils.html import format_html
from import_export.admin import ImportExportModelAdmin

from . import grid_service
from .models import (
    Achievement, Activity, AdminActionLog, AppActionLog, Avatar, DailyTimeLimit, DriveConfig, Game, Grid,
    GridRow, PlatformUser, Video,
)
from .resources import (
    AchievementResource, ActivityResource, GameResource, PlatformUserResource, VideoResource,
)

admin.site.site_header = 'Zaazu Admin'
admin.site.site_title = 'Zaazu Admin'

# ============================================================================
# 🧱 GRADES DA HOME
# ============================================================================


class GridRowInline(admin.TabularInline):
    model = GridRow
    extra = 0
    fields = ['order', 'title', 'content_type', 'max_items', 'is_active', 'item_count']
    readonly_fields = ['item_count']
    ordering = ['order', 'id']

    def item_count(self, obj):
        return f"{len(obj.items or [])}/{obj.max_items}"
    item_count.short_description = 'Itens'


@admin.action(description='Ativar grade selecionada (desativa as outras da mesma tag)')
def activate_grids(modeladmin, request, queryset):
    for grid in queryset:
        grid_service.set_grid_active(grid.pk, True)


@admin.register(Grid)
class GridAdmin(admin.ModelAdmin):
    list_display = ['name_with_status', 'tag', 'row_count', 'is_active', 'updated_at']
    list_filter = ['tag', 'is_active']
    search_fields = ['name', 'description']
    readonly_fields = ['created_at', 'updated_at']
    inlines = [GridRowInline]
    actions = [activate_grids]

    fieldsets = (
        ('🧱 Grade', {
            'fields': ('name', 'description', 'tag', 'is_active'),
            'description': 'Por tag, apenas uma grade pode estar ativa'
        }),
        ('📊 Datas', {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',),
        }),
    )

    def name_with_status(self, obj):
        if obj.is_active:
            return format_html('<strong style="color: green;">{} (Ativa)</strong>', obj.name)
        return obj.name
    name_with_status.short_description = 'Grade'

    def row_count(self, obj):
        return obj.rows.count()
    row_count.short_description = 'Linhas'

    def save_model(self, request, obj, form, change):
        super().save_model(request, obj, form, change)
        if obj.is_active:
            # deactivates the other active grid of the same tag
            grid_service.set_grid_active(obj.pk, True)


@admin.register(GridRow)
class GridRowAdmin(admin.ModelAdmin):
    list_display = ['title', 'grid', 'order', 'content_type', 'item_count', 'is_active']
    list_filter = ['grid__tag', 'content_type', 'is_active']
    search_fields = ['title', 'grid__name']
    readonly_fields = ['created_at', 'updated_at']

    def item_count(self, obj):
        return f"{len(obj.items or [])}/{obj.max_items}"
    item_count.short_description = 'Itens'

# ============================================================================
# 🎬 CONTEÚDO
# ============================================================================


@admin.register(Video)
class VideoAdmin(ImportExportModelAdmin):
    resource_class = VideoResource
    list_display = ['title', 'series_display', 'tag', 'category', 'min_age', 'views', 'is_active']
    list_filter = ['tag', 'category', 'min_age', 'is_active', 'series_title']
    search_fields = ['title', 'description', 'series_title']
    readonly_fields = ['views', 'created_at', 'updated_at']

    fieldsets = (
        ('🎬 Vídeo', {
            'fields': ('title', 'description', 'url', 'thumbnail', 'duration'),
        }),
        ('🏷 Classificação', {
            'fields': ('tag', 'category', 'min_age', 'is_active'),
        }),
        ('📺 Série', {
            'fields': ('series_id', 'series_title', 'season_number', 'episode_number'),
            'description': 'Deixe em branco para vídeos avulsos'
        }),
        ('📊 Estatísticas', {
            'fields': ('views', 'created_at', 'updated_at'),
            'classes': ('collapse',),
        }),
    )

    def series_display(self, obj):
        if obj.is_standalone:
            return '-'
        return f"{obj.series_title} T{obj.season_number}E{obj.episode_number or '?'}"
    series_display.short_description = 'Série'


@admin.register(Game)
class GameAdmin(ImportExportModelAdmin):
    resource_class = GameResource
    list_display = ['title', 'game_type', 'tag', 'category', 'min_age', 'plays', 'is_active']
    list_filter = ['tag', 'game_type', 'min_age', 'is_active']
    search_fields = ['title', 'description']
    readonly_fields = ['plays', 'created_at', 'updated_at']


@admin.register(Activity)
class ActivityAdmin(ImportExportModelAdmin):
    resource_class = ActivityResource
    list_display = ['title', 'difficulty', 'tag', 'category', 'min_age', 'completions', 'is_active']
    list_filter = ['tag', 'difficulty', 'min_age', 'is_active']
    search_fields = ['title', 'description']
    readonly_fields = ['completions', 'created_at', 'updated_at']

# ============================================================================
# 👤 USUÁRIOS, AVATARES, CONQUISTAS E LIMITES
# ============================================================================


@admin.register(PlatformUser)
class PlatformUserAdmin(ImportExportModelAdmin):
    resource_class = PlatformUserResource
    list_display = ['name', 'email', 'role', 'last_login', 'created_at']
    list_filter = ['role']
    search_fields = ['name', 'email']


@admin.register(Avatar)
class AvatarAdmin(admin.ModelAdmin):
    list_display = ['preview', 'name', 'category', 'size', 'is_active']
    list_filter = ['category', 'is_active']
    search_fields = ['name']

    def preview(self, obj):
        return format_html('<img src="{}" style="height: 40px;" alt="{}">', obj.svg_url, obj.name)
    preview.short_description = 'Avatar'


@admin.register(Achievement)
class AchievementAdmin(ImportExportModelAdmin):
    resource_class = AchievementResource
    list_display = ['name', 'type', 'target_value', 'rarity', 'points', 'is_active']
    list_filter = ['type', 'rarity', 'category', 'is_active']
    search_fields = ['name', 'description']


@admin.register(DailyTimeLimit)
class DailyTimeLimitAdmin(admin.ModelAdmin):
    list_display = ['age_group', 'entretenimento_limit', 'atividade_limit', 'educativo_limit', 'reward_type',
                    'is_active']
    list_filter = ['age_group', 'is_active']

# ============================================================================
# 📋 LOGS E CONFIGURAÇÃO
# ============================================================================


class ActionLogAdmin(admin.ModelAdmin):
    list_filter = ['level', 'action']
    date_hierarchy = 'timestamp'

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False


@admin.register(AdminActionLog)
class AdminActionLogAdmin(ActionLogAdmin):
    list_display = ['timestamp', 'level', 'admin', 'action', 'details']
    search_fields = ['admin', 'action', 'details']


@admin.register(AppActionLog)
class AppActionLogAdmin(ActionLogAdmin):
    list_display = ['timestamp', 'level', 'user', 'action', 'details', 'device_info']
    search_fields = ['user', 'user_id', 'action', 'details']


@admin.register(DriveConfig)
class DriveConfigAdmin(admin.ModelAdmin):
    list_display = ['__str__', 'client_id', 'folder_id', 'updated_at']
    readonly_fields = ['access_token', 'refresh_token', 'folder_id', 'updated_at']

    def has_add_permission(self, request):
        return not DriveConfig.objects.exists()
