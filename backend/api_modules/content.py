"""
Zaazu Content API Module

Management of everything the kids' app shows or tracks: videos (and the
series computed from them), games, activities, app users, avatars,
achievements and daily time limits.

Public API Overview:
==================

Base URL: /api/

All endpoints require a staff JWT token.

Collections (same shape for each):
- GET    /{collection}              - List, newest first
- GET    /{collection}/{id}         - Single record
- POST   /{collection}              - Create
- PUT    /{collection}/{id}         - Partial update
- DELETE /{collection}/{id}         - Delete

where {collection} is one of: videos, games, activities, users, avatars,
achievements, daily-time-limits.

Series (computed from videos sharing a series id):
- GET  /videos/series                              - All series with seasons
- GET  /videos/series/titles                       - Known series titles
- GET  /videos/series/{series_id}                  - Episodes of one series
- GET  /videos/series/{series_id}/next-episode     - Next free episode number

Uploads (multipart/form-data, field "file"):
- POST /videos/{id}/thumbnail
- POST /games/{id}/thumbnail
- POST /activities/{id}/thumbnail
- POST /avatars/upload                             - SVG only, max 500KB
- POST /achievements/{id}/audio

Extras:
- GET  /achievements/templates
- GET  /achievements/type/{type}
- GET  /daily-time-limits/age-group/{age_group}
- PUT  /daily-time-limits/age-group/{age_group}    - Create or update

Demo Mode:
=========

Without store credentials listings return [] and every write answers 503
with {"message": "Armazenamento de conteúdo não está configurado"}.

Error Handling:
==============

- 200/201: Success
- 400: Validation errors (unknown field, duplicate e-mail, invalid upload)
- 401: Authentication required
- 404: Record not found
- 503: Content store not configured
"""

from typing import Optional

from django.core.exceptions import ObjectDoesNotExist
from django.db import IntegrityError
from ninja import File, Form, ModelSchema, Schema
from ninja.files import UploadedFile

from api.content_services import (
    ACHIEVEMENT_TEMPLATES, achievement_service, activity_service, avatar_service,
    daily_time_limit_service, game_service, user_service, video_service,
)
from api.exceptions import BlobUploadError, StoreNotConfiguredError
from api.models import (
    Achievement, Activity, Avatar, DailyTimeLimit, Game, PlatformUser, Video,
)
from api.system_logs import ADMIN_ACTIONS, log_admin_action
from .auth import ErrorSchema, JWTAuth, admin_identity

READ_ONLY_FIELDS = ['id', 'created_at', 'updated_at']

# ============================================================================
# Schemas
# ============================================================================


class VideoSchema(ModelSchema):
    class Meta:
        model = Video
        fields = '__all__'


class VideoCreateSchema(ModelSchema):
    class Meta:
        model = Video
        exclude = READ_ONLY_FIELDS


class VideoUpdateSchema(ModelSchema):
    class Meta:
        model = Video
        exclude = READ_ONLY_FIELDS
        fields_optional = '__all__'


class GameSchema(ModelSchema):
    class Meta:
        model = Game
        fields = '__all__'


class GameCreateSchema(ModelSchema):
    class Meta:
        model = Game
        exclude = READ_ONLY_FIELDS


class GameUpdateSchema(ModelSchema):
    class Meta:
        model = Game
        exclude = READ_ONLY_FIELDS
        fields_optional = '__all__'


class ActivitySchema(ModelSchema):
    class Meta:
        model = Activity
        fields = '__all__'


class ActivityCreateSchema(ModelSchema):
    class Meta:
        model = Activity
        exclude = READ_ONLY_FIELDS


class ActivityUpdateSchema(ModelSchema):
    class Meta:
        model = Activity
        exclude = READ_ONLY_FIELDS
        fields_optional = '__all__'


class PlatformUserSchema(ModelSchema):
    class Meta:
        model = PlatformUser
        fields = '__all__'


class PlatformUserCreateSchema(ModelSchema):
    class Meta:
        model = PlatformUser
        exclude = READ_ONLY_FIELDS


class PlatformUserUpdateSchema(ModelSchema):
    class Meta:
        model = PlatformUser
        exclude = READ_ONLY_FIELDS
        fields_optional = '__all__'


class AvatarSchema(ModelSchema):
    class Meta:
        model = Avatar
        fields = '__all__'


class AvatarCreateSchema(ModelSchema):
    class Meta:
        model = Avatar
        exclude = READ_ONLY_FIELDS


class AvatarUpdateSchema(ModelSchema):
    class Meta:
        model = Avatar
        exclude = READ_ONLY_FIELDS
        fields_optional = '__all__'


class AchievementSchema(ModelSchema):
    class Meta:
        model = Achievement
        fields = '__all__'


class AchievementCreateSchema(ModelSchema):
    class Meta:
        model = Achievement
        exclude = READ_ONLY_FIELDS


class AchievementUpdateSchema(ModelSchema):
    class Meta:
        model = Achievement
        exclude = READ_ONLY_FIELDS
        fields_optional = '__all__'


class DailyTimeLimitSchema(ModelSchema):
    class Meta:
        model = DailyTimeLimit
        fields = '__all__'


class DailyTimeLimitCreateSchema(ModelSchema):
    class Meta:
        model = DailyTimeLimit
        exclude = READ_ONLY_FIELDS


class DailyTimeLimitUpdateSchema(ModelSchema):
    class Meta:
        model = DailyTimeLimit
        exclude = READ_ONLY_FIELDS
        fields_optional = '__all__'


class SeriesSchema(Schema):
    """Series aggregate; ``seasons`` maps season number to video ids in episode order."""
    series_id: str
    series_title: str
    total_episodes: int
    thumbnail: str = ""
    tag: str = ""
    category: str = ""
    min_age: int = 2
    seasons: dict[str, list[int]]


class NextEpisodeSchema(Schema):
    series_id: str
    season_number: int
    episode_number: int


class UploadResponseSchema(Schema):
    url: str
    message: str = ""


class AchievementTemplateSchema(Schema):
    type: str
    title: str
    description_template: str
    suggested_targets: list[int]
    category: str

# ============================================================================
# Utility Functions
# ============================================================================


def store_error_response(error: Exception):
    """
    Map a service exception to an error response tuple.

    Unexpected exceptions are re-raised.
    """
    if isinstance(error, StoreNotConfiguredError):
        return 503, {"message": str(error)}
    if isinstance(error, ObjectDoesNotExist):
        return 404, {"message": "Registro não encontrado"}
    if isinstance(error, IntegrityError):
        return 400, {"message": "Registro duplicado ou inválido"}
    if isinstance(error, ValueError):
        return 400, {"message": str(error)}
    raise error


ERROR_RESPONSES = {400: ErrorSchema, 401: ErrorSchema, 404: ErrorSchema, 503: ErrorSchema}


def register_collection_endpoints(api, prefix, service, schema, create_schema, update_schema, action_label):
    """
    Register list/get/create/update/delete endpoints for one content service.

    Args:
        api: NinjaAPI instance
        prefix: URL prefix, e.g. ``/videos``
        service: ``ContentService`` instance
        schema: Response schema
        create_schema: Request schema for creation
        update_schema: Request schema for partial updates
        action_label: Human name used in the audit log (pt-BR)
    """
    name = prefix.strip('/').replace('-', '_')

    @api.get(prefix, auth=JWTAuth(), response={200: list[schema], 401: ErrorSchema},
             operation_id=f"list_{name}", tags=[name])
    def list_records(request):
        return 200, service.get_all()

    @api.get(f"{prefix}/{{record_id}}", auth=JWTAuth(), response={200: schema, **ERROR_RESPONSES},
             operation_id=f"get_{name}", tags=[name])
    def get_record(request, record_id: int):
        record = service.get(record_id)
        if record is None:
            return 404, {"message": "Registro não encontrado"}
        return 200, record

    @api.post(prefix, auth=JWTAuth(), response={201: schema, **ERROR_RESPONSES},
              operation_id=f"create_{name}", tags=[name])
    def create_record(request, data: create_schema):
        try:
            record_id = service.create(data.model_dump(exclude_unset=True))
        except (StoreNotConfiguredError, IntegrityError, ValueError) as e:
            return store_error_response(e)

        record = service.get(record_id)
        log_admin_action(ADMIN_ACTIONS["CONTENT_CREATED"], f"{action_label} criado: {record}",
                         admin_identity(request.auth), metadata={"collection": name, "id": record_id})
        return 201, record

    @api.put(f"{prefix}/{{record_id}}", auth=JWTAuth(), response={200: schema, **ERROR_RESPONSES},
             operation_id=f"update_{name}", tags=[name])
    def update_record(request, record_id: int, data: update_schema):
        try:
            record = service.update(record_id, data.model_dump(exclude_unset=True))
        except (StoreNotConfiguredError, ObjectDoesNotExist, IntegrityError, ValueError) as e:
            return store_error_response(e)

        log_admin_action(ADMIN_ACTIONS["CONTENT_UPDATED"], f"{action_label} atualizado: {record}",
                         admin_identity(request.auth), metadata={"collection": name, "id": record_id})
        return 200, record

    @api.delete(f"{prefix}/{{record_id}}", auth=JWTAuth(), response={200: dict, **ERROR_RESPONSES},
                operation_id=f"delete_{name}", tags=[name])
    def delete_record(request, record_id: int):
        try:
            service.delete(record_id)
        except (StoreNotConfiguredError, ObjectDoesNotExist) as e:
            return store_error_response(e)

        log_admin_action(ADMIN_ACTIONS["CONTENT_DELETED"], f"{action_label} {record_id} excluído",
                         admin_identity(request.auth), level="warning",
                         metadata={"collection": name, "id": record_id})
        return 200, {"message": "Registro excluído com sucesso"}


def register_thumbnail_endpoint(api, prefix, service):
    name = prefix.strip('/')

    @api.post(f"{prefix}/{{record_id}}/thumbnail", auth=JWTAuth(),
              response={200: UploadResponseSchema, **ERROR_RESPONSES},
              operation_id=f"upload_{name}_thumbnail", tags=[name])
    def upload_thumbnail(request, record_id: int, file: UploadedFile = File(...)):
        if service.get(record_id) is None:
            return 404, {"message": "Registro não encontrado"}
        try:
            url = service.upload_thumbnail(record_id, file)
        except StoreNotConfiguredError as e:
            return store_error_response(e)
        return 200, {"url": url, "message": "Thumbnail enviada com sucesso"}

# ============================================================================
# API Endpoints
# ============================================================================


def register_content_endpoints(api):
    """Register content management endpoints with the API router."""

    # Extras first so fixed paths win over ``/{record_id}``.

    @api.get("/videos/series", auth=JWTAuth(), response={200: list[SeriesSchema], 401: ErrorSchema},
             tags=["videos"])
    def list_series(request):
        """All series, built from the videos that share a series id."""
        return 200, [series.to_dict() for series in video_service.get_all_series()]

    @api.get("/videos/series/titles", auth=JWTAuth(), response={200: list[str], 401: ErrorSchema},
             tags=["videos"])
    def list_series_titles(request):
        return 200, video_service.get_existing_series_titles()

    @api.get("/videos/series/{series_id}", auth=JWTAuth(), response={200: list[VideoSchema], 401: ErrorSchema},
             tags=["videos"])
    def list_series_videos(request, series_id: str):
        """Episodes of one series ordered by season and episode."""
        return 200, video_service.get_videos_by_series(series_id)

    @api.get("/videos/series/{series_id}/next-episode", auth=JWTAuth(),
             response={200: NextEpisodeSchema, 401: ErrorSchema}, tags=["videos"])
    def next_episode_number(request, series_id: str, season: int = 1):
        return 200, {
            "series_id": series_id,
            "season_number": season,
            "episode_number": video_service.get_next_episode_number(series_id, season),
        }

    @api.get("/achievements/templates", auth=JWTAuth(),
             response={200: list[AchievementTemplateSchema], 401: ErrorSchema}, tags=["achievements"])
    def list_achievement_templates(request):
        return 200, ACHIEVEMENT_TEMPLATES

    @api.get("/achievements/type/{achievement_type}", auth=JWTAuth(),
             response={200: list[AchievementSchema], 401: ErrorSchema}, tags=["achievements"])
    def list_achievements_by_type(request, achievement_type: str):
        return 200, achievement_service.get_by_type(achievement_type)

    @api.post("/achievements/{achievement_id}/audio", auth=JWTAuth(),
              response={200: UploadResponseSchema, **ERROR_RESPONSES}, tags=["achievements"])
    def upload_achievement_audio(request, achievement_id: int, file: UploadedFile = File(...)):
        """Upload the celebration sound played when the achievement is unlocked."""
        if achievement_service.get(achievement_id) is None:
            return 404, {"message": "Conquista não encontrada"}
        try:
            url = achievement_service.upload_audio(achievement_id, file)
        except StoreNotConfiguredError as e:
            return store_error_response(e)
        return 200, {"url": url, "message": "Áudio enviado com sucesso"}

    @api.post("/avatars/upload", auth=JWTAuth(), response={201: AvatarSchema, **ERROR_RESPONSES},
              tags=["avatars"])
    def upload_avatar(request, name: Form[str], category: Form[Optional[str]] = None,
                      file: UploadedFile = File(...)):
        """
        Upload an SVG avatar and create its record.

        Returns:
            201: Avatar created
            400: Not an SVG or larger than 500KB
            503: Store not configured
        """
        try:
            avatar_id = avatar_service.create_from_svg(file, name, category)
        except BlobUploadError as e:
            return 400, {"message": str(e)}
        except (StoreNotConfiguredError, IntegrityError, ValueError) as e:
            return store_error_response(e)

        log_admin_action(ADMIN_ACTIONS["CONTENT_CREATED"], f"Avatar enviado: {name}",
                         admin_identity(request.auth), metadata={"collection": "avatars", "id": avatar_id})
        return 201, avatar_service.get(avatar_id)

    @api.get("/daily-time-limits/age-group/{age_group}", auth=JWTAuth(),
             response={200: DailyTimeLimitSchema, 401: ErrorSchema, 404: ErrorSchema}, tags=["daily_time_limits"])
    def get_daily_time_limit(request, age_group: str):
        limit = daily_time_limit_service.get_by_age_group(age_group)
        if limit is None:
            return 404, {"message": "Limite não configurado para esta faixa etária"}
        return 200, limit

    @api.put("/daily-time-limits/age-group/{age_group}", auth=JWTAuth(),
             response={200: DailyTimeLimitSchema, **ERROR_RESPONSES}, tags=["daily_time_limits"])
    def save_daily_time_limit(request, age_group: str, data: DailyTimeLimitUpdateSchema):
        """Update the active limit of the age group, creating it with defaults when missing."""
        if age_group not in dict(DailyTimeLimit.AGE_GROUPS):
            return 400, {"message": f"Faixa etária inválida: {age_group}"}

        values = data.model_dump(exclude_unset=True)
        values.pop("age_group", None)
        try:
            limit = daily_time_limit_service.create_or_update(age_group, values)
        except (StoreNotConfiguredError, ValueError) as e:
            return store_error_response(e)

        log_admin_action(ADMIN_ACTIONS["CONTENT_UPDATED"], f"Limite de tempo atualizado: {age_group}",
                         admin_identity(request.auth), metadata={"age_group": age_group})
        return 200, limit

    register_thumbnail_endpoint(api, "/videos", video_service)
    register_thumbnail_endpoint(api, "/games", game_service)
    register_thumbnail_endpoint(api, "/activities", activity_service)

    register_collection_endpoints(api, "/videos", video_service,
                                  VideoSchema, VideoCreateSchema, VideoUpdateSchema, "Vídeo")
    register_collection_endpoints(api, "/games", game_service,
                                  GameSchema, GameCreateSchema, GameUpdateSchema, "Jogo")
    register_collection_endpoints(api, "/activities", activity_service,
                                  ActivitySchema, ActivityCreateSchema, ActivityUpdateSchema, "Atividade")
    register_collection_endpoints(api, "/users", user_service,
                                  PlatformUserSchema, PlatformUserCreateSchema, PlatformUserUpdateSchema,
                                  "Usuário")
    register_collection_endpoints(api, "/avatars", avatar_service,
                                  AvatarSchema, AvatarCreateSchema, AvatarUpdateSchema, "Avatar")
    register_collection_endpoints(api, "/achievements", achievement_service,
                                  AchievementSchema, AchievementCreateSchema, AchievementUpdateSchema,
                                  "Conquista")
    register_collection_endpoints(api, "/daily-time-limits", daily_time_limit_service,
                                  DailyTimeLimitSchema, DailyTimeLimitCreateSchema, DailyTimeLimitUpdateSchema,
                                  "Limite de tempo")
