from unittest import mock

from django.core.files.storage import default_storage
from django.core.files.uploadedfile import SimpleUploadedFile
from django.test import TestCase, override_settings

from api.content_services import (
    ACHIEVEMENT_TEMPLATES, achievement_service, avatar_service, daily_time_limit_service, game_service,
    video_service,
)
from api.exceptions import BlobUploadError, StoreNotConfiguredError
from api.models import Achievement, Avatar, Game, Video
from tests.factories import make_episode, make_game, make_video

SVG = b'<svg xmlns="http://www.w3.org/2000/svg" width="10" height="10"></svg>'


class ContentServiceTests(TestCase):

    def test_crud_cycle(self):
        game_id = game_service.create({"title": "Memória", "url": "https://games.zaazu.app/memoria", "plays": 0})

        self.assertEqual(game_service.get(game_id).title, "Memória")

        game_service.update(game_id, {"title": "Memória 2", "id": 999, "created_at": None})
        self.assertEqual(Game.objects.get(pk=game_id).title, "Memória 2")

        game_service.delete(game_id)
        self.assertIsNone(game_service.get(game_id))

    def test_get_all_newest_first(self):
        first = make_video("Primeiro")
        second = make_video("Segundo")
        self.assertEqual(video_service.get_all(), [second, first])

    def test_unknown_field_is_rejected(self):
        with self.assertRaises(ValueError), self.assertLogs("api.content_services", level="ERROR"):
            game_service.create({"title": "X", "url": "https://x", "duration": 3})

    def test_update_missing_record_propagates(self):
        with self.assertRaises(Game.DoesNotExist), self.assertLogs("api.content_services", level="ERROR"):
            game_service.update(999, {"title": "Nada"})

    @override_settings(CONTENT_STORE_CONFIGURED=False)
    def test_demo_mode_reads_empty_and_writes_fail(self):
        make_game()

        self.assertEqual(game_service.get_all(), [])
        self.assertIsNone(game_service.get(1))
        with self.assertRaises(StoreNotConfiguredError):
            game_service.create({"title": "X", "url": "https://x"})
        self.assertEqual(Game.objects.count(), 1)


class VideoServiceTests(TestCase):

    def test_series_helpers(self):
        make_episode("zaazu", 2, series_title="Turma do Zaazu")
        make_episode("zaazu", 1, series_title="Turma do Zaazu")
        make_episode("zaazu", 1, season_number=2, series_title="Turma do Zaazu")
        make_episode("bichos", 1, series_title="Bichos")
        make_video("Avulso")

        series = {item.series_id: item for item in video_service.get_all_series()}
        self.assertEqual(series["zaazu"].total_episodes, 3)
        self.assertEqual(
            [(v.season_number, v.episode_number) for v in video_service.get_videos_by_series("zaazu")],
            [(1, 1), (1, 2), (2, 1)],
        )
        self.assertEqual(video_service.get_next_episode_number("zaazu"), 3)
        self.assertEqual(video_service.get_next_episode_number("zaazu", 2), 2)
        self.assertEqual(video_service.get_next_episode_number("nova"), 1)
        self.assertEqual(video_service.get_existing_series_titles(), ["Bichos", "Turma do Zaazu"])

    def test_upload_thumbnail_points_record_to_blob(self):
        video = make_video()
        image = SimpleUploadedFile("capa.png", b"\x89PNG fake", content_type="image/png")

        url = video_service.upload_thumbnail(video.pk, image)

        self.assertIn(f"videos/thumbnails/{video.pk}", url)
        self.assertEqual(Video.objects.get(pk=video.pk).thumbnail, url)


class AvatarServiceTests(TestCase):

    def test_svg_upload_creates_record(self):
        upload = SimpleUploadedFile("leao.svg", SVG, content_type="image/svg+xml")

        avatar = Avatar.objects.get(pk=avatar_service.create_from_svg(upload, "Leão feliz", "neutro"))

        self.assertIn("avatars/", avatar.svg_url)
        self.assertTrue(avatar.svg_url.endswith("_Le_o_feliz.svg"))
        self.assertEqual(avatar.file_name, "leao.svg")
        self.assertEqual(avatar.category, "neutro")

    def test_failed_create_removes_uploaded_svg(self):
        upload = SimpleUploadedFile("orfao.svg", SVG, content_type="image/svg+xml")

        with mock.patch.object(avatar_service, "create", side_effect=ValueError("falhou")), \
                self.assertLogs("api.content_services", level="WARNING"), \
                self.assertRaises(ValueError):
            avatar_service.create_from_svg(upload, "Orfao")

        _, files = default_storage.listdir("avatars")
        self.assertFalse([name for name in files if name.endswith("_Orfao.svg")])
        self.assertEqual(Avatar.objects.count(), 0)

    def test_rejects_non_svg(self):
        upload = SimpleUploadedFile("leao.png", b"png", content_type="image/png")
        with self.assertRaisesMessage(BlobUploadError, "O arquivo deve ser um SVG"):
            avatar_service.create_from_svg(upload, "Leão")
        self.assertEqual(Avatar.objects.count(), 0)

    @override_settings(AVATAR_MAX_SVG_BYTES=10)
    def test_rejects_large_svg(self):
        upload = SimpleUploadedFile("leao.svg", SVG, content_type="image/svg+xml")
        with self.assertRaises(BlobUploadError):
            avatar_service.create_from_svg(upload, "Leão")


class AchievementAndLimitTests(TestCase):

    def test_templates_cover_every_achievement_type(self):
        self.assertEqual({template["type"] for template in ACHIEVEMENT_TEMPLATES},
                         {value for value, _ in Achievement.TYPES})

    def test_get_by_type_returns_active_only(self):
        Achievement.objects.create(type="explorer", name="Explorador", target_value=3)
        Achievement.objects.create(type="explorer", name="Antiga", is_active=False)
        Achievement.objects.create(type="daily_goal", name="Meta")

        self.assertEqual([a.name for a in achievement_service.get_by_type("explorer")], ["Explorador"])

    def test_daily_time_limit_create_then_update(self):
        created = daily_time_limit_service.create_or_update("2-6", {"educativo_limit": 25})

        self.assertEqual(created.entretenimento_limit, 30)
        self.assertEqual(created.atividade_limit, 20)
        self.assertEqual(created.educativo_limit, 25)
        self.assertEqual(created.reward_title, "Explorador do Dia")

        updated = daily_time_limit_service.create_or_update("2-6", {"atividade_limit": 40})

        self.assertEqual(updated.pk, created.pk)
        self.assertEqual(updated.atividade_limit, 40)
        self.assertIsNone(daily_time_limit_service.get_by_age_group("7-9"))

    def test_daily_time_limit_keeps_zero_minutes(self):
        created = daily_time_limit_service.create_or_update("7-9", {"atividade_limit": 0, "educativo_limit": None})

        self.assertEqual(created.atividade_limit, 0)
        self.assertEqual(created.educativo_limit, 15)
