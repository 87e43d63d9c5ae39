from django.test import SimpleTestCase, TestCase

from api.content_catalog import (
    KIND_INDIVIDUAL, KIND_SERIES, CatalogEntry, ContentCatalog, ContentPicker, filter_content_by_age,
)
from api.models import Video
from api.series import group_videos_by_series
from tests.factories import make_activity, make_episode, make_game, make_video


class SeriesGroupingTests(SimpleTestCase):

    def video(self, series_id=None, episode=None, season=1, **kwargs):
        return Video(title=f"ep {episode}", series_id=series_id, series_title=kwargs.pop("series_title", None),
                     episode_number=episode, season_number=season, **kwargs)

    def test_total_episodes_equals_group_size(self):
        videos = [self.video("abc", n) for n in (3, 1, 2)] + [self.video()]

        series = group_videos_by_series(videos)

        self.assertEqual(len(series), 1)
        self.assertEqual(series[0].total_episodes, 3)

    def test_episodes_sorted_within_each_season(self):
        videos = [
            self.video("abc", 2, season=2),
            self.video("abc", 3),
            self.video("abc", 1, season=2),
            self.video("abc", 1),
        ]

        seasons = group_videos_by_series(videos)[0].seasons

        self.assertEqual(sorted(seasons), [1, 2])
        self.assertEqual([v.episode_number for v in seasons[1]], [1, 3])
        self.assertEqual([v.episode_number for v in seasons[2]], [1, 2])

    def test_missing_season_defaults_to_first(self):
        video = self.video("abc", 1)
        video.season_number = None

        self.assertEqual(list(group_videos_by_series([video])[0].seasons), [1])

    def test_series_takes_metadata_from_first_video(self):
        first = self.video("abc", 2, series_title="Turma do Zaazu", thumbnail="t.png", tag="educativo", min_age=4)
        second = self.video("abc", 1, thumbnail="other.png")

        series = group_videos_by_series([first, second])[0]

        self.assertEqual(series.title, "Turma do Zaazu")
        self.assertEqual(series.thumbnail, "t.png")
        self.assertEqual(series.tag, "educativo")
        self.assertEqual(series.min_age, 4)
        self.assertEqual(series.id, "abc")

    def test_series_inactive_only_when_every_episode_is(self):
        videos = [self.video("abc", 1, is_active=False), self.video("abc", 2, is_active=True)]
        self.assertTrue(group_videos_by_series(videos)[0].is_active)

        videos[1].is_active = False
        self.assertFalse(group_videos_by_series(videos)[0].is_active)

    def test_filter_content_by_age(self):
        young = CatalogEntry("1", "video", "A", min_age=3)
        older = CatalogEntry("2", "video", "B", min_age=7)

        self.assertEqual(filter_content_by_age([young, older], 5), [young])
        self.assertEqual(filter_content_by_age([young, older], 7), [young, older])


class ContentCatalogTests(TestCase):

    def setUp(self):
        self.episode_1 = make_episode("zaazu", 1, category="Música")
        self.episode_2 = make_episode("zaazu", 2, category="Música")
        self.standalone = make_video("Dança", category="Movimento", min_age=5)
        self.game = make_game("Quebra-cabeça", category="Lógica")
        self.activity = make_activity("Pintura", category="Arte")
        self.catalog = ContentCatalog.load()

    def test_get_resolves_by_explicit_type(self):
        self.assertEqual(self.catalog.get(self.game.pk, "game"), self.game)
        self.assertEqual(self.catalog.get(str(self.activity.pk), "activity"), self.activity)
        self.assertEqual(self.catalog.get("zaazu", "series").total_episodes, 2)
        self.assertIsNone(self.catalog.get(9999, "video"))
        self.assertIsNone(self.catalog.get("zaazu", "video"))

    def test_same_pk_in_two_collections_resolves_per_type(self):
        video = make_video("Vídeo 700", pk=700)
        game = make_game("Jogo 700", pk=700)
        catalog = ContentCatalog.load()

        self.assertEqual(catalog.get(700, "video"), video)
        self.assertEqual(catalog.get("700", "game"), game)
        self.assertIsNone(catalog.get(700, "activity"))

    def test_video_listing_is_series_plus_standalone(self):
        entries = self.catalog.entries_for("video")

        self.assertEqual([entry.content_type for entry in entries], ["series", "video"])
        self.assertEqual(entries[0].total_episodes, 2)
        self.assertEqual(entries[1].content_id, str(self.standalone.pk))

    def test_unknown_type(self):
        with self.assertRaises(ValueError):
            self.catalog.entries_for("podcast")


class ContentPickerTests(TestCase):

    def setUp(self):
        make_episode("zaazu", 1, category="Música", series_title="Turma do Zaazu")
        self.dance = make_video("Dança das cores", category="Movimento", min_age=5, description="Mexa o corpo")
        self.old = make_video("Antigo", is_active=False)
        self.catalog = ContentCatalog.load()

    def test_filter_by_search_category_age_and_kind(self):
        picker = ContentPicker("video", self.catalog)

        self.assertEqual([e.title for e in picker.filter(search="corpo")], ["Dança das cores"])
        self.assertEqual([e.title for e in picker.filter(category="Música")], ["Turma do Zaazu"])
        self.assertEqual([e.title for e in picker.filter(age=3)], ["Turma do Zaazu"])
        self.assertEqual([e.title for e in picker.filter(kind=KIND_SERIES)], ["Turma do Zaazu"])
        self.assertEqual([e.title for e in picker.filter(kind=KIND_INDIVIDUAL)], ["Dança das cores"])

    def test_inactive_content_is_hidden(self):
        titles = [entry.title for entry in ContentPicker("video", self.catalog).filter()]
        self.assertNotIn("Antigo", titles)

    def test_categories(self):
        self.assertEqual(ContentPicker("video", self.catalog).categories(), ["Movimento", "Música"])

    def test_toggle_respects_limit_and_callbacks(self):
        selected, deselected = [], []
        picker = ContentPicker("video", self.catalog, selected=["a"], max_selection=2,
                               on_select=selected.append, on_deselect=deselected.append)

        self.assertTrue(picker.toggle("b").ok)
        blocked = picker.toggle("c")
        self.assertFalse(blocked.ok)
        self.assertEqual(blocked.message, "Limite máximo de 2 itens atingido!")

        self.assertTrue(picker.toggle("a").ok)
        self.assertEqual(picker.selected, ["b"])
        self.assertEqual(selected, ["b"])
        self.assertEqual(deselected, ["a"])
