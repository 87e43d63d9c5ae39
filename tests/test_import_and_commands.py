from io import StringIO

import tablib
from django.core.management import CommandError, call_command
from django.test import TestCase, override_settings

from api.models import Grid, Video
from api.resources import VideoResource
from tests.factories import make_grid


class VideoImportTests(TestCase):

    def dataset(self, *rows):
        headers = ['id', 'title', 'url', 'series_title', 'season_number', 'episode_number', 'is_active']
        return tablib.Dataset(*rows, headers=headers)

    def test_series_id_is_derived_from_title(self):
        dataset = self.dataset(
            ['', 'Episódio 1', 'https://videos.zaazu.app/1.mp4', 'Turma do Zaazu', '', 1, '1'],
            ['', 'Episódio 2', 'https://videos.zaazu.app/2.mp4', 'Turma do Zaazu', 2, 1, '1'],
        )

        result = VideoResource().import_data(dataset, dry_run=False)

        self.assertFalse(result.has_errors())
        videos = Video.objects.order_by('title')
        self.assertEqual({video.series_id for video in videos}, {'turma-do-zaazu'})
        self.assertEqual([video.season_number for video in videos], [1, 2])

    def test_rows_without_title_are_skipped(self):
        dataset = self.dataset(['', '  ', 'https://videos.zaazu.app/x.mp4', '', 1, '', '1'])

        VideoResource().import_data(dataset, dry_run=False)

        self.assertEqual(Video.objects.count(), 0)


class CreateDefaultGridsCommandTests(TestCase):

    def test_creates_one_grid_per_tag(self):
        out = StringIO()
        call_command('create_default_grids', stdout=out)

        self.assertEqual(sorted(Grid.objects.values_list('tag', flat=True)),
                         ['atividade', 'educativo', 'entretenimento'])
        self.assertIn('3 grade(s) criada(s)', out.getvalue())

    def test_dry_run_writes_nothing(self):
        call_command('create_default_grids', '--dry-run', stdout=StringIO())
        self.assertEqual(Grid.objects.count(), 0)

    def test_existing_grids_are_left_alone(self):
        make_grid()
        call_command('create_default_grids', stdout=StringIO())
        self.assertEqual(Grid.objects.count(), 1)

    @override_settings(CONTENT_STORE_CONFIGURED=False)
    def test_demo_mode_fails_without_writing(self):
        with self.assertRaisesMessage(CommandError, "Armazenamento de conteúdo não está configurado"):
            call_command('create_default_grids', stdout=StringIO())
        self.assertEqual(Grid.objects.count(), 0)
