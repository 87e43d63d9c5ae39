import random

from django.test import TestCase, override_settings

from api import grid_service
from api.content_catalog import ContentCatalog
from api.exceptions import StoreNotConfiguredError
from api.models import Grid, GridRow
from tests.factories import make_game, make_grid, make_row, make_video


class GridActivationTests(TestCase):

    def test_creating_active_grid_deactivates_same_tag_only(self):
        old = make_grid("Antiga", tag="educativo", is_active=True)
        other_tag = make_grid("Outra", tag="atividade", is_active=True)

        new_id = grid_service.create_grid({"name": "Nova", "tag": "educativo", "is_active": True})

        old.refresh_from_db()
        other_tag.refresh_from_db()
        self.assertFalse(old.is_active)
        self.assertTrue(other_tag.is_active)
        self.assertTrue(Grid.objects.get(pk=new_id).is_active)

    def test_activating_second_grid_flips_first(self):
        first_id = grid_service.create_grid({"name": "Primeira", "tag": "educativo"})
        second_id = grid_service.create_grid({"name": "Segunda", "tag": "educativo"})

        grid_service.set_grid_active(first_id, True)
        self.assertTrue(Grid.objects.get(pk=first_id).is_active)

        grid_service.set_grid_active(second_id, True)
        self.assertFalse(Grid.objects.get(pk=first_id).is_active)
        self.assertTrue(Grid.objects.get(pk=second_id).is_active)

    def test_at_most_one_active_grid_per_tag_after_any_sequence(self):
        ids = [grid_service.create_grid({"name": f"G{i}", "tag": "entretenimento"}) for i in range(4)]
        rng = random.Random(7)

        for _ in range(25):
            grid_service.set_grid_active(rng.choice(ids), rng.choice([True, False]))
            active = Grid.objects.filter(tag="entretenimento", is_active=True).count()
            self.assertLessEqual(active, 1)

    def test_update_grid_with_is_active_deactivates_siblings(self):
        first = make_grid("A", tag="atividade", is_active=True)
        second = make_grid("B", tag="atividade")

        grid_service.update_grid(second.pk, {"is_active": True, "name": "B2"})

        first.refresh_from_db()
        second.refresh_from_db()
        self.assertFalse(first.is_active)
        self.assertTrue(second.is_active)
        self.assertEqual(second.name, "B2")

    def test_get_active_grid_by_tag(self):
        make_grid("Educativa", tag="educativo", is_active=True)
        fun = make_grid("Diversão", tag="entretenimento", is_active=True)

        self.assertEqual(grid_service.get_active_grid("educativo").name, "Educativa")
        self.assertEqual(grid_service.get_active_grid().pk, fun.pk)
        self.assertIsNone(grid_service.get_active_grid("atividade"))


class GridCrudTests(TestCase):

    def test_create_grid_rejects_unknown_field_and_tag(self):
        with self.assertRaises(ValueError):
            grid_service.create_grid({"name": "X", "tag": "entretenimento", "color": "red"})
        with self.assertRaises(ValueError):
            grid_service.create_grid({"name": "X", "tag": "musica"})

    def test_get_grids_newest_first_with_ordered_rows(self):
        older = make_grid("Velha")
        newer = make_grid("Nova")
        make_row(newer, "Segunda", order=1)
        make_row(newer, "Primeira", order=0)

        grids = grid_service.get_grids()

        self.assertEqual([grid.pk for grid in grids], [newer.pk, older.pk])
        self.assertEqual([row.title for row in grids[0].rows.all()], ["Primeira", "Segunda"])

    def test_get_grid_missing_returns_none(self):
        self.assertIsNone(grid_service.get_grid(999))

    def test_delete_grid_removes_all_rows(self):
        grid = make_grid()
        make_row(grid, "A", order=0)
        make_row(grid, "B", order=1)

        self.assertTrue(grid_service.delete_grid(grid.pk))

        self.assertEqual(grid_service.get_grid_rows(grid.pk), [])
        self.assertFalse(Grid.objects.filter(pk=grid.pk).exists())
        self.assertFalse(grid_service.delete_grid(grid.pk))

    def test_create_default_grids_only_once(self):
        created = grid_service.create_default_grids()

        self.assertEqual(len(created), 3)
        active = Grid.objects.filter(is_active=True)
        self.assertEqual([grid.tag for grid in active], ["entretenimento"])
        for grid_id in created:
            rows = grid_service.get_grid_rows(grid_id)
            self.assertEqual(len(rows), 1)
            self.assertEqual(rows[0].title, "Conteúdo em Destaque")
            self.assertEqual(rows[0].max_items, 6)
            self.assertIsNone(rows[0].content_type)

        self.assertEqual(grid_service.create_default_grids(), [])
        self.assertEqual(Grid.objects.count(), 3)


class GridRowTests(TestCase):

    def setUp(self):
        self.grid = make_grid()

    def test_create_row_appends_at_end_by_default(self):
        first = grid_service.create_grid_row(self.grid.pk, {"title": "A"})
        second = grid_service.create_grid_row(self.grid.pk, {"title": "B", "content_type": ""})

        self.assertEqual(GridRow.objects.get(pk=first).order, 0)
        row = GridRow.objects.get(pk=second)
        self.assertEqual(row.order, 1)
        self.assertIsNone(row.content_type)
        self.assertEqual(row.max_items, 10)

    def test_create_row_for_missing_grid(self):
        with self.assertRaises(Grid.DoesNotExist):
            grid_service.create_grid_row(999, {"title": "A"})

    def test_update_row_cannot_shrink_below_item_count(self):
        row = make_row(self.grid, max_items=3)
        for content_id in ("1", "2", "3"):
            grid_service.add_item_to_row(row.pk, {"content_id": content_id, "content_type": "video"})

        with self.assertRaises(ValueError):
            grid_service.update_grid_row(row.pk, {"max_items": 2})

    def test_update_row_resequences_items(self):
        row = make_row(self.grid)
        items = [grid_service.make_item("9", "game", 5), grid_service.make_item("4", "video", 7)]

        updated = grid_service.update_grid_row(row.pk, {"title": "Nova", "items": items})

        self.assertEqual(updated.title, "Nova")
        self.assertEqual([item["order"] for item in updated.items], [0, 1])

    def test_create_row_rejects_zero_max_items(self):
        with self.assertRaises(ValueError):
            grid_service.create_grid_row(self.grid.pk, {"title": "Vazia", "max_items": 0})
        self.assertEqual(grid_service.get_grid_rows(self.grid.pk), [])

    def test_update_row_rejects_zero_max_items(self):
        row = make_row(self.grid, max_items=3)
        with self.assertRaises(ValueError):
            grid_service.update_grid_row(row.pk, {"max_items": 0})
        row.refresh_from_db()
        self.assertEqual(row.max_items, 3)

    def test_type_change_refused_while_row_holds_other_types(self):
        row = make_row(self.grid)
        grid_service.add_item_to_row(row.pk, {"content_id": "1", "content_type": "video"})

        with self.assertRaises(ValueError):
            grid_service.update_grid_row(row.pk, {"content_type": "game"})

        row.refresh_from_db()
        self.assertIsNone(row.content_type)
        self.assertEqual(grid_service.update_grid_row(row.pk, {"content_type": "video"}).content_type, "video")

    def test_update_row_rejects_repeated_or_foreign_items(self):
        row = make_row(self.grid, content_type="game")
        repeated = [grid_service.make_item("4", "game", 0), grid_service.make_item("4", "game", 1)]
        foreign = [grid_service.make_item("4", "video", 0)]

        with self.assertRaises(ValueError):
            grid_service.update_grid_row(row.pk, {"items": repeated})
        with self.assertRaises(ValueError):
            grid_service.update_grid_row(row.pk, {"items": foreign})

        row.refresh_from_db()
        self.assertEqual(row.items, [])

    def test_reorder_grid_rows(self):
        a = make_row(self.grid, "A", order=0)
        b = make_row(self.grid, "B", order=1)
        c = make_row(self.grid, "C", order=2)

        grid_service.reorder_grid_rows(self.grid.pk, [c.pk, a.pk, b.pk])

        self.assertEqual([row.title for row in grid_service.get_grid_rows(self.grid.pk)], ["C", "A", "B"])

    def test_delete_row(self):
        row = make_row(self.grid)
        self.assertTrue(grid_service.delete_grid_row(row.pk))
        self.assertFalse(grid_service.delete_grid_row(row.pk))


class RowItemTests(TestCase):

    def setUp(self):
        self.grid = make_grid()

    def add(self, row, content_id, content_type="video"):
        return grid_service.add_item_to_row(row.pk, {"content_id": content_id, "content_type": content_type})

    def stored_items(self, row):
        return GridRow.objects.get(pk=row.pk).items

    def test_add_assigns_id_and_order(self):
        row = make_row(self.grid)

        result = self.add(row, 12)

        self.assertTrue(result.ok)
        self.assertEqual(result.item["content_id"], "12")
        self.assertEqual(result.item["order"], 0)
        self.assertFalse(result.item["is_series"])
        self.assertTrue(result.item["id"])
        self.assertEqual(self.stored_items(row), [result.item])

    def test_capacity_is_never_exceeded(self):
        row = make_row(self.grid, max_items=3)
        for content_id in range(3):
            self.assertTrue(self.add(row, content_id).ok)
        before = self.stored_items(row)

        result = self.add(row, 99)

        self.assertFalse(result.ok)
        self.assertEqual(result.message, "Esta linha já atingiu o limite máximo de 3 itens.")
        self.assertEqual(self.stored_items(row), before)

    def test_fixed_type_row_rejects_other_types(self):
        row = make_row(self.grid, content_type="game")

        result = self.add(row, 1, "video")

        self.assertFalse(result.ok)
        self.assertEqual(
            result.message,
            'Esta linha só aceita conteúdo do tipo "game". Você está tentando adicionar "video".',
        )
        self.assertEqual(self.stored_items(row), [])
        self.assertTrue(self.add(row, 1, "game").ok)

    def test_series_item_is_not_a_video(self):
        row = make_row(self.grid, content_type="video")
        result = self.add(row, "turma-do-zaazu", "series")
        self.assertFalse(result.ok)

    def test_mixed_row_accepts_any_type(self):
        row = make_row(self.grid)
        for content_id, content_type in (("1", "video"), ("s1", "series"), ("2", "game"), ("3", "activity")):
            self.assertTrue(self.add(row, content_id, content_type).ok)
        self.assertTrue(self.stored_items(row)[1]["is_series"])

    def test_duplicate_content_is_rejected(self):
        row = make_row(self.grid)
        self.add(row, 5)

        result = self.add(row, "5")

        self.assertFalse(result.ok)
        self.assertEqual(result.message, "Este conteúdo já foi adicionado à lista.")
        self.assertEqual(len(self.stored_items(row)), 1)

    def test_video_and_game_with_same_id_both_fit_a_mixed_row(self):
        row = make_row(self.grid)

        self.assertTrue(self.add(row, 1, "video").ok)
        result = self.add(row, 1, "game")

        self.assertTrue(result.ok)
        self.assertEqual([(item["content_type"], item["content_id"]) for item in self.stored_items(row)],
                         [("video", "1"), ("game", "1")])
        self.assertFalse(self.add(row, "1", "game").ok)

    def test_invalid_content_type(self):
        row = make_row(self.grid)
        self.assertFalse(self.add(row, 1, "podcast").ok)

    def test_remove_resequences(self):
        row = make_row(self.grid)
        ids = [self.add(row, content_id).item["id"] for content_id in ("a", "b", "c")]

        result = grid_service.remove_item_from_row(row.pk, ids[0])

        self.assertTrue(result.ok)
        items = self.stored_items(row)
        self.assertEqual([item["content_id"] for item in items], ["b", "c"])
        self.assertEqual([item["order"] for item in items], [0, 1])

    def test_remove_unknown_item(self):
        row = make_row(self.grid)
        self.add(row, "a")

        result = grid_service.remove_item_from_row(row.pk, "nope")

        self.assertFalse(result.ok)
        self.assertEqual(result.message, "Item não encontrado nesta linha.")
        self.assertEqual(len(self.stored_items(row)), 1)

    def test_missing_row_raises(self):
        with self.assertRaises(GridRow.DoesNotExist):
            grid_service.add_item_to_row(999, {"content_id": "1", "content_type": "video"})

    def test_reorder_sets_order_to_index(self):
        row = make_row(self.grid)
        for content_id in ("a", "b", "c", "d"):
            self.add(row, content_id)
        items = self.stored_items(row)
        permuted = [items[2], items[0], items[3], items[1]]

        grid_service.reorder_row_items(row.pk, permuted)

        stored = self.stored_items(row)
        self.assertEqual([item["content_id"] for item in stored], ["c", "a", "d", "b"])
        self.assertEqual([item["order"] for item in stored], [0, 1, 2, 3])

    def test_randomize_keeps_items_and_dense_order(self):
        row = make_row(self.grid)
        for content_id in range(6):
            self.add(row, content_id)

        items = grid_service.randomize_row_items(row.pk, rng=random.Random(3))

        self.assertEqual(sorted(item["content_id"] for item in items), [str(i) for i in range(6)])
        self.assertEqual([item["order"] for item in items], list(range(6)))
        self.assertEqual(self.stored_items(row), items)


class DanglingItemTests(TestCase):

    def test_reports_items_whose_content_was_deleted(self):
        grid = make_grid()
        row = make_row(grid, "Mix")
        video = make_video()
        game = make_game()
        grid_service.add_item_to_row(row.pk, {"content_id": video.pk, "content_type": "video"})
        grid_service.add_item_to_row(row.pk, {"content_id": game.pk, "content_type": "game"})
        game.delete()

        dangling = grid_service.find_dangling_items(grid.pk, ContentCatalog.load())

        self.assertEqual(len(dangling), 1)
        self.assertEqual(dangling[0]["row_title"], "Mix")
        self.assertEqual(dangling[0]["item"]["content_type"], "game")


@override_settings(CONTENT_STORE_CONFIGURED=False)
class DemoModeTests(TestCase):

    def test_writes_raise_before_touching_the_database(self):
        with self.assertRaises(StoreNotConfiguredError):
            grid_service.create_grid({"name": "Demo", "tag": "entretenimento", "is_active": True})
        with self.assertRaises(StoreNotConfiguredError):
            grid_service.create_default_grids()
        self.assertEqual(Grid.objects.count(), 0)

        grid = make_grid()
        row = make_row(grid)
        with self.assertRaises(StoreNotConfiguredError):
            grid_service.create_grid_row(grid.pk, {"title": "A"})
        with self.assertRaises(StoreNotConfiguredError):
            grid_service.add_item_to_row(row.pk, {"content_id": "1", "content_type": "video"})
        with self.assertRaises(StoreNotConfiguredError):
            grid_service.delete_grid(grid.pk)
        self.assertEqual(GridRow.objects.get(pk=row.pk).items, [])
        self.assertTrue(Grid.objects.filter(pk=grid.pk).exists())

    def test_reads_are_empty(self):
        grid = make_grid(is_active=True)
        make_row(grid)

        self.assertEqual(grid_service.get_grids(), [])
        self.assertIsNone(grid_service.get_grid(grid.pk))
        self.assertIsNone(grid_service.get_active_grid())
        self.assertEqual(grid_service.get_grid_rows(grid.pk), [])


class EndToEndScenarioTests(TestCase):

    def test_kids_fun_row_capacity(self):
        grid_id = grid_service.create_grid({"name": "Kids Fun", "tag": "entretenimento", "is_active": True})
        row_id = grid_service.create_grid_row(grid_id, {"title": "Top Picks", "max_items": 2})

        first = grid_service.add_item_to_row(row_id, {"content_id": "v1", "content_type": "video"})
        second = grid_service.add_item_to_row(row_id, {"content_id": "v2", "content_type": "video"})
        third = grid_service.add_item_to_row(row_id, {"content_id": "v3", "content_type": "video"})

        self.assertTrue(first.ok and second.ok)
        self.assertFalse(third.ok)
        self.assertEqual(third.message, "Esta linha já atingiu o limite máximo de 2 itens.")
        items = grid_service.get_grid_rows(grid_id)[0].items
        self.assertEqual([item["content_id"] for item in items], ["v1", "v2"])

    def test_two_educational_grids(self):
        first_id = grid_service.create_grid({"name": "Educa 1", "tag": "educativo"})
        second_id = grid_service.create_grid({"name": "Educa 2", "tag": "educativo"})

        grid_service.set_grid_active(first_id, True)
        grid_service.set_grid_active(second_id, True)

        self.assertFalse(grid_service.get_grid(first_id).is_active)
        self.assertTrue(grid_service.get_grid(second_id).is_active)
