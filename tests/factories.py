"""Small builders for test records."""

from django.contrib.auth.models import User

from api.models import Activity, Game, Grid, GridRow, Video


def make_video(title="Vídeo", **kwargs):
    values = {"url": "https://videos.zaazu.app/v.mp4", "duration": 60}
    values.update(kwargs)
    return Video.objects.create(title=title, **values)


def make_episode(series_id, episode_number, season_number=1, **kwargs):
    return make_video(
        title=f"{series_id} T{season_number}E{episode_number}",
        series_id=series_id,
        series_title=kwargs.pop("series_title", series_id.title()),
        season_number=season_number,
        episode_number=episode_number,
        **kwargs,
    )


def make_game(title="Jogo", **kwargs):
    values = {"url": "https://games.zaazu.app/g/index.html"}
    values.update(kwargs)
    return Game.objects.create(title=title, **values)


def make_activity(title="Atividade", **kwargs):
    return Activity.objects.create(title=title, **kwargs)


def make_grid(name="Grade", tag="entretenimento", is_active=False):
    return Grid.objects.create(name=name, tag=tag, is_active=is_active)


def make_row(grid, title="Linha", order=0, max_items=10, content_type=None, items=None):
    return GridRow.objects.create(
        grid=grid, title=title, order=order, max_items=max_items, content_type=content_type, items=items or []
    )


def make_staff(username="admin", password="segredo123", **kwargs):
    values = {"email": f"{username}@zaazu.app", "is_staff": True}
    values.update(kwargs)
    return User.objects.create_user(username=username, password=password, **values)
