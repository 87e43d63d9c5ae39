"""
Video series aggregation.

A series is never stored: it is computed by grouping Video records that share
a ``series_id``, bucketed by season and sorted by episode number.
"""

from dataclasses import dataclass, field


@dataclass
class VideoSeries:
    series_id: str
    series_title: str
    total_episodes: int = 0
    seasons: dict = field(default_factory=dict)
    thumbnail: str = ""
    tag: str = ""
    category: str = ""
    min_age: int = 2
    is_active: bool = True

    CONTENT_TYPE = 'series'

    @property
    def id(self):
        # Grid items reference a series by its series_id.
        return self.series_id

    @property
    def title(self):
        return self.series_title

    @property
    def description(self):
        return f"{self.total_episodes} episódios"

    def episodes(self):
        """All episodes, season by season."""
        result = []
        for season_number in sorted(self.seasons):
            result.extend(self.seasons[season_number])
        return result

    def to_dict(self):
        return {
            "series_id": self.series_id,
            "series_title": self.series_title,
            "total_episodes": self.total_episodes,
            "thumbnail": self.thumbnail,
            "tag": self.tag,
            "category": self.category,
            "min_age": self.min_age,
            "seasons": {
                str(season): [video.id for video in videos]
                for season, videos in sorted(self.seasons.items())
            },
        }


def group_videos_by_series(videos) -> list[VideoSeries]:
    """
    Group videos into VideoSeries aggregates.

    Videos without ``series_id`` are standalone and skipped. Seasons default
    to 1; episodes inside a season are sorted by ``episode_number`` ascending
    (missing numbers sort first). Series keep the order in which their first
    episode appears in ``videos``.
    """
    series_map = {}

    for video in videos:
        if not video.series_id:
            continue

        series = series_map.get(video.series_id)
        if series is None:
            series = VideoSeries(
                series_id=video.series_id,
                series_title=video.series_title or video.series_id,
                thumbnail=video.thumbnail,
                tag=video.tag,
                category=video.category,
                min_age=video.min_age,
            )
            series_map[video.series_id] = series

        season = video.season_number or 1
        series.seasons.setdefault(season, []).append(video)
        series.total_episodes += 1

    for series in series_map.values():
        for season_videos in series.seasons.values():
            season_videos.sort(key=lambda v: v.episode_number or 0)
        series.is_active = any(v.is_active for v in series.episodes())

    return list(series_map.values())
