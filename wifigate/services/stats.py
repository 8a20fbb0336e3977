"""
View analytics for a tenant.

Loads the tenant's view events (optionally within a date range) and rolls
them up globally, per video and per location. Video labels missing from the
events themselves are backfilled from the tenant's configuration rows.
"""

import logging
import re
from dataclasses import dataclass, field
from datetime import date, datetime, time, timezone

from wifigate.models import VideoConfig, VideoView
from wifigate.services.normalize import optional_text, require_text

logger = logging.getLogger(__name__)

NOT_AVAILABLE = "N/A"

_DATE_ONLY = re.compile(r'\d{4}-\d{2}-\d{2}')


class InvalidDateError(ValueError):
    """Raised when a date filter cannot be parsed."""


@dataclass
class VideoStats:
    video_url: str
    video_label: str | None = None
    total: int = 0
    completed: int = 0
    customers: set = field(default_factory=set)

    def to_dict(self) -> dict:
        return {
            "video_url": self.video_url,
            "video_label": self.video_label,
            "total": self.total,
            "completed": self.completed,
            "unique_customers": len(self.customers),
        }


@dataclass
class LocationStats:
    area_id: str
    name: str | None = None
    total: int = 0
    completed: int = 0

    def to_dict(self) -> dict:
        return {
            "area_id": self.area_id,
            "name": self.name or self.area_id,
            "total": self.total,
            "completed": self.completed,
        }


@dataclass
class StatsReport:
    total_views: int
    completed_views: int
    unique_customers: int
    by_video: list[VideoStats]
    by_location: list[LocationStats]

    def to_dict(self) -> dict:
        return {
            "total_views": self.total_views,
            "completed_views": self.completed_views,
            "unique_customers": self.unique_customers,
            "by_video": [video.to_dict() for video in self.by_video],
            "by_location": [location.to_dict() for location in self.by_location],
        }


def parse_date_bound(value, end_of_day: bool = False) -> datetime | None:
    """Parse an ISO date or datetime filter into a naive UTC datetime.

    A date-only value covers the whole day: it maps to midnight, or to the
    last instant of the day when end_of_day is set.
    """
    text = optional_text(value)
    if text is None:
        return None

    try:
        if _DATE_ONLY.fullmatch(text):
            day = date.fromisoformat(text)
            return datetime.combine(day, time.max if end_of_day else time.min)
        parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError as e:
        raise InvalidDateError(f"Invalid date '{text}'") from e

    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def aggregate_views(views, video_labels: dict | None = None) -> StatsReport:
    """Roll view events up into a StatsReport.

    Groups keep the order in which their first event appears. A video group
    takes the first label found on its own events, then the configured label
    for its URL. Customers are counted once per distinct non-empty id.
    """
    video_labels = video_labels or {}
    by_video: dict[str, VideoStats] = {}
    by_location: dict[str, LocationStats] = {}
    customers = set()
    total = 0
    completed = 0

    for view in views:
        total += 1
        if view.completed:
            completed += 1
        if view.customer_id:
            customers.add(view.customer_id)

        video_key = view.video_url or NOT_AVAILABLE
        video = by_video.get(video_key)
        if video is None:
            video = by_video[video_key] = VideoStats(video_url=video_key)
        video.total += 1
        if view.completed:
            video.completed += 1
        if view.customer_id:
            video.customers.add(view.customer_id)
        if video.video_label is None and view.video_label:
            video.video_label = view.video_label

        area_key = view.area_id or NOT_AVAILABLE
        location = by_location.get(area_key)
        if location is None:
            location = by_location[area_key] = LocationStats(area_id=area_key)
        location.total += 1
        if view.completed:
            location.completed += 1
        if location.name is None and view.area_name:
            location.name = view.area_name

    for video in by_video.values():
        if video.video_label is None and video.video_url != NOT_AVAILABLE:
            video.video_label = video_labels.get(video.video_url)

    return StatsReport(
        total_views=total,
        completed_views=completed,
        unique_customers=len(customers),
        by_video=list(by_video.values()),
        by_location=list(by_location.values()),
    )


def video_label_lookup(tenant_id: str) -> dict[str, str]:
    """Map video_url to the most recently saved label among the tenant's configs."""
    labels = {}
    configs = VideoConfig.query.filter_by(tenant_id=tenant_id).order_by(
        VideoConfig.updated_at.desc(), VideoConfig.id.desc()
    ).all()
    for config in configs:
        if config.video_label and config.video_url not in labels:
            labels[config.video_url] = config.video_label
    return labels


def load_views(tenant_id: str, start: datetime | None = None, end: datetime | None = None) -> list[VideoView]:
    query = VideoView.query.filter_by(tenant_id=tenant_id)
    if start is not None:
        query = query.filter(VideoView.created_at >= start)
    if end is not None:
        query = query.filter(VideoView.created_at <= end)
    return query.order_by(VideoView.created_at.asc(), VideoView.id.asc()).all()


def compute_stats(tenant_id, date_from=None, date_to=None) -> StatsReport:
    tenant_id = require_text(tenant_id, "tenant_id")
    start = parse_date_bound(date_from)
    end = parse_date_bound(date_to, end_of_day=True)

    views = load_views(tenant_id, start, end)
    labels = video_label_lookup(tenant_id)
    report = aggregate_views(views, labels)
    logger.info(f"Computed stats for tenant '{tenant_id}' over {report.total_views} view(s)")
    return report
