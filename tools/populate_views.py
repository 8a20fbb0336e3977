#!/usr/bin/env python
"""
Tool to populate the database with demo gating configs and view events.
Configs are saved through the same upsert used by the admin API and views
through the view recorder, so the data looks like real portal traffic.

Usage:
    python tools/populate_views.py populate [OPTIONS]
    python tools/populate_views.py summary --tenant TENANT
    python tools/populate_views.py clear --tenant TENANT
    python tools/populate_views.py --help
"""
import random
import sys
import uuid
from pathlib import Path
from typing import Annotated

import typer

# Add parent directory to path to import wifigate
sys.path.insert(0, str(Path(__file__).parent.parent))

from wifigate.app import create_app
from wifigate.models import db, VideoConfig, VideoView
from wifigate.services.configs import upsert_config
from wifigate.services.stats import compute_stats
from wifigate.services.views import record_view

app = typer.Typer(help="Populate database with demo configs and views for testing.")

VIDEOS = [
    ("https://www.youtube.com/watch?v=dQw4w9WgXcQ", "Welcome to our WiFi"),
    ("https://www.youtube.com/watch?v=9bZkp7q19f0", "Summer promo"),
    ("https://www.youtube.com/watch?v=kJQP7kiw5Fk", "Loyalty programme"),
    ("https://www.youtube.com/watch?v=OPf0YbXqDm0", None),
    ("https://www.youtube.com/watch?v=JGwWNGJdvx8", "New menu"),
]

AREA_NAMES = [
    "Lobby", "Terrace", "Main Hall", "Pool Bar", "Conference Room",
    "Food Court", "Entrance", "Rooftop", "Gate A", "Gate B",
]

EMAIL_DOMAINS = ["example.com", "mail.test", "guest.local"]


def create_demo_configs(tenant: str, areas: list[tuple[str, str]], videos: int) -> list:
    configs = []
    catalog = VIDEOS[:max(1, min(videos, len(VIDEOS)))]

    url, label = catalog[0]
    configs.append(upsert_config(tenant, url, label="Default", video_label=label, min_duration=15))

    for area_id, area_name in areas:
        # Leave some areas on the tenant-wide default
        if random.random() < 0.3:
            continue
        url, label = random.choice(catalog)
        configs.append(upsert_config(
            tenant,
            url,
            area_id=area_id,
            label=area_name,
            video_label=label,
            min_duration=random.choice([10, 15, 20, 30]),
        ))
    return configs


def create_demo_views(tenant: str, areas: list[tuple[str, str]], count: int, customers: int) -> int:
    customer_pool = [
        (f"cust_{i}", f"guest{i}@{random.choice(EMAIL_DOMAINS)}") for i in range(customers)
    ]
    for i in range(count):
        area_id, area_name = random.choice(areas) if areas else (None, None)
        url, label = random.choice(VIDEOS)
        customer_id, email = random.choice(customer_pool) if customer_pool and random.random() > 0.2 else (None, None)
        watched = random.randint(0, 45)

        record_view(
            tenant,
            area_id=area_id,
            # Older clients did not send the names
            area_name=area_name if random.random() > 0.25 else None,
            customer_id=customer_id,
            customer_email=email,
            video_url=url,
            video_label=label if random.random() > 0.5 else None,
            seconds_watched=watched,
            completed=watched >= 15,
            session_key=uuid.uuid4().hex,
        )

        if (i + 1) % 50 == 0:
            typer.echo(f"Recorded {i + 1}/{count} views...")
    return count


def clear_tenant_data(tenant: str) -> dict[str, int]:
    """Remove all configs and views of a tenant."""
    views = VideoView.query.filter_by(tenant_id=tenant).delete(synchronize_session=False)
    configs = VideoConfig.query.filter_by(tenant_id=tenant).delete(synchronize_session=False)
    db.session.commit()
    return {"configs": configs, "views": views}


@app.command()
def populate(
    tenant: Annotated[str, typer.Option("--tenant", "-t", help="Tenant id to populate")] = "demo-tenant",
    areas: Annotated[int, typer.Option("--areas", "-a", help="Number of areas (hotspots)")] = 4,
    videos: Annotated[int, typer.Option("--videos", "-v", help="Number of distinct configured videos")] = 3,
    views: Annotated[int, typer.Option("--views", "-n", help="Number of view events to record")] = 200,
    customers: Annotated[int, typer.Option("--customers", "-c", help="Size of the customer pool")] = 40,
    seed: Annotated[int | None, typer.Option("--seed", help="Random seed for reproducible data")] = None,
    clear: Annotated[bool, typer.Option("--clear", help="Remove the tenant's configs and views first")] = False,
) -> None:
    """Create demo configs and view events for a tenant."""
    if seed is not None:
        random.seed(seed)

    flask_app = create_app()

    with flask_app.app_context():
        if clear:
            results = clear_tenant_data(tenant)
            typer.echo(f"Cleared {results['configs']} configs and {results['views']} views for tenant '{tenant}'")

        area_list = [
            (f"area_{i}", AREA_NAMES[i] if i < len(AREA_NAMES) else f"Area {i}")
            for i in range(areas)
        ]

        typer.echo(f"Saving configs for tenant '{tenant}'...")
        configs = create_demo_configs(tenant, area_list, videos)
        for config in configs:
            scope = config.area_id or "tenant-wide"
            typer.echo(f"  - [{scope}] {config.video_label or config.video_url} ({config.min_duration}s)")

        typer.echo(f"\nRecording {views} views...")
        create_demo_views(tenant, area_list, views, customers)
        typer.echo(f"\nSuccessfully recorded {views} views!")


@app.command()
def clear(
    tenant: Annotated[str, typer.Option("--tenant", "-t", help="Tenant id to clear")] = "demo-tenant",
) -> None:
    """Remove all configs and views of a tenant."""
    flask_app = create_app()

    with flask_app.app_context():
        results = clear_tenant_data(tenant)
        typer.echo(f"Cleared data of '{tenant}':")
        typer.echo(f"  Configs: {results['configs']}")
        typer.echo(f"  Views: {results['views']}")


@app.command()
def summary(
    tenant: Annotated[str, typer.Option("--tenant", "-t", help="Tenant id to summarize")] = "demo-tenant",
    date_from: Annotated[str | None, typer.Option("--from", help="Start date (YYYY-MM-DD)")] = None,
    date_to: Annotated[str | None, typer.Option("--to", help="End date (YYYY-MM-DD), inclusive")] = None,
) -> None:
    """Print the stats report of a tenant."""
    flask_app = create_app()

    with flask_app.app_context():
        report = compute_stats(tenant, date_from=date_from, date_to=date_to)

        typer.echo(f"Statistics for '{tenant}':")
        typer.echo(f"  Views: {report.total_views}")
        typer.echo(f"  Completed: {report.completed_views}")
        typer.echo(f"  Unique customers: {report.unique_customers}")

        typer.echo("\nBy video:")
        for video in report.by_video:
            typer.echo(f"  - {video.video_label or video.video_url}: {video.total} views, "
                       f"{video.completed} completed, {len(video.customers)} customers")

        typer.echo("\nBy location:")
        for location in report.by_location:
            typer.echo(f"  - {location.name or location.area_id}: {location.total} views, {location.completed} completed")


if __name__ == "__main__":
    app()
