"""
Video configuration resolution and administration.

A configuration row is scoped to a tenant and, optionally, an area. Lookups
for a visitor try the area scope first and fall back to the tenant-wide row.
"""

import logging
from datetime import datetime

from sqlalchemy.dialects import postgresql, sqlite

from wifigate.models import db, VideoConfig, DEFAULT_MIN_DURATION
from wifigate.services.normalize import MAX_INT, coerce_bool, coerce_int, optional_text, require_text

logger = logging.getLogger(__name__)

# Dialects with INSERT ... ON CONFLICT DO UPDATE support
_UPSERT_INSERTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


def _active_for_scope(tenant_id: str, area_id: str | None) -> VideoConfig | None:
    query = VideoConfig.query.filter_by(tenant_id=tenant_id, active=True)
    if area_id is None:
        query = query.filter(VideoConfig.area_id.is_(None))
    else:
        query = query.filter(VideoConfig.area_id == area_id)
    # Most recently updated row wins if a scope ever holds duplicates
    return query.order_by(VideoConfig.updated_at.desc(), VideoConfig.id.desc()).first()


def resolve_config(tenant_id, area_id=None) -> VideoConfig | None:
    """Return the active config for the area, else the tenant-wide one.

    None means the tenant has not configured gating for this scope.
    """
    tenant_id = optional_text(tenant_id)
    if tenant_id is None:
        return None

    area_id = optional_text(area_id)
    if area_id is not None:
        config = _active_for_scope(tenant_id, area_id)
        if config is not None:
            return config

    return _active_for_scope(tenant_id, None)


def list_configs(tenant_id) -> list[VideoConfig]:
    tenant_id = require_text(tenant_id, "tenant_id")
    return VideoConfig.query.filter_by(tenant_id=tenant_id).order_by(
        VideoConfig.created_at.desc(), VideoConfig.id.desc()
    ).all()


def upsert_config(tenant_id, video_url, area_id=None, label=None, video_label=None,
                  min_duration=None, active=True) -> VideoConfig:
    """Create or update the config for the (tenant_id, area_id) scope.

    The row identifier and created_at of an existing scope are preserved.
    min_duration falls back to the default for anything that is not a
    positive integer.
    """
    tenant_id = require_text(tenant_id, "tenant_id")
    video_url = require_text(video_url, "video_url")
    area_id = optional_text(area_id)
    area_key = area_id or ""

    now = datetime.utcnow()
    values = {
        "label": optional_text(label),
        "video_url": video_url,
        "video_label": optional_text(video_label),
        "min_duration": coerce_int(min_duration, DEFAULT_MIN_DURATION, minimum=1, maximum=MAX_INT),
        "active": coerce_bool(active),
        "updated_at": now,
    }

    insert = _UPSERT_INSERTS.get(db.engine.dialect.name)
    if insert is None:
        _lookup_then_write(tenant_id, area_id, values)
    else:
        stmt = insert(VideoConfig.__table__).values(
            tenant_id=tenant_id,
            area_id=area_id,
            area_key=area_key,
            created_at=now,
            **values,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=["tenant_id", "area_key"],
            set_=values,
        )
        db.session.execute(stmt)
        db.session.commit()

    config = VideoConfig.query.filter_by(tenant_id=tenant_id, area_key=area_key).first()
    logger.info(f"Saved config {config.id} for tenant '{tenant_id}' (area: {area_id or 'default'})")
    return config


def _lookup_then_write(tenant_id: str, area_id: str | None, values: dict) -> None:
    """Upsert for dialects without ON CONFLICT; the unique constraint still rejects a racing duplicate."""
    config = VideoConfig.query.filter_by(tenant_id=tenant_id, area_key=area_id or "").first()
    if config is None:
        config = VideoConfig(tenant_id=tenant_id, area_id=area_id, area_key=area_id or "")
        db.session.add(config)
    for key, value in values.items():
        setattr(config, key, value)
    db.session.commit()


def delete_config(config_id: int) -> int:
    """Delete a config by id. Views that referenced it keep their snapshots."""
    deleted = VideoConfig.query.filter_by(id=config_id).delete()
    db.session.commit()
    logger.info(f"Deleted config {config_id} ({deleted} row(s))")
    return deleted
