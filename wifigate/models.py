from datetime import datetime
from flask_sqlalchemy import SQLAlchemy

db = SQLAlchemy()

DEFAULT_MIN_DURATION = 10


class VideoConfig(db.Model):
    __tablename__ = "configs"
    __table_args__ = (
        db.UniqueConstraint("tenant_id", "area_key", name="uq_configs_tenant_area"),
    )

    id = db.Column(db.Integer, primary_key=True)
    tenant_id = db.Column(db.String(64), nullable=False, index=True)
    area_id = db.Column(db.String(64), nullable=True)
    # area_id or "" so the tenant-wide row is covered by the unique constraint
    area_key = db.Column(db.String(64), nullable=False, default="")
    label = db.Column(db.String(255), nullable=True)
    video_url = db.Column(db.String(512), nullable=False)
    video_label = db.Column(db.String(255), nullable=True)
    min_duration = db.Column(db.Integer, nullable=False, default=DEFAULT_MIN_DURATION)
    active = db.Column(db.Boolean, nullable=False, default=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    def is_tenant_wide(self) -> bool:
        return self.area_id is None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "tenant_id": self.tenant_id,
            "area_id": self.area_id,
            "label": self.label,
            "video_url": self.video_url,
            "video_label": self.video_label,
            "min_duration": self.min_duration,
            "active": self.active,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }


class VideoView(db.Model):
    """A single playback attempt reported by the captive-portal client.

    Rows are append-only; area_name and video_label are snapshots taken when
    the view was recorded and may drift from the current configuration.
    """
    __tablename__ = "views"

    id = db.Column(db.Integer, primary_key=True)
    tenant_id = db.Column(db.String(64), nullable=False, index=True)
    area_id = db.Column(db.String(64), nullable=True)
    area_name = db.Column(db.String(255), nullable=True)
    customer_id = db.Column(db.String(128), nullable=True)
    customer_email = db.Column(db.String(255), nullable=True)
    video_url = db.Column(db.String(512), nullable=True)
    video_label = db.Column(db.String(255), nullable=True)
    session_key = db.Column(db.String(255), nullable=True)
    seconds_watched = db.Column(db.Integer, default=0, nullable=False)
    completed = db.Column(db.Boolean, default=False, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False, index=True)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "tenant_id": self.tenant_id,
            "area_id": self.area_id,
            "area_name": self.area_name,
            "customer_id": self.customer_id,
            "customer_email": self.customer_email,
            "video_url": self.video_url,
            "video_label": self.video_label,
            "session_key": self.session_key,
            "seconds_watched": self.seconds_watched,
            "completed": self.completed,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
