import logging

from wifigate.models import db, VideoView
from wifigate.services.normalize import MAX_INT, coerce_bool, coerce_int, optional_text, require_text

logger = logging.getLogger(__name__)


def record_view(tenant_id, area_id=None, area_name=None, customer_id=None, customer_email=None,
                video_url=None, video_label=None, seconds_watched=None, completed=None,
                session_key=None) -> VideoView:
    """Append one view event. Only tenant_id is required; nothing is deduplicated here."""
    view = VideoView(
        tenant_id=require_text(tenant_id, "tenant_id"),
        area_id=optional_text(area_id),
        area_name=optional_text(area_name),
        customer_id=optional_text(customer_id),
        customer_email=optional_text(customer_email),
        video_url=optional_text(video_url),
        video_label=optional_text(video_label),
        session_key=optional_text(session_key),
        seconds_watched=coerce_int(seconds_watched, 0, minimum=0, maximum=MAX_INT),
        completed=coerce_bool(completed),
    )
    db.session.add(view)
    db.session.commit()
    logger.debug(f"Recorded view {view.id} for tenant '{view.tenant_id}'")
    return view
