import logging
from flask import Blueprint, jsonify, request
from sqlalchemy.exc import SQLAlchemyError

from wifigate.models import db
from wifigate.routes.common import json_body, error_response, store_error
from wifigate.services.configs import resolve_config
from wifigate.services.context import context_service
from wifigate.services.normalize import MissingFieldError
from wifigate.services.views import record_view

logger = logging.getLogger(__name__)

journey_bp = Blueprint('journey', __name__, url_prefix='/api')


def skip_gating():
    return jsonify({'skip': True})


@journey_bp.route('/config/journey')
def journey():
    """Resolve the video a visitor must watch. Never fails: anything missing means skip."""
    session_key = request.args.get('sk', '').strip()
    if not session_key:
        return skip_gating()

    context = context_service.resolve(session_key)
    if context is None:
        return skip_gating()

    try:
        config = resolve_config(context.tenant_id, context.area_id)
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error(f"Config lookup failed for tenant '{context.tenant_id}': {e}")
        return skip_gating()

    if config is None:
        logger.info(f"No config for tenant '{context.tenant_id}' (area: {context.area_id}), skipping")
        return skip_gating()

    return jsonify({
        'skip': False,
        'videoUrl': config.video_url,
        'videoLabel': config.video_label,
        'minDuration': config.min_duration,
        'context': context.to_dict(),
    })


@journey_bp.route('/view', methods=['POST'])
def record():
    data = json_body()
    try:
        record_view(
            tenant_id=data.get('tenant_id'),
            area_id=data.get('area_id'),
            area_name=data.get('area_name'),
            customer_id=data.get('customer_id'),
            customer_email=data.get('customer_email'),
            video_url=data.get('video_url'),
            video_label=data.get('video_label'),
            seconds_watched=data.get('seconds_watched'),
            completed=data.get('completed'),
            session_key=data.get('session_key'),
        )
    except MissingFieldError as e:
        return error_response(str(e), 400)
    except SQLAlchemyError as e:
        return store_error(e)

    return jsonify({'success': True})
