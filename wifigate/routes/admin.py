from flask import Blueprint, jsonify, request
from sqlalchemy.exc import SQLAlchemyError

from wifigate.routes.common import json_body, error_response, store_error
from wifigate.services.areas import area_service, DirectoryError
from wifigate.services.configs import list_configs, upsert_config, delete_config
from wifigate.services.normalize import MissingFieldError
from wifigate.services.stats import compute_stats, InvalidDateError

admin_bp = Blueprint('admin', __name__, url_prefix='/api')


@admin_bp.route('/configs')
def configs():
    """List all configs of a tenant, newest first."""
    try:
        rows = list_configs(request.args.get('tenant_id'))
    except MissingFieldError as e:
        return error_response(str(e), 400)
    except SQLAlchemyError as e:
        return store_error(e)

    return jsonify([config.to_dict() for config in rows])


@admin_bp.route('/config', methods=['POST'])
def save_config():
    data = json_body()
    try:
        config = upsert_config(
            tenant_id=data.get('tenant_id'),
            video_url=data.get('video_url'),
            area_id=data.get('area_id'),
            label=data.get('label'),
            video_label=data.get('video_label'),
            min_duration=data.get('min_duration'),
            active=data.get('active', True),
        )
    except MissingFieldError as e:
        return error_response(str(e), 400)
    except SQLAlchemyError as e:
        return store_error(e)

    return jsonify({'success': True, 'data': config.to_dict()})


@admin_bp.route('/config/<int:config_id>', methods=['DELETE'])
def remove_config(config_id):
    try:
        delete_config(config_id)
    except SQLAlchemyError as e:
        return store_error(e)

    return jsonify({'success': True})


@admin_bp.route('/stats')
def stats():
    try:
        report = compute_stats(
            request.args.get('tenant_id'),
            date_from=request.args.get('from'),
            date_to=request.args.get('to'),
        )
    except (MissingFieldError, InvalidDateError) as e:
        return error_response(str(e), 400)
    except SQLAlchemyError as e:
        return store_error(e)

    return jsonify(report.to_dict())


@admin_bp.route('/areas')
def areas():
    """List the known areas of a tenant for filter dropdowns."""
    try:
        rows = area_service.list_areas(request.args.get('tenant_id'))
    except MissingFieldError as e:
        return error_response(str(e), 400)
    except DirectoryError as e:
        return error_response(str(e), 500)
    except SQLAlchemyError as e:
        return store_error(e)

    return jsonify([area.to_dict() for area in rows])
