from flask import Blueprint, jsonify

import config
from state_store import store

health_bp = Blueprint('health', __name__)


@health_bp.route('/health')
def health_check():
    """Process health plus advanced-mode configuration status"""
    configured = bool(config.get_api_key_for_provider())
    return jsonify({
        'status': 'healthy',
        'provider': config.PROVIDER,
        'model': config.get_model_for_provider(),
        'advanced_configured': configured,
        'sessions': len(store),
    }), 200
