from flask import Blueprint

advanced_blueprint = Blueprint('advanced_bp', __name__, url_prefix='/api')

from . import routes
