from flask import Blueprint

calc_blueprint = Blueprint('calc_bp', __name__, url_prefix='/api')

from . import routes
