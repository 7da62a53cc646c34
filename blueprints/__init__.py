from .core import core_blueprint
from .calc import calc_blueprint
from .advanced import advanced_blueprint
from .health import health_bp

bps = [core_blueprint, calc_blueprint, advanced_blueprint, health_bp]
