from . import core_blueprint
from flask import render_template

from calculator_state import FUNCTIONS
from state_store import store, current_session_id


@core_blueprint.route("/")
def landing():
    state = store.get(current_session_id())
    return render_template("core/index.html", state=state, functions=FUNCTIONS)
