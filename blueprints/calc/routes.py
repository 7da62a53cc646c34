from . import calc_blueprint
from flask import request, jsonify, current_app

import config
from calculator import Calculator, ERROR, ANGLE_UNITS
from calculator_state import Action, action_for_key, ADVANCED_STARTED, ADVANCED_SETTLED, CLEAR_HISTORY
from state_store import store, current_session_id

# Only the advanced route may drive the in-flight request flags
_INTERNAL_ACTIONS = {ADVANCED_STARTED, ADVANCED_SETTLED}


def state_payload(state):
    payload = state.to_dict()
    payload["history"] = [record.to_dict() for record in state.history()]
    return payload


@calc_blueprint.route("/state")
def get_state():
    state = store.get(current_session_id())
    return jsonify(state_payload(state))


@calc_blueprint.route("/action", methods=["POST"])
def apply_action():
    data = request.get_json(silent=True) or {}
    action_type = data.get("type", "")

    if not action_type:
        return jsonify({"error": "No action type provided"}), 400
    if action_type in _INTERNAL_ACTIONS:
        return jsonify({"error": f"Action '{action_type}' is not allowed here"}), 400

    try:
        state = store.dispatch(current_session_id(), Action(action_type, data.get("value")))
    except ValueError as e:
        current_app.logger.info("Rejected action %s: %s", action_type, e)
        return jsonify({"error": str(e)}), 400

    return jsonify(state_payload(state))


@calc_blueprint.route("/key", methods=["POST"])
def press_key():
    data = request.get_json(silent=True) or {}
    action = action_for_key(data.get("key", ""))
    session_id = current_session_id()

    if action is None:
        payload = state_payload(store.get(session_id))
        payload["ignored"] = True
        return jsonify(payload)

    state = store.dispatch(session_id, action)
    return jsonify(state_payload(state))


@calc_blueprint.route("/calculate", methods=["POST"])
def calculate():
    """Stateless evaluation: nothing is logged and no answer is remembered."""
    data = request.get_json(silent=True) or {}
    expr = str(data.get("expression", ""))

    if not expr.strip():
        return jsonify({"error": "No expression provided"}), 400

    angle_unit = data.get("angle_unit", config.DEFAULT_ANGLE_UNIT)
    if angle_unit not in ANGLE_UNITS:
        return jsonify({"error": f"Unknown angle unit: {angle_unit}"}), 400

    calc = Calculator(
        expression=expr.strip(),
        last_answer=str(data.get("last_answer", "0")),
        angle_unit=angle_unit,
    )
    result = calc.evaluate()

    # Check if evaluation failed
    if result == ERROR:
        return jsonify({"error": "Invalid expression or calculation error"}), 400

    return jsonify({"result": result, "equation": f"{expr.strip()} ="})


@calc_blueprint.route("/history")
def history():
    state = store.get(current_session_id())
    return jsonify({"history": [record.to_dict() for record in state.history()]})


@calc_blueprint.route("/history/clear", methods=["POST"])
def clear_history():
    state = store.dispatch(current_session_id(), Action(CLEAR_HISTORY))
    return jsonify(state_payload(state))
