from . import advanced_blueprint
from flask import request, jsonify, current_app
import base64
import binascii

import config
from calculator_state import Action, ADVANCED_STARTED, ADVANCED_SETTLED, reduce
from providers import generate_advanced_response, parse_data_url
from state_store import store, current_session_id
from blueprints.calc.routes import state_payload


def calculate_data_url_bytes(data_url: str) -> int:
    """Return decoded byte length for an image data URL (or raw base64)."""
    _, b64data = parse_data_url(data_url)
    return len(base64.b64decode(b64data, validate=False))


@advanced_blueprint.route("/advanced", methods=["POST"])
def advanced():
    data = request.get_json(silent=True) or {}
    text = str(data.get("text") or "").strip()
    image = data.get("image") or None

    if image is not None:
        if not isinstance(image, str):
            return jsonify({"error": "Image must be a data URL string"}), 400
        try:
            size = calculate_data_url_bytes(image)
        except (binascii.Error, ValueError):
            return jsonify({"error": "Image is not valid base64 data"}), 400
        if size > config.MAX_IMAGE_SIZE:
            return jsonify({"error": f"Image exceeds {config.MAX_IMAGE_SIZE // (1024 * 1024)}MB limit"}), 400

    session_id = current_session_id()
    busy = []

    def start(state):
        if state.processing:
            busy.append(True)
            return state
        return reduce(state, Action(ADVANCED_STARTED))

    store.update(session_id, start)
    if busy:
        return jsonify({"error": "A request is already in progress"}), 409

    current_app.logger.info("Advanced request via %s (text=%d chars, image=%s)",
                            config.PROVIDER, len(text), bool(image))
    try:
        response = generate_advanced_response(text, image)
        settled = {"input": text, "output": response}
    except Exception:
        current_app.logger.exception("Advanced request failed")
        settled = {
            "input": config.CONNECTION_FAILED_INPUT,
            "output": config.CONNECTION_FAILED_MESSAGE,
        }

    state = store.dispatch(session_id, Action(ADVANCED_SETTLED, settled))
    return jsonify(state_payload(state))
