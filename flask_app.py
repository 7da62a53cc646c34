# flask
from flask import Flask
import logging
import os
from datetime import timedelta

# helper
import config

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)

app = Flask(__name__)
app.secret_key = config.SECRET_KEY or os.urandom(24)  # Use fixed secret key for persistent sessions
app.permanent_session_lifetime = timedelta(days=config.SESSION_LIFETIME_DAYS)

# Pasted/uploaded images travel as base64 data URLs in the JSON body
app.config['MAX_CONTENT_LENGTH'] = config.MAX_CONTENT_LENGTH

from blueprints import bps
for bp in bps:
    app.logger.info("registering: %s", bp.name)
    app.register_blueprint(bp)

if __name__ == "__main__":
    app.run(debug=True, host=config.HOST, port=config.PORT, threaded=True)
