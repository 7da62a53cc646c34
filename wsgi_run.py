from flask_app import app
from waitress import serve

import config

if __name__ == "__main__":
    print("Starting WSGI server with Waitress...")
    print(f"serving on http://localhost:{config.PORT}")
    serve(app, host=config.HOST, port=config.PORT)
