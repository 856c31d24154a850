"""
FLASK APP MAIN ENTRY POINT - 2FA MICROSERVICE
=============================================

Sets up the Flask app, enables CORS and registers the 2FA blueprint.

    python -m pki2fa_backend.app          # development server on $PORT (8080)
    gunicorn pki2fa_backend.app:app       # any WSGI server
"""

import logging

from flask import Flask
from flask_cors import CORS

from pki2fa_store import FileSeedStore

from .config import Config
from .routes import twofa_bp


def create_app(overrides=None) -> Flask:
    """
    Build the application.

    Arguments:
        overrides: dict of config keys applied on top of Config, e.g.
            PRIVATE_KEY (key object), SEED_STORE (SeedStore), CLOCK (callable)
    """
    app = Flask(__name__)
    app.config.from_object(Config)
    if overrides:
        app.config.update(overrides)

    # allow a frontend on another domain/port to call the API
    CORS(app)

    app.extensions["pki2fa"] = {
        "private_key": app.config.get("PRIVATE_KEY"),
        "seed_store": app.config.get("SEED_STORE") or FileSeedStore(app.config["SEED_FILE"]),
    }
    app.register_blueprint(twofa_bp)
    return app


app = create_app()


if __name__ == "__main__":
    logging.basicConfig(
        level=app.config["LOG_LEVEL"],
        format="[%(levelname)s] %(name)s: %(message)s",
    )
    app.run(host="0.0.0.0", port=app.config["PORT"])
