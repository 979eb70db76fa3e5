from pathlib import Path

from flask import Flask, jsonify
from werkzeug.middleware.proxy_fix import ProxyFix

from config_manager import ConfigManager
from app.swipe.factory import create_swipe_module

# -----------------------------------------------------------------------------
# Application factory
# -----------------------------------------------------------------------------


def create_app(config_manager: ConfigManager = None, **session_kwargs) -> Flask:
    """Build the Flask app around one swipe session.

    Args:
        config_manager: Configuration source; a default ConfigManager if omitted
        **session_kwargs: Passed through to SwipeSession (executor, timer_factory)
    """
    config_manager = config_manager or ConfigManager()
    feed_config = config_manager.get_feed_config()
    session_config = config_manager.get_session_config()

    storage_file = Path(session_config.storage_file)
    storage_file.parent.mkdir(parents=True, exist_ok=True)

    app = Flask(__name__)
    app.wsgi_app = ProxyFix(
            app.wsgi_app,
            x_proto = 1,     # trust 1 hop for X-Forwarded-Proto
            x_host  = 1,     # trust 1 hop for X-Forwarded-Host
            x_prefix= 1)     # <-- pay attention to X-Forwarded-Prefix

    swipe_module = create_swipe_module(feed_config, session_config, **session_kwargs)
    app.extensions["swipe_session"] = swipe_module["service"]
    app.register_blueprint(swipe_module["blueprint"])

    @app.route("/health")
    def health():
        return jsonify({"status": "ok"})

    return app

