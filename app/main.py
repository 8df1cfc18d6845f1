import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from flask import Flask, jsonify, request
from werkzeug.exceptions import HTTPException
from werkzeug.middleware.proxy_fix import ProxyFix

# Import configuration management
import sys
sys.path.append(str(Path(__file__).parent.parent))
from config_manager import ConfigManager, resolve_data_dir

from app.analytics.factory import create_analytics_module

logger = logging.getLogger(__name__)


def create_app(config_manager: Optional[ConfigManager] = None, data_dir: Optional[Path] = None) -> Flask:
    """Build the Flask application.

    Args:
        config_manager: Configuration source (defaults to ``portfolio_config.json`` + env)
        data_dir: Overrides the configured data directory

    Returns:
        Configured Flask app with the analytics module registered
    """
    config_manager = config_manager or ConfigManager()
    analytics_config = config_manager.get_analytics_config()
    paths_config = config_manager.get_paths_config()

    if data_dir is None:
        data_dir = resolve_data_dir(paths_config.data_dir)

    app = Flask(__name__)
    app.wsgi_app = ProxyFix(
            app.wsgi_app,
            x_for   = 1,     # trust 1 hop for X-Forwarded-For
            x_proto = 1,     # trust 1 hop for X-Forwarded-Proto
            x_host  = 1,     # trust 1 hop for X-Forwarded-Host
            x_prefix= 1)     # trust 1 hop for X-Forwarded-Prefix

    # -------------------------------------------------------------------------
    # Analytics
    # -------------------------------------------------------------------------

    analytics_module = create_analytics_module(
        data_dir=data_dir,
        rate_limit_max_requests=analytics_config.rate_limit_max_requests,
        rate_limit_window_seconds=analytics_config.rate_limit_window_seconds,
        default_dashboard_days=analytics_config.default_dashboard_days,
        top_pages_limit=analytics_config.top_pages_limit,
    )
    app.register_blueprint(analytics_module["blueprint"])
    app.extensions["analytics"] = analytics_module

    # -------------------------------------------------------------------------
    # Health & errors
    # -------------------------------------------------------------------------

    @app.get("/api/health")
    def health():
        store = analytics_module["store"]
        return jsonify({
            "status": "OK",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "storage": "Available" if store.is_available() else "Unavailable",
        })

    @app.errorhandler(404)
    def not_found(error):
        return jsonify({"message": "Route not found"}), 404

    @app.errorhandler(Exception)
    def internal_error(error):
        if isinstance(error, HTTPException):
            return error
        logger.exception(f"Unhandled error on {request.method} {request.path}")
        return jsonify({"message": "Something went wrong!", "error": "Internal server error"}), 500

    logger.info(f"Analytics data directory: {data_dir}")
    return app


app = create_app()
