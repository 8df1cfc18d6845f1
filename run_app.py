#!/usr/bin/env python3
"""
Simple runner script for the Flask application.
This script ensures the correct Python path is set and runs the app.
"""

import sys
from pathlib import Path

# Add the current directory to Python path
current_dir = Path(__file__).parent
sys.path.insert(0, str(current_dir))

from config_manager import get_app_config
from app.logging_config import setup_logging, get_logger


def main():
    app_config = get_app_config()
    setup_logging(debug=app_config.debug)
    logger = get_logger(__name__)

    # Import after logging is configured so startup messages are captured
    from app.main import app

    logger.info(f"Starting portfolio backend on http://{app_config.host}:{app_config.port}")
    logger.info(f"Health check: http://{app_config.host}:{app_config.port}/api/health")

    app.run(
        host=app_config.host,
        port=app_config.port,
        debug=app_config.debug
    )


if __name__ == "__main__":
    main()
