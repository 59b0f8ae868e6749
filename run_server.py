#!/usr/bin/env python3
"""
Start the blueprint HTTP API.

Usage:
    python run_server.py
    PORT=8080 python run_server.py
"""

import uvicorn

from blueprint_parser.config import get_app_config
from blueprint_parser.logger import get_module_logger, setup_logger
from blueprint_parser.main import BlueprintService
from blueprint_parser.server import create_app

logger = get_module_logger("run_server")


def main():
    config = get_app_config()
    setup_logger(level=config.log_level)

    app = create_app(BlueprintService(config=config))
    logger.info(f"Server starting on port {config.port}")
    uvicorn.run(app, host="0.0.0.0", port=config.port, log_level=config.log_level.lower())


if __name__ == "__main__":
    main()
