#!/usr/bin/env python3
"""
Main entry point for the live match clock web application.

This script configures logging and launches the Flask-based web server.
"""
import logging
import os

from matchclock.config import AppConfig
from matchclock.ui.web_app import run_web_app

if __name__ == "__main__":
    config = AppConfig()
    logging.basicConfig(
        level=getattr(logging, config.log_level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    run_web_app(host=os.getenv("HOST", "127.0.0.1"), port=int(os.getenv("PORT", "7122")))
