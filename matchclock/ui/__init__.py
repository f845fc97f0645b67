"""
UI package for the live match clock.

This package contains the Flask web server and the line-delimited push consumer.
"""
from .web_app import WebAppState, create_app, run_web_app
from .stream_consumer import run_stream_consumer

__all__ = ["WebAppState", "create_app", "run_web_app", "run_stream_consumer"]
