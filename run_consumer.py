#!/usr/bin/env python3
"""
Entry point for the line-delimited push consumer.

Pipe one JSON live-update payload per line into stdin.
"""
import asyncio
import logging

from matchclock.config import AppConfig
from matchclock.ui.stream_consumer import run_stream_consumer

if __name__ == "__main__":
    config = AppConfig()
    logging.basicConfig(
        level=getattr(logging, config.log_level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    asyncio.run(run_stream_consumer(config))
