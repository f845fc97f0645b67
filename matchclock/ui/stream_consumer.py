"""
Line-delimited push consumer for the live match clock.

Reads one JSON payload per line (as relayed from the platform messaging
layer) on an asyncio event loop and hands each one to the live notification
registry. The registry's refresh timers run on the same loop.
"""
import asyncio
import json
import logging
import sys
from typing import Optional

from ..config import AppConfig
from ..services import AsyncioIntervalScheduler, LiveNotificationRegistry, ServiceFactory

logger = logging.getLogger(__name__)


def handle_line(line: str, registry: LiveNotificationRegistry) -> bool:
    """Decode one line and dispatch it; undecodable lines are logged and skipped."""
    text = line.strip()
    if not text:
        return False
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as e:
        logger.warning("Skipping undecodable push line: %s", e)
        return False
    if not isinstance(payload, dict):
        logger.warning("Skipping push line that is not an object")
        return False
    return registry.handle_live_match_fcm_data(payload)


async def consume(reader: asyncio.StreamReader, registry: LiveNotificationRegistry) -> int:
    """
    Feed every line from ``reader`` to the registry until EOF.

    Returns:
        Number of payloads dispatched
    """
    dispatched = 0
    while True:
        raw = await reader.readline()
        if not raw:
            break
        if handle_line(raw.decode("utf-8", errors="replace"), registry):
            dispatched += 1
    return dispatched


async def _stdin_reader() -> asyncio.StreamReader:
    loop = asyncio.get_running_loop()
    reader = asyncio.StreamReader()
    protocol = asyncio.StreamReaderProtocol(reader)
    await loop.connect_read_pipe(lambda: protocol, sys.stdin)
    return reader


async def run_stream_consumer(config: Optional[AppConfig] = None) -> None:
    """Consume stdin until EOF, then tear down every live notification."""
    factory = ServiceFactory(config)
    registry = factory.create_live_notification_registry(AsyncioIntervalScheduler())
    try:
        dispatched = await consume(await _stdin_reader(), registry)
        logger.info("Push stream closed after %d payloads", dispatched)
    finally:
        registry.shutdown()
