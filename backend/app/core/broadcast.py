# backend/app/core/broadcast.py
"""
Shared broadcaster for live message delivery.

One ``Broadcast`` per worker process; every open event stream subscribes to
its channels through it. ``settings.broadcast_url`` selects the backend:
``memory://`` for a single process, ``redis://...`` when several workers
must see each other's messages.
"""

import logging
from typing import Optional

from broadcaster import Broadcast

from .config import settings

logger = logging.getLogger(__name__)

_broadcast: Optional[Broadcast] = None


def get_broadcast() -> Broadcast:
    """
    Raises:
        RuntimeError: ``connect_broadcast()`` has not run in this process
    """
    if _broadcast is None:
        raise RuntimeError("Broadcast not initialized. Call connect_broadcast() during startup.")
    return _broadcast


def is_broadcast_initialized() -> bool:
    return _broadcast is not None


async def connect_broadcast() -> None:
    global _broadcast

    _broadcast = Broadcast(settings.broadcast_url)
    await _broadcast.connect()
    logger.info(f"[BROADCAST] Connected message broadcaster ({settings.broadcast_url})")


async def disconnect_broadcast() -> None:
    global _broadcast

    if _broadcast is not None:
        await _broadcast.disconnect()
        _broadcast = None
        logger.info("[BROADCAST] Disconnected message broadcaster")
