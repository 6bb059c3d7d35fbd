# backend/app/services/message_stream.py
"""
Live message delivery over Server-Sent Events.

A stored message is published to the personal channel of both participants
and, when it is about a session, to that session's channel. Event streams
subscribe to one channel and forward what arrives as ``new_message`` events.

Delivery is best-effort: the message is already stored, so a publishing
failure is logged and clients catch up through the REST history endpoints.
"""

from datetime import datetime, timezone
import json
import logging
from typing import Any, AsyncGenerator, Dict, List, Optional

from broadcaster import Broadcast

from ..core.broadcast import get_broadcast
from ..models.message import Message
from ..schemas.message import MessageResponse

logger = logging.getLogger(__name__)

NEW_MESSAGE_EVENT = "new_message"


def user_channel(user_id: str) -> str:
    return f"user:{user_id}"


def session_channel(session_id: str) -> str:
    return f"session:{session_id}"


def message_channels(message: Dict[str, Any]) -> List[str]:
    """Channels a stored message is delivered to."""
    channels = [user_channel(message["sender_id"]), user_channel(message["receiver_id"])]
    if message.get("session_id"):
        channels.append(session_channel(message["session_id"]))
    return channels


async def publish_message(
    message: Dict[str, Any], broadcast: Optional[Broadcast] = None
) -> int:
    """
    Publish a serialized message to its channels.

    Returns:
        Number of channels the message reached
    """
    event = json.dumps({"type": NEW_MESSAGE_EVENT, "message": message})
    try:
        broadcast = broadcast or get_broadcast()
    except RuntimeError as e:
        logger.warning(f"[SSE-PUBLISH] Message {message['id']} not delivered live: {e}")
        return 0

    delivered = 0
    for channel in message_channels(message):
        try:
            await broadcast.publish(channel=channel, message=event)
            delivered += 1
        except Exception as e:
            logger.error(f"[SSE-PUBLISH] Failed to publish to {channel}: {e}")
    return delivered


async def publish_stored_message(
    message: Message, broadcast: Optional[Broadcast] = None
) -> MessageResponse:
    """Serialize a stored message, publish it and return the serialized form."""
    response = MessageResponse.model_validate(message)
    await publish_message(response.model_dump(mode="json"), broadcast)
    return response


def format_event(raw: str) -> Dict[str, str]:
    """Turn a published payload into an SSE event dict."""
    event = json.loads(raw)
    message = event.get("message", {})
    result = {"event": event.get("type", NEW_MESSAGE_EVENT), "data": json.dumps(message)}
    if message.get("id"):
        # Lets EventSource report the last message seen through Last-Event-ID
        result["id"] = message["id"]
    return result


async def stream_channel(
    channel: str, broadcast: Optional[Broadcast] = None
) -> AsyncGenerator[Dict[str, str], None]:
    """
    Yield a ``connected`` event once subscribed, then every event on ``channel``.

    Subscription happens before ``connected`` is sent, so anything published
    after the client saw ``connected`` is delivered.
    """
    broadcast = broadcast or get_broadcast()
    async with broadcast.subscribe(channel=channel) as subscriber:
        logger.info(f"[SSE-STREAM] Subscribed to {channel}")
        yield {
            "event": "connected",
            "data": json.dumps(
                {"channel": channel, "timestamp": datetime.now(timezone.utc).isoformat()}
            ),
        }
        try:
            async for event in subscriber:
                try:
                    yield format_event(event.message)
                except json.JSONDecodeError as e:
                    logger.warning(f"[SSE-STREAM] Invalid payload on {channel}: {e}")
        finally:
            logger.info(f"[SSE-STREAM] Unsubscribed from {channel}")
