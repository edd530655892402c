import abc
import asyncio
import logging
from typing import Any, Dict, Optional, Union

from pydantic import ValidationError

from form_auditor.dom.core import TreeNode

logger = logging.getLogger(__name__)

FrameMessage = Dict[str, Any]
FrameReply = Union[TreeNode, Dict[str, Any], None]

DEFAULT_FRAME_TIMEOUT = 0.5


class FrameTransportError(Exception):
    """Raised when a frame could not deliver a reply."""


class FrameTimeoutError(FrameTransportError):
    """Raised when no frame replied before the timeout elapsed."""


class FrameTransport(metaclass=abc.ABCMeta):
    """
    Delivers requests into embedded frame contexts.

    Every request is a broadcast such as
    `{"broadcast": True, "wait": True, "message": "inspect", "name": ..., "url": ...}`.
    Frames that do not match the request stay silent; an implementation that finds no
    responder should simply never complete, leaving the caller's timeout to fire.
    """

    @abc.abstractmethod
    async def request(self, message: FrameMessage) -> FrameReply:
        raise NotImplementedError("Every transport must implement 'request'.")


def build_inspect_message(name: str, url: str) -> FrameMessage:
    return {
        "broadcast": True,
        "wait": True,
        "message": "inspect",
        "name": name,
        "url": url,
    }


def frame_matches(message: FrameMessage, frame_name: str, frame_url: str) -> int:
    """
    Scores how well a frame matches a request: 3 when both name and url match,
    2 for a name-only match (the frame may have been redirected), 1 for url only,
    and 0 when the frame must not reply.
    """
    requested_name = message.get("name")
    requested_url = message.get("url")
    name_match = bool(requested_name) and requested_name == frame_name
    url_match = bool(requested_url) and requested_url == frame_url

    if name_match and url_match:
        return 3
    if name_match:
        return 2
    if url_match:
        return 1
    return 0


async def send_message_to_frame(
        transport: FrameTransport,
        message: FrameMessage,
        timeout: float = DEFAULT_FRAME_TIMEOUT
) -> Optional[TreeNode]:
    """
    Sends a request through the transport and waits for the reply.

    Raises:
        FrameTimeoutError: When no reply arrived within `timeout` seconds.
        FrameTransportError: When the reply is not a valid tree.
    """
    try:
        reply = await asyncio.wait_for(transport.request(message), timeout)
    except asyncio.TimeoutError as e:
        raise FrameTimeoutError("Timeout duration exceeded") from e

    if reply is None or isinstance(reply, TreeNode):
        return reply
    try:
        return TreeNode.model_validate(reply)
    except ValidationError as e:
        raise FrameTransportError(f"Malformed frame reply: {e.error_count()} validation error(s)") from e
