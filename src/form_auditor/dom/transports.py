import asyncio
import logging
from typing import Dict, List, Optional, Set, Tuple

import aiohttp

from form_auditor.dom.builder import DOMBuilder
from form_auditor.dom.core import TreeNode
from form_auditor.dom.frames import FrameMessage, FrameTransport, FrameTransportError, frame_matches

logger = logging.getLogger(__name__)


class FrameContext:
    """
    One embedded browsing context: the frame's window name, its current location
    and the HTML it is showing.
    """

    def __init__(self, name: str, url: str, html: str):
        self.name = name
        self.url = url
        self.html = html

    def match_score(self, message: FrameMessage) -> int:
        if message.get("message") != "inspect":
            return 0
        return frame_matches(message, self.name, self.url)

    async def inspect(self, transport: FrameTransport, timeout: Optional[float]) -> TreeNode:
        builder = DOMBuilder(transport=transport, frame_timeout=timeout)
        return await builder.capture_html(self.html, self.url)


class FrameRegistry(FrameTransport):
    """
    In-process transport that broadcasts requests to registered frame contexts.

    When several contexts would answer, the one matching both name and url wins,
    then a name-only match, then a url-only match; remaining ties go to the context
    registered first. If nobody matches, the request never completes.
    """

    def __init__(self, frame_timeout: Optional[float] = None):
        self.frame_timeout = frame_timeout
        self._frames: List[FrameContext] = []

    def register(self, name: str, url: str, html: str) -> FrameContext:
        frame = FrameContext(name=name, url=url, html=html)
        self._frames.append(frame)
        return frame

    def resolve(self, message: FrameMessage) -> Optional[FrameContext]:
        candidates: List[Tuple[int, int, FrameContext]] = []
        for position, frame in enumerate(self._frames):
            score = frame.match_score(message)
            if score:
                candidates.append((-score, position, frame))

        if not candidates:
            return None
        return min(candidates, key=lambda c: (c[0], c[1]))[2]

    async def request(self, message: FrameMessage) -> Optional[TreeNode]:
        frame = self.resolve(message)
        if frame is None:
            logger.debug("No frame answers name=%r url=%s", message.get("name"), message.get("url"))
            await asyncio.Event().wait()
        return await frame.inspect(self, self.frame_timeout)


class HttpFrameTransport(FrameTransport):
    """
    Fetches frame documents over HTTP with aiohttp and captures them.
    Frames are correlated by url only; the frame name is not observable from outside.
    """

    def __init__(
            self,
            session: Optional[aiohttp.ClientSession] = None,
            frame_timeout: Optional[float] = None,
            headers: Optional[Dict[str, str]] = None
    ):
        self.session = session
        self.frame_timeout = frame_timeout
        self.headers = headers or {}
        self._owns_session = session is None
        self._in_flight: Set[str] = set()

    async def __aenter__(self):
        await self.initialize()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def initialize(self):
        if not self.session or self.session.closed:
            self.session = aiohttp.ClientSession(headers=self.headers)
            self._owns_session = True

    async def close(self):
        if self._owns_session and self.session and not self.session.closed:
            await self.session.close()

    async def request(self, message: FrameMessage) -> Optional[TreeNode]:
        url = message.get("url")
        if message.get("message") != "inspect" or not url:
            return None
        if url in self._in_flight:
            logger.debug("Skipping recursive frame %s", url)
            return None

        await self.initialize()
        self._in_flight.add(url)
        try:
            async with self.session.get(url) as response:
                if response.status != 200:
                    raise FrameTransportError(f"Frame {url} returned HTTP {response.status}")
                html = await self._read_text(response)
            builder = DOMBuilder(transport=self, frame_timeout=self.frame_timeout)
            return await builder.capture_html(html, str(response.url))
        except aiohttp.ClientError as e:
            raise FrameTransportError(f"Frame {url} could not be fetched: {e}") from e
        finally:
            self._in_flight.discard(url)

    @staticmethod
    async def _read_text(response: aiohttp.ClientResponse) -> str:
        """Decodes the body with the declared charset, replacing undecodable bytes."""
        try:
            return await response.text()
        except UnicodeDecodeError:
            content_bytes = await response.read()
            return content_bytes.decode(response.get_encoding(), errors='replace')
        except LookupError as e:
            raise FrameTransportError(f"Frame {response.url} declares an unknown charset: {e}") from e
