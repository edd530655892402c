# src/form_auditor/dom/builder.py
import logging
import re
from collections import deque
from typing import Callable, Iterable, List, Optional, Pattern, Union
from urllib.parse import urljoin

from bs4 import BeautifulSoup, NavigableString, PageElement, Tag
from bs4.element import PreformattedString

from form_auditor.constants import DOCUMENT_MARKER, SHADOW_ROOT_MARKER
from form_auditor.dom.core import TreeNode
from form_auditor.dom.frames import (
    DEFAULT_FRAME_TIMEOUT,
    FrameTransport,
    FrameTransportError,
    build_inspect_message,
    send_message_to_frame,
)
from form_auditor.utils.config_loader import get_nested_config
from form_auditor.utils.string_util import condense_whitespace, truncate

logger = logging.getLogger(__name__)

DEFAULT_IGNORE_CHILDREN = ['script', 'style', 'svg', 'head', 'textarea']
DEFAULT_IGNORE_ATTRIBUTES = ['autofill-information', 'autofill-prediction']
DEFAULT_MAX_VALUE_LENGTH = 400

NON_RENDERED_TAGS = {'head', 'title', 'meta', 'link', 'base', 'script', 'style', 'template', 'noscript'}
FOREIGN_ROOT_TAGS = {'svg', 'math'}
SHADOW_ROOT_ATTRIBUTES = ('shadowrootmode', 'shadowroot')
_DISPLAY_NONE_RE = re.compile(r'(^|;)\s*display\s*:\s*none\s*(!important)?\s*(;|$)', re.IGNORECASE)

VisibilityCheck = Callable[[Optional[PageElement]], bool]
AttributeFilter = Union[str, Pattern[str]]


def is_shadow_root(tag: Tag) -> bool:
    return tag.name == 'template' and any(tag.has_attr(attr) for attr in SHADOW_ROOT_ATTRIBUTES)


def _is_hidden_tag(tag: Tag) -> bool:
    if is_shadow_root(tag):
        return False
    if tag.name in NON_RENDERED_TAGS:
        return True
    if tag.has_attr('hidden'):
        return True
    if _DISPLAY_NONE_RE.search(tag.get('style') or ''):
        return True
    return tag.name == 'input' and (tag.get('type') or '').lower() == 'hidden'


def is_element_visible(element: Optional[PageElement]) -> bool:
    """
    Static stand-in for a layout check: an element counts as rendered unless it,
    or one of its ancestors, is hidden through markup or inline style.
    Non-elements and SVG/MathML content are always considered visible.
    """
    if not isinstance(element, Tag) or isinstance(element, BeautifulSoup):
        return True
    if any(parent.name in FOREIGN_ROOT_TAGS for parent in element.parents):
        return True

    current: Optional[Tag] = element
    while current is not None and not isinstance(current, BeautifulSoup):
        if _is_hidden_tag(current):
            return False
        current = current.parent
    return True


def find_shadow_root(element: Tag) -> Optional[Tag]:
    """Returns the declarative shadow root (`<template shadowrootmode>`) hosted by the element."""
    for child in element.children:
        if isinstance(child, Tag) and is_shadow_root(child):
            return child
    return None


class DOMBuilder:
    """
    Builder responsible for converting a parsed HTML document (or a subtree of one)
    into a TreeNode graph. Shadow roots are captured inline; iframes are captured by
    asking the frame itself through a FrameTransport.
    """

    def __init__(
            self,
            transport: Optional[FrameTransport] = None,
            frame_timeout: Optional[float] = None,
            visibility_check: VisibilityCheck = is_element_visible,
            ignore_children: Optional[Iterable[str]] = None,
            ignore_attributes: Optional[Iterable[AttributeFilter]] = None,
            max_value_length: Optional[int] = None
    ):
        self.transport = transport
        if frame_timeout is None:
            timeout_ms = get_nested_config('capture.frame_timeout_ms')
            frame_timeout = timeout_ms / 1000 if timeout_ms is not None else DEFAULT_FRAME_TIMEOUT
        self.frame_timeout = frame_timeout
        self.visibility_check = visibility_check
        self.ignore_children = set(
            ignore_children if ignore_children is not None
            else get_nested_config('capture.ignore_children', DEFAULT_IGNORE_CHILDREN)
        )
        self.ignore_attributes = self._compile_attribute_filters(ignore_attributes)
        self.max_value_length = max_value_length or get_nested_config(
            'capture.max_value_length', DEFAULT_MAX_VALUE_LENGTH)

    @staticmethod
    def _compile_attribute_filters(
            ignore_attributes: Optional[Iterable[AttributeFilter]]
    ) -> List[AttributeFilter]:
        if ignore_attributes is not None:
            return list(ignore_attributes)
        names = get_nested_config('capture.ignore_attributes', DEFAULT_IGNORE_ATTRIBUTES)
        patterns = get_nested_config('capture.ignore_attribute_patterns', [])
        return [*names, *(re.compile(p, re.IGNORECASE) for p in patterns)]

    @staticmethod
    def parse(html: str) -> BeautifulSoup:
        """Parses raw HTML. Duplicate attributes keep their first value, as browsers do."""
        clean_html = (html or '').replace('\ufeff', '')
        return BeautifulSoup(
            clean_html,
            'html.parser',
            multi_valued_attributes=None,
            on_duplicate_attribute='ignore',
        )

    async def capture_html(self, html: str, url: str = '') -> TreeNode:
        """Parses and captures a whole HTML document."""
        return await self.capture(self.parse(html), url)

    async def capture(self, node: Union[BeautifulSoup, Tag], url: str = '') -> TreeNode:
        """
        Captures a document or element into a TreeNode.

        Traversal is breadth-first in document order. Children of ignored tags are not
        enumerated and invisible subtrees are skipped. Each iframe is awaited in turn,
        so the capture suspends at every frame boundary until it replies or times out.
        """
        root_tree = self._convert_root(node)
        queue = deque([(node, root_tree)])

        while queue:
            parent, parent_tree = queue.popleft()
            if parent is not node and parent.name in self.ignore_children:
                continue

            for child in self._iter_light_children(parent):
                if not (self.visibility_check(parent) or self.visibility_check(child)):
                    continue

                child_tree = self.convert_node(child)
                if child_tree is None:
                    continue

                if isinstance(child, Tag):
                    await self._attach_boundaries(child, child_tree, url)
                    queue.append((child, child_tree))

                if parent_tree.children is None:
                    parent_tree.children = []
                parent_tree.children.append(child_tree)

        return root_tree

    def _convert_root(self, node: Union[BeautifulSoup, Tag]) -> TreeNode:
        if isinstance(node, BeautifulSoup) or is_shadow_root(node):
            return TreeNode()
        return self.convert_node(node) or TreeNode()

    @staticmethod
    def _iter_light_children(parent: Tag) -> List[PageElement]:
        shadow_root = find_shadow_root(parent) if not isinstance(parent, BeautifulSoup) else None
        return [child for child in parent.children if child is not shadow_root]

    async def _attach_boundaries(self, element: Tag, tree: TreeNode, url: str) -> None:
        shadow_root = find_shadow_root(element)
        if shadow_root is not None:
            shadow_tree = await self.capture(shadow_root, url)
            tree.children = (tree.children or []) + [
                TreeNode(type=SHADOW_ROOT_MARKER, children=list(shadow_tree.children or []))
            ]

        if self._is_capturable_frame(element):
            frame_tree = await self._capture_frame(element, url)
            if frame_tree is not None:
                tree.children = (tree.children or []) + [
                    TreeNode(type=DOCUMENT_MARKER, children=[frame_tree])
                ]

    def _is_capturable_frame(self, element: Tag) -> bool:
        src = element.get('src')
        return (
            element.name == 'iframe'
            and self.transport is not None
            and self.visibility_check(element)
            and bool(src)
            and src != 'about:blank'
        )

    async def _capture_frame(self, element: Tag, url: str) -> Optional[TreeNode]:
        frame_url = urljoin(url, element.get('src')) if url else element.get('src')
        message = build_inspect_message(element.get('name') or '', frame_url)
        logger.debug("Requesting tree from frame name=%r url=%s", message['name'], frame_url)

        try:
            return await send_message_to_frame(self.transport, message, self.frame_timeout)
        except FrameTransportError as e:
            logger.warning("Failed to get tree from iframe %s: %s", frame_url, e)
            return None
        except Exception as e:
            logger.error("Unexpected error capturing iframe %s: %s", frame_url, e, exc_info=True)
            return None

    def convert_node(self, node: PageElement) -> Optional[TreeNode]:
        """
        Converts a single element or text node. Returns None for anything else
        (comments, doctypes, whitespace-only text).
        """
        if isinstance(node, Tag):
            attributes = [
                (name, truncate(value if value is not None else '', self.max_value_length))
                for name, value in node.attrs.items()
                if not self._is_ignored_attribute(name)
            ]
            return TreeNode(name=node.name.lower(), attributes=dict(attributes) if attributes else None)

        if isinstance(node, NavigableString) and not isinstance(node, PreformattedString):
            text = truncate(condense_whitespace(str(node)), self.max_value_length)
            if text:
                return TreeNode(text=text)

        return None

    def _is_ignored_attribute(self, name: str) -> bool:
        return any(
            name == ignored if isinstance(ignored, str) else ignored.search(name)
            for ignored in self.ignore_attributes
        )

