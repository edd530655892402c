# src/form_auditor/dom/tree_util.py
import re
from collections import deque
from typing import Iterable, List, Optional

from form_auditor.constants import DOCUMENT_MARKER, SHADOW_ROOT_MARKER
from form_auditor.dom.core import NodeArena, TreeNode, TreeNodeWithParent

_NTH_SEGMENT_RE = re.compile(r'\[(\d+)\]')
_CSS_IDENT_CHAR_RE = re.compile(r'[A-Za-z0-9_\-]')


def normalize(node: Optional[TreeNode] = None) -> TreeNodeWithParent:
    """
    Copies a captured tree into a fresh arena, breadth-first, defaulting `attributes`
    and `children` and linking every child to its parent.
    """
    arena = NodeArena()
    root = TreeNodeWithParent(arena, node)
    queue = deque([root])

    while queue:
        item = queue.popleft()
        for child in item.source.children or []:
            linked = TreeNodeWithParent(arena, child, parent_index=item.index)
            item.children.append(linked)
            queue.append(linked)

    return root


def strip(node: TreeNodeWithParent, include_children: bool = True) -> TreeNode:
    """
    Inverse of `normalize`: returns a bare TreeNode without parent links.
    Empty attributes and children are omitted.
    """
    fields = {'name': node.name, 'text': node.text, 'type': node.type}
    if node.attributes:
        fields['attributes'] = dict(node.attributes)
    if include_children and node.children:
        fields['children'] = [strip(child, True) for child in node.children]

    # Only set fields are passed so the result compares equal to the captured node.
    return TreeNode(**{key: value for key, value in fields.items() if value is not None})


def iter_descendants(node: TreeNodeWithParent):
    """Yields all descendants in document order (depth-first pre-order)."""
    stack = list(reversed(node.children))
    while stack:
        item = stack.pop()
        yield item
        stack.extend(reversed(item.children))


def find_descendants(node: TreeNodeWithParent, names: Iterable[str]) -> List[TreeNodeWithParent]:
    """
    Finds descendants of a given node by tag name, in document order.
    Shadow roots and frame documents are searched too.
    """
    wanted = set(names)
    return [item for item in iter_descendants(node) if item.name in wanted]


def get_text_content(node: TreeNodeWithParent) -> str:
    """
    Gets text content recursively for a given node.
    Frame documents are skipped so iframe text never leaks into a label.
    """
    results = []
    stack = [node]

    while stack:
        item = stack.pop()
        if item.type == DOCUMENT_MARKER:
            continue
        if item.text:
            results.append(item.text)
        stack.extend(reversed(item.children))

    return ' '.join(results)


def closest_parent(node: TreeNodeWithParent, name: str) -> Optional[TreeNodeWithParent]:
    """Searches for the closest ancestor with the matching tag name."""
    current = node.parent
    while current is not None:
        if current.name == name:
            return current
        current = current.parent
    return None


def closest_root(node: TreeNodeWithParent) -> TreeNodeWithParent:
    """
    Returns the nearest enclosing frame document or shadow root,
    or the tree root when the node sits in the top-level document.
    """
    current = node
    while current.parent is not None:
        current = current.parent
        if current.type in (DOCUMENT_MARKER, SHADOW_ROOT_MARKER):
            return current
    return current


def escape_css_identifier(value: str) -> Optional[str]:
    """
    Escapes an id for use after `#` in a selector.

    Returns None when the leading characters can never form an identifier
    (a digit, a lone hyphen, or a hyphen followed by a digit).
    """
    if not value or value == '-' or value[0].isdigit() or (value[0] == '-' and value[1].isdigit()):
        return None

    escaped = []
    for char in value:
        if _CSS_IDENT_CHAR_RE.match(char) or ord(char) >= 0xA0:
            escaped.append(char)
        else:
            escaped.append(f"\\{ord(char):x} ")
    return ''.join(escaped)


def _get_path_segment(node: TreeNodeWithParent) -> str:
    if node.type:
        return node.type

    if not node.name:
        return ''

    parent = node.parent
    if parent is None:
        return node.name

    same_name_siblings = [child for child in parent.children if child.name == node.name]
    if len(same_name_siblings) == 1:
        return node.name

    escaped_id = escape_css_identifier(node.attributes.get('id', ''))
    if escaped_id:
        return f"{node.name}#{escaped_id}"

    index = next(i for i, sibling in enumerate(same_name_siblings) if sibling is node)
    return f"{node.name}[{index}]"


def get_path(node: TreeNodeWithParent) -> str:
    """
    Builds a `/`-separated path from the root to the node.
    Boundary markers appear as their own segments (`#shadow-root`, `#document`).
    """
    segments = []
    current: Optional[TreeNodeWithParent] = node
    while current is not None:
        segments.append(_get_path_segment(current))
        current = current.parent
    return '/' + '/'.join(reversed(segments))


def path_to_query_selector(path: str) -> str:
    """Converts a path into a CSS child-combinator selector."""
    return ' > '.join(
        _NTH_SEGMENT_RE.sub(lambda m: f":nth-of-type({int(m.group(1)) + 1})", segment)
        for segment in path.split('/')
        if segment
    )
