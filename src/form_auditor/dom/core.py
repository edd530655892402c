# src/form_auditor/dom/core.py
from typing import Dict, List, Optional

from pydantic import BaseModel


class TreeNode(BaseModel):
    """
    Serializable representation of a captured DOM node.

    Elements carry a lowercase `name`, text nodes carry `text`, and boundary markers
    (`#shadow-root`, `#document`) carry `type`. Optional fields are left as None so that
    `model_dump(exclude_none=True)` yields the compact persisted shape.
    """
    name: Optional[str] = None
    text: Optional[str] = None
    type: Optional[str] = None
    attributes: Optional[Dict[str, str]] = None
    children: Optional[List['TreeNode']] = None


class NodeArena:
    """
    Owns every node of a normalized tree. Nodes refer to their parent by index into
    `nodes`, so the tree holds no parent object references.
    """

    def __init__(self):
        self.nodes: List['TreeNodeWithParent'] = []

    def add(self, node: 'TreeNodeWithParent') -> int:
        self.nodes.append(node)
        return len(self.nodes) - 1

    def __len__(self) -> int:
        return len(self.nodes)


class TreeNodeWithParent:
    """
    Normalized tree node with guaranteed `attributes` and `children`, plus a
    read-only `parent` resolved through the owning arena.
    """

    def __init__(
            self,
            arena: NodeArena,
            source: Optional[TreeNode] = None,
            parent_index: Optional[int] = None
    ):
        source = source if source is not None else TreeNode()
        self.source = source
        self.name: Optional[str] = source.name
        self.text: Optional[str] = source.text
        self.type: Optional[str] = source.type
        self.attributes: Dict[str, str] = dict(source.attributes or {})
        self.children: List['TreeNodeWithParent'] = []
        self._arena = arena
        self._parent_index = parent_index
        self.index = arena.add(self)

    @property
    def arena(self) -> NodeArena:
        return self._arena

    @property
    def parent_index(self) -> Optional[int]:
        return self._parent_index

    @property
    def parent(self) -> Optional['TreeNodeWithParent']:
        if self._parent_index is None:
            return None
        return self._arena.nodes[self._parent_index]

    def __repr__(self) -> str:
        label = self.name or self.type or (f"text={self.text!r}" if self.text is not None else "root")
        return f"<TreeNodeWithParent #{self.index} {label}>"
