# src/form_auditor/audits/audit_util.py
from typing import Any, Callable, Dict, Hashable, Iterable, List, Sequence

from pydantic import BaseModel

from form_auditor.dom.core import TreeNodeWithParent
from form_auditor.dom.tree_util import get_path, get_text_content, strip
from form_auditor.model import AuditItem, AuditReport, AuditResult, DuplicatesContext
from form_auditor.utils.array_util import group_by
from form_auditor.utils.string_util import pluralize

FORM_ATTRIBUTES_TO_INCLUDE = ['action', 'autocomplete', 'class', 'for', 'id', 'name', 'placeholder', 'type']
END_TAGS_TO_INCLUDE = {'label', 'button'}


def has_type(node: TreeNodeWithParent, types: Iterable[str]) -> bool:
    return node.attributes.get('type') in set(types)


def without_types(nodes: Iterable[TreeNodeWithParent], types: Sequence[str]) -> List[TreeNodeWithParent]:
    """Drops nodes whose `type` attribute is one of `types`."""
    return [node for node in nodes if not has_type(node, types)]


def split_tokens(value: str) -> List[str]:
    return value.split()


def duplicate_items(
        nodes: Iterable[TreeNodeWithParent],
        scope_fn: Callable[[TreeNodeWithParent], Hashable],
        key_fn: Callable[[TreeNodeWithParent], Hashable]
) -> List[AuditItem]:
    """
    Groups nodes first by scope (form, document root, ...) and then by key.
    Every key shared by more than one node in the same scope becomes one item:
    the first node, with the remaining nodes as its duplicates.
    """
    items = []
    for scoped_nodes in group_by(nodes, scope_fn).values():
        for same_key in group_by(scoped_nodes, key_fn).values():
            if len(same_key) > 1:
                first, *others = same_key
                items.append(AuditItem(node=first, context=DuplicatesContext(duplicates=others)))
    return items


def stringify_form_element(node: TreeNodeWithParent, additional_attributes: Sequence[str] = ()) -> str:
    """
    Create a compact representation of a form element, e.g. `<input id="email" type="email" ...>`.
    Labels and buttons also get their text content and an end tag.
    """
    included = [*FORM_ATTRIBUTES_TO_INCLUDE, *additional_attributes]
    # Include empty attributes, e.g. for="", but not missing attributes.
    attributes = [(name, value) for name, value in node.attributes.items() if name in included and value is not None]
    attributes_string = ' '.join(f'{name}="{value}"' if value else name for name, value in attributes)

    has_hidden_attributes = len(node.attributes) > len(attributes)
    rendered = f"<{node.name}{' ' + attributes_string if attributes_string else ''}{' ...' if has_hidden_attributes else ''}>"
    if node.name in END_TAGS_TO_INCLUDE:
        rendered += f"{get_text_content(node)}</{node.name}>"

    return rendered


def render_details(result: AuditResult) -> str:
    """Plain-text summary of a result: the element count, then one line per element."""
    count = len(result.items)
    lines = [f"{count} {pluralize(count, 'element')}"]
    lines.extend(stringify_form_element(item.node) for item in result.items if item.node.name)
    return '\n'.join(lines)


def _serialize_value(value: Any) -> Any:
    if isinstance(value, TreeNodeWithParent):
        return _serialize_node(value)
    if isinstance(value, BaseModel):
        return {name: _serialize_value(getattr(value, name)) for name in type(value).model_fields}
    if isinstance(value, list):
        return [_serialize_value(v) for v in value]
    if isinstance(value, dict):
        return {k: _serialize_value(v) for k, v in value.items()}
    return value


def _serialize_node(node: TreeNodeWithParent) -> Dict[str, Any]:
    data = strip(node, include_children=False).model_dump(exclude_none=True)
    data['path'] = get_path(node)
    return data


def serialize_item(item: AuditItem) -> Dict[str, Any]:
    data = _serialize_node(item.node)
    if item.node.name:
        data['html'] = stringify_form_element(item.node)
    if item.context is not None:
        data['context'] = _serialize_value(item.context)
    return data


def serialize_result(result: AuditResult) -> Dict[str, Any]:
    data = result.model_dump(by_alias=True, exclude={'items'})
    if data['details'] is None:
        data['details'] = render_details(result)
    data['items'] = [serialize_item(item) for item in result.items]
    return data


def make_audit_report_serializable(report: AuditReport) -> Dict[str, Any]:
    """
    Converts a report into plain JSON-ready data. Items lose their parent links and
    gain a `path` usable with `path_to_query_selector`.
    """
    return {
        'score': report.score,
        'results': [serialize_result(result) for result in report.results],
    }
