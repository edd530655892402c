# src/form_auditor/audits/rules/attributes.py
from typing import List

from form_auditor.audits.audit_util import duplicate_items, without_types
from form_auditor.audits.core import AuditCategory, audit_spec, ref
from form_auditor.constants import ATTRIBUTE_AUDIT_ELEMENTS, ATTRIBUTES, INPUT_SELECT_TEXT_FIELDS
from form_auditor.dom.core import TreeNodeWithParent
from form_auditor.dom.tree_util import closest_parent, closest_root, find_descendants
from form_auditor.model import (
    AuditItem,
    AuditResult,
    DuplicatesContext,
    InvalidAttribute,
    InvalidAttributesContext,
)
from form_auditor.services.suggestion_service import SuggestionService

ALLOWED_ATTRIBUTE_PREFIXES = ('aria-', 'data-', 'on')


def get_invalid_attributes(node: TreeNodeWithParent) -> List[str]:
    """
    Attributes that are neither valid for the element nor global. aria-*, data-* and
    inline event handlers are always accepted.
    """
    if not node.name:
        return []
    allowed = set(ATTRIBUTES.get(node.name, [])) | set(ATTRIBUTES['global'])
    return [
        name for name in node.attributes
        if name not in allowed and not name.startswith(ALLOWED_ATTRIBUTE_PREFIXES)
    ]


@audit_spec(
    audit_type='invalid-attributes',
    title='Element attributes should be valid.',
    severity='warning',
    references=[ref('HTML Living Standard: Forms', 'https://html.spec.whatwg.org/multipage/forms.html')],
    context=InvalidAttributesContext,
)
def has_invalid_attributes(tree: TreeNodeWithParent) -> List[AuditResult]:
    items = []
    for node in find_descendants(tree, ATTRIBUTE_AUDIT_ELEMENTS):
        invalid = get_invalid_attributes(node)
        if not invalid:
            continue
        suggestions = SuggestionService.for_attributes(node.name)
        context = InvalidAttributesContext(invalid_attributes=[
            InvalidAttribute(attribute=name, suggestion=suggestions.suggest(name)) for name in invalid
        ])
        items.append(AuditItem(node=node, context=context))

    return has_invalid_attributes.definition.result(items)


@audit_spec(
    audit_type='missing-identifier',
    title='Form fields should have an id or a name.',
    severity='warning',
    references=[ref('The HTML name attribute',
                    'https://developer.mozilla.org/docs/Web/HTML/Element/input#htmlattrdefname')],
)
def has_id_or_name(tree: TreeNodeWithParent) -> List[AuditResult]:
    """
    Form fields have either an id or a name attribute. This may not be an error:
    fields handled entirely by script can work without either.
    """
    fields = without_types(find_descendants(tree, INPUT_SELECT_TEXT_FIELDS), ['button', 'submit', 'file'])
    items = [
        AuditItem(node=node) for node in fields
        if not node.attributes.get('id') and not node.attributes.get('name')
    ]
    return has_id_or_name.definition.result(items)


@audit_spec(
    audit_type='unique-ids',
    title='Form fields must have unique id values.',
    severity='error',
    references=[ref('ID attribute value must be unique',
                    'https://dequeuniversity.com/rules/axe/4.2/duplicate-id-active')],
    context=DuplicatesContext,
)
def has_unique_ids(tree: TreeNodeWithParent) -> List[AuditResult]:
    """Ids are unique within each document and each shadow root."""
    fields = [node for node in find_descendants(tree, INPUT_SELECT_TEXT_FIELDS) if node.attributes.get('id')]
    items = duplicate_items(fields, closest_root, lambda node: node.attributes['id'])
    return has_unique_ids.definition.result(items)


@audit_spec(
    audit_type='unique-names',
    title='Fields in the same form must have unique name values.',
    severity='warning',
    references=[ref('The input element name attribute',
                    'https://developer.mozilla.org/docs/Web/HTML/Element/input#htmlattrdefname')],
    context=DuplicatesContext,
)
def has_unique_names(tree: TreeNodeWithParent) -> List[AuditResult]:
    """
    Names are unique per form. Fields outside any form are compared with each other.
    Radio buttons and checkboxes share names legitimately and are skipped.
    """
    fields = without_types(
        [node for node in find_descendants(tree, INPUT_SELECT_TEXT_FIELDS) if node.attributes.get('name')],
        ['radio', 'checkbox'],
    )
    items = duplicate_items(fields, lambda node: closest_parent(node, 'form'), lambda node: node.attributes['name'])
    return has_unique_names.definition.result(items)


CATEGORY = AuditCategory(
    name='attributes',
    audits=[has_invalid_attributes, has_id_or_name, has_unique_ids, has_unique_names],
)
