# src/form_auditor/audits/rules/labels.py
from typing import Dict, List

from form_auditor.audits.audit_util import duplicate_items, split_tokens, without_types
from form_auditor.audits.core import AuditCategory, audit_spec, ref
from form_auditor.constants import INPUT_SELECT_TEXT_FIELDS, LABEL_INVALID_DESCENDANTS
from form_auditor.dom.core import TreeNodeWithParent
from form_auditor.dom.tree_util import closest_parent, closest_root, find_descendants, get_text_content
from form_auditor.model import (
    AuditItem,
    AuditResult,
    DuplicatesContext,
    FieldsContext,
    Reason,
    ReasonsContext,
)
from form_auditor.utils.array_util import group_by

FOR_ATTRIBUTE_REFERENCE = ref('The HTML for attribute', 'https://developer.mozilla.org/docs/Web/HTML/Attributes/for#usage')


def _labelable_fields(node: TreeNodeWithParent) -> List[TreeNodeWithParent]:
    return without_types(find_descendants(node, INPUT_SELECT_TEXT_FIELDS), ['button', 'submit'])


@audit_spec(
    audit_type='label-empty',
    title='Labels must have text content.',
    severity='warning',
    references=[ref('Empty or Missing Form Label',
                    'https://equalizedigital.com/accessibility-checker/empty-missing-form-label')],
)
def has_empty_label(tree: TreeNodeWithParent) -> List[AuditResult]:
    items = [AuditItem(node=node) for node in find_descendants(tree, ['label']) if not get_text_content(node)]
    return has_empty_label.definition.result(items)


@audit_spec(
    audit_type='label-unique',
    title='Labels in the same form should have unique values.',
    severity='warning',
    references=[ref('Duplicate Form Labels', 'https://equalizedigital.com/accessibility-checker/duplicate-form-label/')],
    context=DuplicatesContext,
)
def has_unique_labels(tree: TreeNodeWithParent) -> List[AuditResult]:
    """Within one form (or outside of any form) no two labels share the same text."""
    texts: Dict[int, str] = {node.index: get_text_content(node) for node in find_descendants(tree, ['label'])}
    labels = [node for node in find_descendants(tree, ['label']) if texts[node.index]]
    items = duplicate_items(labels, lambda node: closest_parent(node, 'form'), lambda node: texts[node.index])
    return has_unique_labels.definition.result(items)


@audit_spec(
    audit_type='label-valid-elements',
    title="Don't put headings or interactive elements in labels.",
    severity='warning',
    references=[ref('Label element: Accessibility concerns',
                    'https://developer.mozilla.org/docs/Web/HTML/Element/label#accessibility_concerns')],
    context=FieldsContext,
)
def has_label_with_valid_elements(tree: TreeNodeWithParent) -> List[AuditResult]:
    items = []
    for node in find_descendants(tree, ['label']):
        fields = find_descendants(node, LABEL_INVALID_DESCENDANTS)
        if fields:
            items.append(AuditItem(node=node, context=FieldsContext(fields=fields)))
    return has_label_with_valid_elements.definition.result(items)


@audit_spec(
    audit_type='label-for-unique',
    title='The for attribute of a label must be unique.',
    severity='warning',
    references=[ref('Duplicate Form Label', 'https://equalizedigital.com/accessibility-checker/duplicate-form-label/')],
    context=DuplicatesContext,
)
def has_label_with_unique_for_attribute(tree: TreeNodeWithParent) -> List[AuditResult]:
    labels = [node for node in find_descendants(tree, ['label']) if node.attributes.get('for')]
    items = duplicate_items(labels, closest_root, lambda node: node.attributes['for'])
    return has_label_with_unique_for_attribute.definition.result(items)


@audit_spec(
    audit_type='label-no-field',
    title='Labels must have a for attribute or contain a form field.',
    severity='warning',
    references=[FOR_ATTRIBUTE_REFERENCE],
    context=ReasonsContext,
    weight=4,
)
def has_input(tree: TreeNodeWithParent) -> List[AuditResult]:
    """
    Every label is associated with a field: it contains one, its for attribute names
    a field id, or a field references the label id through aria-labelledby.
    A for attribute must not be empty and must match an existing field id.
    """
    fields = _labelable_fields(tree)
    field_ids = group_by([node for node in fields if node.attributes.get('id')], lambda node: node.attributes['id'])
    labelled_by_ids = {
        label_id
        for node in fields
        for label_id in split_tokens(node.attributes.get('aria-labelledby', ''))
    }

    items = []
    for label in find_descendants(tree, ['label']):
        reasons: List[Reason] = []
        for_value = label.attributes.get('for')
        label_id = label.attributes.get('id')
        for_resolves = bool(for_value) and for_value in field_ids

        if for_value is not None and not for_value.strip():
            reasons.append(Reason(type='empty-for', reference=for_value))

        no_field = False
        if for_value and for_value.strip() and not for_resolves:
            reasons.append(Reason(type='for', reference=for_value))
        elif not for_resolves and not _labelable_fields(label):
            if label_id and label_id not in labelled_by_ids:
                reasons.append(Reason(type='id', reference=label_id))
            elif not label_id:
                no_field = True

        if reasons or no_field:
            items.append(AuditItem(node=label, context=ReasonsContext(reasons=reasons)))

    return has_input.definition.result(items)


CATEGORY = AuditCategory(
    name='labels',
    audits=[
        has_empty_label,
        has_unique_labels,
        has_label_with_valid_elements,
        has_label_with_unique_for_attribute,
        has_input,
    ],
)
