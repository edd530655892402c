from typing import List

from form_auditor.audits.audit_util import split_tokens, without_types
from form_auditor.audits.core import AuditCategory, audit_spec, ref
from form_auditor.constants import INPUT_SELECT_TEXT_FIELDS, INPUT_TYPES
from form_auditor.dom.core import TreeNodeWithParent
from form_auditor.dom.tree_util import closest_parent, find_descendants
from form_auditor.model import AuditItem, AuditResult, Reason, ReasonsContext, SuggestionContext
from form_auditor.services.suggestion_service import SuggestionService


@audit_spec(
    audit_type='input-type-valid',
    title='Input elements should have a valid type attribute.',
    severity='error',
    references=[ref('The input element type attribute',
                    'https://developer.mozilla.org/docs/Web/HTML/Element/input#input_types')],
    context=SuggestionContext,
    weight=5,
)
def has_valid_input_type(tree: TreeNodeWithParent) -> List[AuditResult]:
    """Input types are compared case-insensitively, as browsers do."""
    suggestions = SuggestionService.for_input_types()
    items = []
    for node in find_descendants(tree, ['input']):
        input_type = node.attributes.get('type')
        if input_type and input_type.lower() not in INPUT_TYPES:
            context = SuggestionContext(suggestion=suggestions.suggest(input_type.lower()))
            items.append(AuditItem(node=node, context=context))
    return has_valid_input_type.definition.result(items)


@audit_spec(
    audit_type='input-label',
    title='Form fields should have an associated label.',
    severity='error',
    references=[ref('Label element: Accessibility concerns',
                    'https://developer.mozilla.org/docs/Web/HTML/Element/label#accessibility_concerns')],
    context=ReasonsContext,
    weight=3,
)
def input_has_label(tree: TreeNodeWithParent) -> List[AuditResult]:
    """
    Every field is labelled: it sits inside a label, a label's for attribute names its
    id, or its aria-labelledby references a label id. The reasons list which
    references were tried without success.
    """
    labels = find_descendants(tree, ['label'])
    label_ids = {node.attributes['id'] for node in labels if node.attributes.get('id')}
    label_fors = {node.attributes['for'] for node in labels if node.attributes.get('for')}
    fields = without_types(find_descendants(tree, INPUT_SELECT_TEXT_FIELDS), ['hidden', 'button', 'submit'])

    items = []
    for node in fields:
        if closest_parent(node, 'label') is not None:
            continue

        reasons: List[Reason] = []
        field_id = node.attributes.get('id')
        if field_id:
            if field_id in label_fors:
                continue
            reasons.append(Reason(type='id', reference=field_id))

        labelled_by = node.attributes.get('aria-labelledby')
        if labelled_by:
            if any(label_id in label_ids for label_id in split_tokens(labelled_by)):
                continue
            reasons.append(Reason(type='aria-labelledby', reference=labelled_by))

        items.append(AuditItem(node=node, context=ReasonsContext(reasons=reasons)))

    return input_has_label.definition.result(items)


CATEGORY = AuditCategory(name='inputs', audits=[has_valid_input_type, input_has_label])
