from typing import List

from form_auditor.audits.audit_util import split_tokens, without_types
from form_auditor.audits.core import AuditCategory, audit_spec, ref
from form_auditor.constants import AUTOCOMPLETE_TOKENS, INPUT_SELECT_TEXT_FIELDS
from form_auditor.dom.core import TreeNodeWithParent
from form_auditor.dom.tree_util import find_descendants
from form_auditor.model import AuditItem, AuditResult, TokenSuggestionContext
from form_auditor.services.suggestion_service import SuggestionService

AUTOCOMPLETE_VALUES_REFERENCE = ref(
    'The HTML autocomplete attribute: Values',
    'https://developer.mozilla.org/docs/Web/HTML/Attributes/autocomplete#values',
)


def _autocomplete_fields(tree: TreeNodeWithParent) -> List[TreeNodeWithParent]:
    return without_types(find_descendants(tree, INPUT_SELECT_TEXT_FIELDS), ['hidden', 'button', 'submit'])


@audit_spec(
    audit_type='autocomplete-attribute',
    title='Form fields should use autocomplete where possible.',
    severity='warning',
    references=[ref('Help users to avoid re-entering data', 'https://web.dev/sign-in-form-best-practices/#autofill')],
)
def has_autocomplete_attributes(tree: TreeNodeWithParent) -> List[AuditResult]:
    """
    Fields whose id or name is itself an autocomplete token should declare autocomplete.
    Empty autocomplete values are reported by has_empty_autocomplete().
    """
    items = [
        AuditItem(node=node) for node in _autocomplete_fields(tree)
        if 'autocomplete' not in node.attributes and (
            node.attributes.get('id') in AUTOCOMPLETE_TOKENS or node.attributes.get('name') in AUTOCOMPLETE_TOKENS
        )
    ]
    return has_autocomplete_attributes.definition.result(items)


@audit_spec(
    audit_type='autocomplete-empty',
    title='Autocomplete values must not be empty.',
    severity='warning',
    references=[AUTOCOMPLETE_VALUES_REFERENCE],
)
def has_empty_autocomplete(tree: TreeNodeWithParent) -> List[AuditResult]:
    items = [
        AuditItem(node=node) for node in _autocomplete_fields(tree)
        if 'autocomplete' in node.attributes and not node.attributes['autocomplete'].strip()
    ]
    return has_empty_autocomplete.definition.result(items)


@audit_spec(
    audit_type='autocomplete-off',
    title='Form fields should not use autocomplete="off".',
    severity='warning',
    references=[AUTOCOMPLETE_VALUES_REFERENCE],
)
def has_autocomplete_off(tree: TreeNodeWithParent) -> List[AuditResult]:
    """autocomplete="off" is discouraged rather than invalid, so this is only a warning."""
    items = [
        AuditItem(node=node) for node in _autocomplete_fields(tree)
        if node.attributes.get('autocomplete', '').strip() == 'off'
    ]
    return has_autocomplete_off.definition.result(items)


@audit_spec(
    audit_type='autocomplete-valid',
    title='Autocomplete values must be valid.',
    severity='error',
    references=[ref('The HTML autocomplete attribute', 'https://developer.mozilla.org/docs/Web/HTML/Attributes/autocomplete')],
    context=TokenSuggestionContext,
    weight=5,
)
def has_valid_autocomplete(tree: TreeNodeWithParent) -> List[AuditResult]:
    """
    Every token of an autocomplete value is valid. Each invalid token is reported
    separately. Token order is not checked, and section-* tokens are always allowed.
    """
    suggestions = SuggestionService.for_autocomplete()
    items = []

    for node in _autocomplete_fields(tree):
        value = node.attributes.get('autocomplete', '')
        # Missing, empty and "off" values are handled by the rules above.
        if not value.strip() or value.strip() == 'off':
            continue
        for token in split_tokens(value):
            if token in AUTOCOMPLETE_TOKENS or token.startswith('section-'):
                continue
            context = TokenSuggestionContext(token=token, suggestion=suggestions.suggest(token))
            items.append(AuditItem(node=node, context=context))

    return has_valid_autocomplete.definition.result(items)


CATEGORY = AuditCategory(
    name='autocomplete',
    audits=[has_autocomplete_attributes, has_empty_autocomplete, has_autocomplete_off, has_valid_autocomplete],
)
