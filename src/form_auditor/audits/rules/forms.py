from typing import List

from form_auditor.audits.core import AuditCategory, audit_spec, ref
from form_auditor.constants import FORM_FIELDS
from form_auditor.dom.core import TreeNodeWithParent
from form_auditor.dom.tree_util import find_descendants
from form_auditor.model import AuditItem, AuditResult


@audit_spec(
    audit_type='form-empty',
    title='Forms should contain form fields.',
    severity='error',
    references=[ref('MDN: The HTML form element', 'https://developer.mozilla.org/docs/Web/HTML/Element/form')],
)
def has_empty_forms(tree: TreeNodeWithParent) -> List[AuditResult]:
    """Every form element contains at least one button, input, select or textarea."""
    forms = find_descendants(tree, ['form'])
    items = [AuditItem(node=form) for form in forms if not find_descendants(form, FORM_FIELDS)]
    return has_empty_forms.definition.result(items)


CATEGORY = AuditCategory(name='forms', audits=[has_empty_forms])
