# tests/core/test_audit_engine.py
import json

import pytest

from form_auditor.audits.audit_util import make_audit_report_serializable, stringify_form_element
from form_auditor.audits.core import AuditCategory, audit_spec
from form_auditor.audits.engine import AuditEngine
from form_auditor.audits.registry import CATEGORY_ORDER, AuditRegistry
from form_auditor.model import AuditItem

MIXED_TREE = {'children': [
    {'name': 'form'},
    {'name': 'form', 'children': [
        {'name': 'input', 'attributes': {'name': 'x', 'id': 'x1'}},
        {'name': 'input', 'attributes': {'name': 'x', 'id': 'x2'}},
        {'name': 'label', 'children': [{'text': ''}]},
        {'name': 'input', 'attributes': {'type': 'passwrd', 'id': 'p', 'name': 'p'}},
    ]},
]}


@pytest.fixture
def mixed_tree(make_tree):
    return make_tree(MIXED_TREE)


def test_registry_discovers_categories_in_order():
    assert [category.name for category in AuditRegistry.get_categories()] == CATEGORY_ORDER


def test_registry_lists_every_audit_type():
    assert AuditRegistry.get_all_audit_types() == sorted([
        'autocomplete-attribute', 'autocomplete-empty', 'autocomplete-off', 'autocomplete-valid',
        'form-empty',
        'input-label', 'input-type-valid',
        'invalid-attributes',
        'label-empty', 'label-for-unique', 'label-no-field', 'label-unique', 'label-valid-elements',
        'missing-identifier',
        'unique-ids', 'unique-names',
    ])


def test_engine_orders_results_by_category(mixed_tree):
    report = AuditEngine().build_report(mixed_tree, score=0.5)

    assert report.score == 0.5
    assert [result.audit_type for result in report.results] == [
        'form-empty', 'unique-names', 'label-empty', 'label-no-field', 'input-type-valid', 'input-label',
    ]
    assert [result.audit_type for result in report.errors] == ['form-empty', 'input-type-valid', 'input-label']
    assert len(report.warnings) == 3


def test_clean_tree_has_no_results(make_tree):
    tree = make_tree({'children': [{'name': 'form', 'children': [
        {'name': 'label', 'attributes': {'for': 'email'}, 'children': [{'text': 'Email'}]},
        {'name': 'input', 'attributes': {'id': 'email', 'name': 'email', 'type': 'email', 'autocomplete': 'email'}},
        {'name': 'button', 'attributes': {'type': 'submit'}, 'children': [{'text': 'Sign up'}]},
    ]}]})
    assert AuditEngine().run_audits(tree) == []


def test_engine_with_custom_categories(make_tree):
    @audit_spec(audit_type='always', title='Always fires.', severity='warning')
    def always(tree):
        return always.definition.result([AuditItem(node=tree)])

    tree = make_tree({})
    engine = AuditEngine(categories=[AuditCategory(name='custom', audits=[always])])
    (result,) = engine.run_audits(tree)
    assert result.audit_type == 'always'
    assert result.nodes == [tree]
    assert engine.categories[0].definitions[0].audit_type == 'always'


def test_audits_are_repeatable(mixed_tree):
    engine = AuditEngine()
    first = make_audit_report_serializable(engine.build_report(mixed_tree))
    second = make_audit_report_serializable(engine.build_report(mixed_tree))
    assert first == second


def test_serializable_report(mixed_tree):
    report = make_audit_report_serializable(AuditEngine().build_report(mixed_tree, score=1))
    unique_names = next(result for result in report['results'] if result['auditType'] == 'unique-names')
    (item,) = unique_names['items']

    assert unique_names['type'] == 'warning'
    assert unique_names['details'] == '1 element\n<input name="x" id="x1">'
    assert unique_names['references'][0]['url'].startswith('https://')
    assert item['path'] == '//form[1]/input#x1'
    assert item['html'] == '<input name="x" id="x1">'
    assert item['context'] == {
        'kind': 'duplicates',
        'duplicates': [{'name': 'input', 'attributes': {'name': 'x', 'id': 'x2'}, 'path': '//form[1]/input#x2'}],
    }
    # Nothing in the report refers back to live nodes.
    json.dumps(report)


def test_stringify_form_element(make_tree):
    tree = make_tree({'children': [
        {'name': 'label', 'attributes': {'for': ''}, 'children': [{'text': 'Email'}]},
        {'name': 'input', 'attributes': {'type': 'text', 'style': 'color: red', 'placeholder': 'Your name'}},
    ]})
    label, field = tree.children

    assert stringify_form_element(label) == '<label for>Email</label>'
    assert stringify_form_element(field) == '<input type="text" placeholder="Your name" ...>'
    assert stringify_form_element(field, ['style']) == '<input type="text" style="color: red" placeholder="Your name">'
