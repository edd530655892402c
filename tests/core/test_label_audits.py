from form_auditor.audits.rules.labels import (
    has_empty_label,
    has_input,
    has_label_with_unique_for_attribute,
    has_label_with_valid_elements,
    has_unique_labels,
)


def reasons_of(result):
    return [[(reason.type, reason.reference) for reason in item.context.reasons] for item in result.items]


def test_empty_label_fires(make_tree):
    tree = make_tree({'children': [{'name': 'label', 'children': [{'text': ''}]}]})
    (result,) = has_empty_label(tree)
    assert result.audit_type == 'label-empty'


def test_label_with_text_is_not_empty(make_tree):
    tree = make_tree({'children': [{'name': 'label', 'children': [{'text': 'hi'}]}]})
    assert has_empty_label(tree) == []


def test_label_text_in_nested_element_counts(make_tree):
    tree = make_tree({'children': [{'name': 'label', 'children': [{'name': 'span', 'children': [{'text': 'Email'}]}]}]})
    assert has_empty_label(tree) == []


def test_duplicate_label_text_in_same_form(make_tree):
    tree = make_tree({'children': [{'name': 'form', 'children': [
        {'name': 'label', 'children': [{'text': 'Name'}]},
        {'name': 'label', 'children': [{'text': 'Name'}]},
        {'name': 'label', 'children': [{'text': 'Email'}]},
    ]}]})
    (result,) = has_unique_labels(tree)
    form = tree.children[0]
    assert result.items[0].node is form.children[0]
    assert result.items[0].context.duplicates == [form.children[1]]


def test_same_label_text_in_different_forms(make_tree):
    tree = make_tree({'children': [
        {'name': 'form', 'children': [{'name': 'label', 'children': [{'text': 'Name'}]}]},
        {'name': 'form', 'children': [{'name': 'label', 'children': [{'text': 'Name'}]}]},
    ]})
    assert has_unique_labels(tree) == []


def test_empty_labels_are_not_duplicates(make_tree):
    tree = make_tree({'children': [{'name': 'label'}, {'name': 'label'}]})
    assert has_unique_labels(tree) == []


def test_label_with_interactive_descendants(make_tree):
    tree = make_tree({'children': [{'name': 'label', 'children': [
        {'name': 'h2', 'children': [{'text': 'Terms'}]},
        {'name': 'span', 'children': [{'name': 'a', 'attributes': {'href': '/terms'}}]},
        {'name': 'input', 'attributes': {'type': 'checkbox'}},
    ]}]})
    (result,) = has_label_with_valid_elements(tree)
    (item,) = result.items
    assert item.context.kind == 'fields'
    assert [node.name for node in item.context.fields] == ['h2', 'a']


def test_duplicate_for_attribute(make_tree):
    tree = make_tree({'children': [
        {'name': 'label', 'attributes': {'for': 'email'}},
        {'name': 'label', 'attributes': {'for': 'email'}},
        {'name': 'label', 'attributes': {'for': ''}},
        {'name': 'label', 'attributes': {'for': ''}},
    ]})
    (result,) = has_label_with_unique_for_attribute(tree)
    assert result.audit_type == 'label-for-unique'
    assert len(result.items) == 1
    assert result.items[0].node.attributes['for'] == 'email'


def test_label_associations_that_resolve(make_tree):
    tree = make_tree({'children': [
        {'name': 'label', 'attributes': {'for': 'email'}, 'children': [{'text': 'Email'}]},
        {'name': 'input', 'attributes': {'id': 'email'}},
        {'name': 'label', 'children': [{'text': 'Phone'}, {'name': 'input', 'attributes': {'name': 'phone'}}]},
        {'name': 'label', 'attributes': {'id': 'city-label'}, 'children': [{'text': 'City'}]},
        {'name': 'input', 'attributes': {'aria-labelledby': 'other city-label'}},
    ]})
    assert has_input(tree) == []


def test_label_reasons(make_tree):
    tree = make_tree({'children': [
        {'name': 'label', 'attributes': {'for': ''}, 'children': [{'text': 'Empty for'}]},
        {'name': 'label', 'attributes': {'for': 'missing'}, 'children': [{'text': 'Dangling'}]},
        {'name': 'label', 'attributes': {'id': 'orphan'}, 'children': [{'text': 'Orphan'}]},
        {'name': 'label', 'children': [{'text': 'Nothing'}]},
        {'name': 'input', 'attributes': {'id': 'present'}},
    ]})
    (result,) = has_input(tree)

    assert result.audit_type == 'label-no-field'
    assert reasons_of(result) == [
        [('empty-for', '')],
        [('for', 'missing')],
        [('id', 'orphan')],
        [],
    ]


def test_label_for_submit_button_does_not_resolve(make_tree):
    tree = make_tree({'children': [
        {'name': 'label', 'attributes': {'for': 'go'}, 'children': [{'text': 'Go'}]},
        {'name': 'input', 'attributes': {'id': 'go', 'type': 'submit'}},
    ]})
    (result,) = has_input(tree)
    assert reasons_of(result) == [[('for', 'go')]]
