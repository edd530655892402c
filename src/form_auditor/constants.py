# src/form_auditor/constants.py
"""
Vocabularies used by the capture step and the audit rules.
Values follow the HTML Living Standard (https://html.spec.whatwg.org/multipage/forms.html).
"""
from typing import Dict, List

FORM_FIELDS: List[str] = ['button', 'input', 'select', 'textarea']
INPUT_SELECT_TEXT_FIELDS: List[str] = ['input', 'select', 'textarea']
ATTRIBUTE_AUDIT_ELEMENTS: List[str] = ['button', 'form', 'input', 'label', 'select', 'textarea']
LABEL_INVALID_DESCENDANTS: List[str] = ['a', 'button', 'h1', 'h2', 'h3', 'h4', 'h5', 'h6']

# 'role' is not in the forms chapter but is valid on every element.
# aria-*, data-* and on* handlers are accepted separately by the attribute audit.
ATTRIBUTES: Dict[str, List[str]] = {
    'global': [
        'accesskey', 'autocapitalize', 'autofocus', 'autofill-information', 'autofill-prediction',
        'class', 'contenteditable', 'dir', 'draggable', 'enterkeyhint', 'exportparts', 'hidden',
        'inert', 'inputmode', 'is', 'id', 'itemid', 'itemprop', 'itemref', 'itemscope', 'itemtype',
        'lang', 'nonce', 'part', 'popover', 'role', 'slot', 'spellcheck', 'style', 'tabindex',
        'title', 'translate',
    ],
    'button': [
        'disabled', 'form', 'formaction', 'formenctype', 'formmethod', 'formnovalidate',
        'formtarget', 'name', 'popovertarget', 'popovertargetaction', 'type', 'value',
    ],
    'form': [
        'accept-charset', 'action', 'autocomplete', 'enctype', 'method', 'name', 'novalidate',
        'target', 'rel',
    ],
    # autocorrect is Safari only.
    'input': [
        'accept', 'alt', 'autocomplete', 'autocorrect', 'capture', 'checked', 'dirname', 'disabled',
        'form', 'formaction', 'formenctype', 'formmethod', 'formnovalidate', 'formtarget', 'height',
        'list', 'max', 'maxlength', 'min', 'minlength', 'multiple', 'name', 'pattern', 'placeholder',
        'popovertarget', 'popovertargetaction', 'readonly', 'required', 'size', 'src', 'step', 'type',
        'value', 'width',
    ],
    'label': ['for'],
    'select': ['autocomplete', 'disabled', 'form', 'multiple', 'name', 'required', 'size'],
    'textarea': [
        'autocomplete', 'cols', 'dirname', 'disabled', 'form', 'maxlength', 'minlength', 'name',
        'placeholder', 'readonly', 'required', 'rows', 'wrap',
    ],
}

INPUT_TYPES: List[str] = [
    'button', 'checkbox', 'color', 'date', 'datetime-local', 'email', 'file', 'hidden', 'image',
    'month', 'number', 'password', 'radio', 'range', 'reset', 'search', 'submit', 'tel', 'text',
    'time', 'url', 'week',
]

# From https://html.spec.whatwg.org/multipage/form-control-infrastructure.html#autofill
# 'off' is audited on its own and is not listed here.
AUTOCOMPLETE_TOKENS: List[str] = [
    'additional-name', 'address-level1', 'address-level2', 'address-level3', 'address-level4',
    'address-line1', 'address-line2', 'address-line3', 'bday', 'bday-day', 'bday-month', 'bday-year',
    'billing', 'cc-additional-name', 'cc-csc', 'cc-exp', 'cc-exp-month', 'cc-exp-year',
    'cc-family-name', 'cc-given-name', 'cc-name', 'cc-number', 'cc-type', 'country', 'country-name',
    'current-password', 'email', 'family-name', 'fax', 'given-name', 'home', 'honorific-prefix',
    'honorific-suffix', 'impp', 'language', 'mobile', 'name', 'new-password', 'nickname', 'on',
    'one-time-code', 'organization', 'organization-title', 'pager', 'photo', 'postal-code', 'sex',
    'shipping', 'street-address', 'tel', 'tel-area-code', 'tel-country-code', 'tel-extension',
    'tel-local', 'tel-local-prefix', 'tel-local-suffix', 'tel-national', 'transaction-amount',
    'transaction-currency', 'url', 'username', 'webauthn', 'work',
]

# Common non-standard values mapped onto the token a browser understands.
AUTOCOMPLETE_ALIASES: Dict[str, str] = {
    'address': 'street-address',
    'birthday': 'bday',
    'city': 'address-level2',
    'company': 'organization',
    'e-mail': 'email',
    'first-name': 'given-name',
    'firstname': 'given-name',
    'last-name': 'family-name',
    'lastname': 'family-name',
    'mail': 'email',
    'password': 'current-password',
    'phone': 'tel',
    'postcode': 'postal-code',
    'province': 'address-level1',
    'state': 'address-level1',
    'surname': 'family-name',
    'telephone': 'tel',
    'zip': 'postal-code',
    'zip-code': 'postal-code',
    'zipcode': 'postal-code',
}

SHADOW_ROOT_MARKER = '#shadow-root'
DOCUMENT_MARKER = '#document'
