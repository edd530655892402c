import asyncio
import logging

import pytest

from form_auditor.controllers.audit_controller import AuditController
from form_auditor.dom.core import TreeNode
from form_auditor.utils.configure_logging import configure_logger

SIGNUP_TREE = {'children': [{'name': 'form', 'children': [
    {'name': 'label', 'attributes': {'for': 'email'}, 'children': [{'text': 'Email'}]},
    {'name': 'input', 'attributes': {'id': 'email', 'name': 'email', 'autocomplete': 'emial'}},
]}]}


@pytest.fixture
def controller():
    return AuditController()


def test_audit_html(controller):
    report = asyncio.run(controller.audit_html('<form><p>Nothing to fill in</p></form>', score=42))

    assert report.score == 42
    assert [result.audit_type for result in report.results] == ['form-empty']
    assert controller.stats[('error', 'form-empty')] == 1


def test_audit_tree(controller):
    report = controller.audit_tree(TreeNode.model_validate(SIGNUP_TREE))
    (result,) = report.results

    assert result.audit_type == 'autocomplete-valid'
    assert result.items[0].context.suggestion == 'email'
    assert report.score is None


def test_audit_empty_tree(controller):
    assert controller.audit_tree(None).results == []


def test_dump_and_load_tree(controller, tmp_path):
    tree = TreeNode.model_validate(SIGNUP_TREE)
    path = tmp_path / 'signup.json'

    controller.dump_tree(tree, path)
    assert controller.load_tree(path) == tree


def test_audit_files_skips_unreadable(controller, tmp_path, caplog):
    good = tmp_path / 'good.json'
    controller.dump_tree(TreeNode.model_validate({'children': [{'name': 'form'}]}), good)
    broken = tmp_path / 'broken.json'
    broken.write_text('{"children": 3}')
    missing = tmp_path / 'missing.json'

    with caplog.at_level(logging.ERROR):
        reports = controller.audit_files([good, broken, missing], show_progress=False)

    assert list(reports) == [str(good)]
    assert reports[str(good)].results[0].audit_type == 'form-empty'
    assert len([record for record in caplog.records if record.levelno == logging.ERROR]) == 2


def test_audit_files_logs_through_tqdm_handler(controller, tmp_path, capsys):
    root_logger = logging.getLogger()
    handlers, level = list(root_logger.handlers), root_logger.level
    try:
        configure_logger(general_level="INFO")
        reports = controller.audit_files([tmp_path / 'missing.json'], show_progress=True)
    finally:
        root_logger.handlers[:] = handlers
        root_logger.setLevel(level)

    assert reports == {}
    captured = capsys.readouterr()
    assert "ERROR" in captured.err
    assert "missing.json" in captured.err
