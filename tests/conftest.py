import pytest

from form_auditor.dom.core import TreeNode
from form_auditor.dom.tree_util import normalize


@pytest.fixture
def make_tree():
    """Builds a normalized tree from the plain dict form of a TreeNode."""
    def _make(data):
        return normalize(TreeNode.model_validate(data))
    return _make
