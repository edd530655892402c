import logging
from typing import List, Optional

from form_auditor.audits.core import AuditCategory
from form_auditor.audits.registry import AuditRegistry
from form_auditor.dom.core import TreeNodeWithParent
from form_auditor.model import AuditReport, AuditResult

logger = logging.getLogger(__name__)


class AuditEngine:
    """
    Runs every audit category against a normalized tree.

    Categories run independently and their results are concatenated in the fixed
    category order (forms, attributes, autocomplete, labels, inputs).
    """

    def __init__(self, categories: Optional[List[AuditCategory]] = None):
        self.categories = categories if categories is not None else AuditRegistry.get_categories()

    def run_audits(self, tree: TreeNodeWithParent) -> List[AuditResult]:
        results: List[AuditResult] = []
        for category in self.categories:
            category_results = category.run(tree)
            logger.debug("Category '%s' produced %d result(s)", category.name, len(category_results))
            results.extend(category_results)
        return results

    def build_report(self, tree: TreeNodeWithParent, score: Optional[float] = None) -> AuditReport:
        return AuditReport(score=score, results=self.run_audits(tree))
