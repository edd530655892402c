# src/form_auditor/controllers/audit_controller.py
import logging
from collections import Counter
from pathlib import Path
from typing import Dict, Iterable, Optional, Union

from pydantic import ValidationError
from tqdm import tqdm

from form_auditor.audits.engine import AuditEngine
from form_auditor.dom.builder import DOMBuilder
from form_auditor.dom.core import TreeNode
from form_auditor.dom.tree_util import normalize
from form_auditor.model import AuditReport

logger = logging.getLogger(__name__)


class AuditController:
    """
    Orchestrates a single-document audit: capture (or load) the tree, normalize it
    once, run every audit category and hand back the report.

    Applications call `configure_logger()` from `form_auditor.utils.configure_logging`
    once at startup, so log lines from a batch are written through tqdm and do not
    break the progress bar of `audit_files`:

        configure_logger(silenced_loggers={"aiohttp": "WARNING"})
        reports = AuditController().audit_files(paths)
    """

    def __init__(self, engine: Optional[AuditEngine] = None, builder: Optional[DOMBuilder] = None):
        self.engine = engine or AuditEngine()
        self.builder = builder or DOMBuilder()
        self.stats: Counter = Counter()

    def audit_tree(self, tree: Optional[TreeNode], score: Optional[float] = None) -> AuditReport:
        report = self.engine.build_report(normalize(tree), score=score)
        for result in report.results:
            self.stats[(result.type, result.audit_type)] += 1
        logger.debug(
            "Audit finished: %d error(s), %d warning(s)", len(report.errors), len(report.warnings)
        )
        return report

    async def audit_html(self, html: str, url: str = '', score: Optional[float] = None) -> AuditReport:
        tree = await self.builder.capture_html(html, url)
        return self.audit_tree(tree, score=score)

    @staticmethod
    def load_tree(path: Union[str, Path]) -> TreeNode:
        """Loads a previously saved tree (the JSON form of TreeNode)."""
        return TreeNode.model_validate_json(Path(path).read_text(encoding='utf-8'))

    @staticmethod
    def dump_tree(tree: TreeNode, path: Union[str, Path]) -> None:
        Path(path).write_text(tree.model_dump_json(exclude_none=True), encoding='utf-8')

    def audit_files(self, paths: Iterable[Union[str, Path]], show_progress: bool = True) -> Dict[str, AuditReport]:
        """
        Audits a batch of saved trees. Files that cannot be read or parsed are logged
        and skipped.
        """
        paths = [Path(p) for p in paths]
        reports: Dict[str, AuditReport] = {}

        for path in tqdm(paths, desc="Auditing", unit="doc", disable=not show_progress):
            try:
                tree = self.load_tree(path)
            except (OSError, ValidationError) as e:
                logger.error("Skipping %s: %s", path, e)
                continue
            reports[str(path)] = self.audit_tree(tree)

        return reports
