# src/form_auditor/audits/core.py
from typing import Callable, List, Optional, Sequence, Type

from pydantic import BaseModel

from form_auditor.dom.core import TreeNodeWithParent
from form_auditor.model import AuditItem, AuditResult, AuditSeverity, Reference

AuditRule = Callable[[TreeNodeWithParent], List[AuditResult]]


class AuditDefinition:
    """
    Static metadata of an audit rule: its stable identifier, the human readable title,
    severity, reference links and the context payload its items carry.
    """

    def __init__(
            self,
            audit_type: str,
            title: str,
            severity: AuditSeverity,
            references: Sequence[Reference] = (),
            context: Optional[Type[BaseModel]] = None,
            weight: int = 1
    ):
        self.audit_type = audit_type
        self.title = title
        self.severity = severity
        self.references = list(references)
        self.context = context
        self.weight = weight

    def result(self, items: List[AuditItem]) -> List[AuditResult]:
        """Wraps the items in a diagnostic, or returns nothing when there are no items."""
        if not items:
            return []
        return [AuditResult(
            audit_type=self.audit_type,
            title=self.title,
            type=self.severity,
            items=items,
            references=self.references,
        )]


def audit_spec(
        audit_type: str,
        title: str,
        severity: AuditSeverity,
        references: Sequence[Reference] = (),
        context: Optional[Type[BaseModel]] = None,
        weight: int = 1
):
    """
    Decorator to declare the metadata of an audit rule function.
    The definition is exposed as `func.definition` for the registry and the rule itself.
    """
    def decorator(func):
        func.definition = AuditDefinition(audit_type, title, severity, references, context, weight)
        return func
    return decorator


def ref(title: str, url: str) -> Reference:
    return Reference(title=title, url=url)


class AuditCategory:
    """
    Named group of audit rules. Rules run in declaration order.
    """

    def __init__(self, name: str, audits: List[AuditRule]):
        self.name = name
        self.audits = audits

    @property
    def definitions(self) -> List[AuditDefinition]:
        return [rule.definition for rule in self.audits]

    def run(self, tree: TreeNodeWithParent) -> List[AuditResult]:
        results: List[AuditResult] = []
        for rule in self.audits:
            results.extend(rule(tree))
        return results
