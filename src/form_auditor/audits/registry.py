# src/form_auditor/audits/registry.py
import importlib
import logging
import pkgutil
from typing import Dict, List

from form_auditor.audits.core import AuditCategory, AuditDefinition

logger = logging.getLogger(__name__)

RULES_PACKAGE = "form_auditor.audits.rules"

# Results are reported in this order, whatever order the modules are found in.
CATEGORY_ORDER = ["forms", "attributes", "autocomplete", "labels", "inputs"]


class AuditRegistry:
    """
    Central registry for audit categories.

    Dynamically discovers the modules of the 'form_auditor.audits.rules' package and
    registers every module exposing a `CATEGORY` (instance of `AuditCategory`).
    """

    _categories: Dict[str, AuditCategory] = {}
    _loaded: bool = False

    @classmethod
    def discover(cls) -> None:
        if cls._loaded:
            return

        import form_auditor.audits.rules as rules_pkg

        for _, name, _ in pkgutil.iter_modules(rules_pkg.__path__):
            module = importlib.import_module(f"{RULES_PACKAGE}.{name}")
            category = getattr(module, "CATEGORY", None)
            if isinstance(category, AuditCategory):
                cls._categories[category.name] = category
                logger.debug("Audit category loaded: %s (%d rules)", category.name, len(category.audits))

        cls._loaded = True

    @classmethod
    def get_categories(cls) -> List[AuditCategory]:
        """Returns the registered categories in reporting order; unknown categories come last."""
        cls.discover()
        rank = {name: i for i, name in enumerate(CATEGORY_ORDER)}
        return sorted(cls._categories.values(), key=lambda c: rank.get(c.name, len(rank)))

    @classmethod
    def get_all_definitions(cls) -> List[AuditDefinition]:
        return [definition for category in cls.get_categories() for definition in category.definitions]

    @classmethod
    def get_all_audit_types(cls) -> List[str]:
        return sorted({definition.audit_type for definition in cls.get_all_definitions()})
