# src/form_auditor/services/suggestion_service.py
import difflib
import logging
from typing import Dict, Iterable, List, Optional

from form_auditor.constants import ATTRIBUTES, AUTOCOMPLETE_ALIASES, AUTOCOMPLETE_TOKENS, INPUT_TYPES
from form_auditor.utils.config_loader import get_nested_config

logger = logging.getLogger(__name__)

DEFAULT_ATTRIBUTE_CUTOFF = 0.8
DEFAULT_INPUT_TYPE_CUTOFF = 0.7
DEFAULT_AUTOCOMPLETE_CUTOFF = 0.7


class SuggestionService:
    """
    Approximate "did you mean" lookup over a closed vocabulary.

    The best match above `cutoff` (a difflib similarity ratio between 0 and 1) is
    returned, optionally rewritten through an alias table. Ties are resolved by
    difflib's ranking, so the same input always yields the same suggestion.
    """

    def __init__(self, vocabulary: Iterable[str], cutoff: float, aliases: Optional[Dict[str, str]] = None):
        # dict.fromkeys keeps first-seen order while dropping duplicates.
        self.vocabulary: List[str] = list(dict.fromkeys(vocabulary))
        self.cutoff = cutoff
        self.aliases = aliases or {}

    def suggest(self, candidate: Optional[str]) -> Optional[str]:
        if not candidate:
            return None

        matches = difflib.get_close_matches(candidate, self.vocabulary, n=1, cutoff=self.cutoff)
        if not matches:
            return None

        suggestion = matches[0]
        return self.aliases.get(suggestion, suggestion)

    @classmethod
    def for_attributes(cls, element_name: Optional[str]) -> 'SuggestionService':
        """Attribute names valid on the element, including the global ones."""
        cutoff = get_nested_config('suggestions.attribute_cutoff', DEFAULT_ATTRIBUTE_CUTOFF)
        return cls([*ATTRIBUTES['global'], *ATTRIBUTES.get(element_name or '', [])], cutoff)

    @classmethod
    def for_input_types(cls) -> 'SuggestionService':
        cutoff = get_nested_config('suggestions.input_type_cutoff', DEFAULT_INPUT_TYPE_CUTOFF)
        return cls(INPUT_TYPES, cutoff)

    @classmethod
    def for_autocomplete(cls) -> 'SuggestionService':
        """Autocomplete tokens plus known aliases, which are mapped to their standard token."""
        cutoff = get_nested_config('suggestions.autocomplete_cutoff', DEFAULT_AUTOCOMPLETE_CUTOFF)
        return cls([*AUTOCOMPLETE_TOKENS, *AUTOCOMPLETE_ALIASES], cutoff, AUTOCOMPLETE_ALIASES)
