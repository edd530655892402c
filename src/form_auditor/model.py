from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from form_auditor.dom.core import TreeNodeWithParent

AuditSeverity = Literal['error', 'warning']


class Reference(BaseModel):
    """A "learn more" link shown next to a finding."""
    title: str
    url: str


class InvalidAttribute(BaseModel):
    attribute: str
    suggestion: Optional[str] = None


class InvalidAttributesContext(BaseModel):
    kind: Literal['invalid-attributes'] = 'invalid-attributes'
    invalid_attributes: List[InvalidAttribute] = Field(default_factory=list)


class DuplicatesContext(BaseModel):
    """The other nodes sharing the reported node's id, name, text or for value."""
    model_config = ConfigDict(arbitrary_types_allowed=True)

    kind: Literal['duplicates'] = 'duplicates'
    duplicates: List[TreeNodeWithParent] = Field(default_factory=list)


class TokenSuggestionContext(BaseModel):
    kind: Literal['token-suggestion'] = 'token-suggestion'
    token: str
    suggestion: Optional[str] = None


class SuggestionContext(BaseModel):
    kind: Literal['suggestion'] = 'suggestion'
    suggestion: Optional[str] = None


class Reason(BaseModel):
    type: str
    reference: str


class ReasonsContext(BaseModel):
    kind: Literal['reasons'] = 'reasons'
    reasons: List[Reason] = Field(default_factory=list)


class FieldsContext(BaseModel):
    """Offending descendants, e.g. headings or buttons nested inside a label."""
    model_config = ConfigDict(arbitrary_types_allowed=True)

    kind: Literal['fields'] = 'fields'
    fields: List[TreeNodeWithParent] = Field(default_factory=list)


AuditContext = Annotated[
    Union[
        InvalidAttributesContext,
        DuplicatesContext,
        TokenSuggestionContext,
        SuggestionContext,
        ReasonsContext,
        FieldsContext,
    ],
    Field(discriminator='kind'),
]


class AuditItem(BaseModel):
    """
    One piece of evidence for a finding. `node` is the very node object from the
    audited tree, so callers can compute its path for highlighting.
    """
    model_config = ConfigDict(arbitrary_types_allowed=True)

    node: TreeNodeWithParent
    context: Optional[AuditContext] = None


class AuditResult(BaseModel):
    """
    A single diagnostic produced by one audit rule.
    """
    model_config = ConfigDict(populate_by_name=True)

    audit_type: str = Field(alias='auditType')
    title: str
    type: AuditSeverity
    items: List[AuditItem] = Field(default_factory=list)
    references: List[Reference] = Field(default_factory=list)
    details: Optional[str] = None

    @property
    def nodes(self) -> List[TreeNodeWithParent]:
        return [item.node for item in self.items]


class AuditReport(BaseModel):
    """
    Output of a full audit run. The score is owned by the caller and is only carried along.
    """
    score: Optional[float] = None
    results: List[AuditResult] = Field(default_factory=list)

    @property
    def errors(self) -> List[AuditResult]:
        return [result for result in self.results if result.type == 'error']

    @property
    def warnings(self) -> List[AuditResult]:
        return [result for result in self.results if result.type == 'warning']
