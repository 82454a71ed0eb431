# src/ludwig/dom/core.py
from enum import Enum
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from pydantic import BaseModel, ConfigDict, Field


class ParseError(ValueError):
    """Raised when a source text cannot be turned into a Document Tree."""


class Severity(str, Enum):
    """Severity tiers, in the order rules are registered and reported."""

    CRITICAL = "critical"
    SERIOUS = "serious"
    MODERATE = "moderate"
    MINOR = "minor"


SEVERITY_ORDER: Tuple[Severity, ...] = tuple(Severity)


class ElementBase(BaseModel):
    """
    Immutable node of the Document Tree built for a single analysis pass.
    """
    model_config = ConfigDict(frozen=True)

    tag: str
    attrs: Dict[str, str] = Field(default_factory=dict)
    text: str = ""
    markup: str = ""
    sourceline: Optional[int] = None
    children: Tuple['ElementBase', ...] = ()

    def get(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """Returns an attribute value, or ``default`` when the attribute is absent."""
        return self.attrs.get(name, default)

    def has(self, name: str) -> bool:
        return name in self.attrs


ElementBase.model_rebuild()


class Finding(BaseModel):
    """
    One detected violation. ``key`` is the outer markup of the offending node
    and is the join key between the compiled table and the document lines.
    """
    model_config = ConfigDict(frozen=True)

    key: str
    description: str
    links: Tuple[str, ...] = Field(min_length=1)


# A rule receives the document root (the body) and returns its findings.
RuleFunction = Callable[[ElementBase], Sequence[Finding]]


class RuleDefinition:
    """
    Configuration object binding a check name and severity tier to its
    evaluate function and reference links.
    """

    def __init__(
            self,
            name: str,
            tier: Severity,
            evaluate: RuleFunction,
            links: Optional[List[str]] = None,
            summary: str = ""
    ):
        self.name = name
        self.tier = Severity(tier)
        self.evaluate = evaluate
        self.links = tuple(links or [])
        if not self.links:
            raise ValueError(f"Rule '{self.full_name}' must declare at least one reference link")
        self.summary = summary

    @property
    def full_name(self) -> str:
        """Stable identifier, e.g. ``critical/form-labels``."""
        return f"{self.tier.value}/{self.name}"

    def finding(self, node: ElementBase, description: str) -> Finding:
        """Builds a Finding for ``node`` carrying this rule's reference links."""
        return Finding(key=node.markup, description=description, links=self.links)

    def __repr__(self) -> str:
        return f"RuleDefinition({self.full_name!r})"
