"""Base classes for content policies."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

from bs4 import BeautifulSoup

DEFAULT_PRIORITY = 100


@dataclass(frozen=True)
class PolicyResult:
    html: str
    passed: bool = True
    warnings: List[str] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)
    actions: List[str] = field(default_factory=list)

    @property
    def triggered(self) -> bool:
        return bool(self.warnings or self.errors or self.actions)


def success_result(html: str, actions: Optional[List[str]] = None) -> PolicyResult:
    return PolicyResult(html=html, passed=True, actions=list(actions or []))


def warning_result(html: str, warnings: List[str], actions: Optional[List[str]] = None) -> PolicyResult:
    return PolicyResult(html=html, passed=True, warnings=list(warnings), actions=list(actions or []))


def failed_result(html: str, errors: List[str], warnings: Optional[List[str]] = None) -> PolicyResult:
    return PolicyResult(html=html, passed=False, errors=list(errors), warnings=list(warnings or []))


class Policy(ABC):
    """A named validation / mutation rule run by the policy engine.

    Policies are stateless: everything that varies per run arrives through
    ``options``, which :meth:`resolve_options` layers over
    :attr:`default_options`.
    """

    name: str = ""
    description: str = ""
    priority: int = DEFAULT_PRIORITY
    default_options: Dict[str, Any] = {}

    def resolve_options(self, options: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
        resolved = dict(self.default_options)
        resolved.update(options or {})
        return resolved

    @abstractmethod
    def apply(self, html: str, soup: BeautifulSoup, options: Mapping[str, Any]) -> PolicyResult:
        """Inspect or rewrite ``html`` (parsed as ``soup``) and report the outcome."""

    def describe(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "priority": self.priority,
        }
