"""
Policy engine.

Runs every enabled policy over the working fragment in ascending
priority order, folding each :class:`~docs2gutenberg.policies.base.PolicyResult`
into one :class:`PolicyEngineResult`.  A policy that rewrites the HTML
hands the next policy a freshly parsed tree; a policy that raises is
recorded as an error and the run moves on to the next policy.

Configuration entries per policy name:

* ``False``: disabled
* ``True`` or absent: enabled with the policy's default options
* ``{"enabled": bool, "options": {...}}``: enabled only when ``enabled`` is true

Names that are not registered are ignored.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple

from bs4 import BeautifulSoup

from ..utils.dom import parse_html
from ..utils.errors import PolicyError
from .base import Policy, PolicyResult
from .registry import REGISTRY, PolicyRegistry, load_policies

logger = logging.getLogger(__name__)

MODES = ("strict", "relaxed")


@dataclass
class PolicyEngineResult:
    html: str
    warnings: List[str] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)
    actions: List[str] = field(default_factory=list)
    policies_triggered: List[str] = field(default_factory=list)
    all_passed: bool = True

    def merge(self, policy_name: str, result: PolicyResult) -> None:
        self.warnings.extend(result.warnings)
        self.errors.extend(result.errors)
        self.actions.extend(result.actions)
        if result.triggered:
            self._mark_triggered(policy_name)
        if not result.passed:
            self.all_passed = False

    def record_exception(self, policy_name: str, exc: Exception) -> None:
        self.errors.append(f'Policy "{policy_name}" threw an error: {exc}')
        self._mark_triggered(policy_name)
        self.all_passed = False

    def _mark_triggered(self, policy_name: str) -> None:
        if policy_name not in self.policies_triggered:
            self.policies_triggered.append(policy_name)


def normalize_policy_config(value: Any) -> Tuple[bool, Dict[str, Any]]:
    """Reduce a policy configuration entry to ``(enabled, options)``."""
    if value is None or value is True:
        return True, {}
    if value is False:
        return False, {}
    if isinstance(value, Mapping):
        return bool(value.get("enabled", False)), dict(value.get("options") or {})
    if hasattr(value, "enabled"):
        return bool(value.enabled), dict(getattr(value, "options", None) or {})
    raise PolicyError(f"Invalid policy configuration: {value!r}")


class PolicyEngine:
    def __init__(
        self,
        policy_config: Optional[Mapping[str, Any]] = None,
        *,
        mode: str = "relaxed",
        stop_on_error: bool = False,
        registry: Optional[PolicyRegistry] = None,
    ) -> None:
        if mode not in MODES:
            raise PolicyError(f"Unknown mode {mode!r}, expected one of {MODES}")
        self.policy_config: Dict[str, Any] = dict(policy_config or {})
        self.mode = mode
        self.stop_on_error = stop_on_error
        if registry is None:
            load_policies()
            registry = REGISTRY
        self.registry = registry

    @property
    def _stops_on_failure(self) -> bool:
        return self.mode == "strict" and self.stop_on_error

    def get_enabled_policies(self) -> List[Tuple[Policy, Dict[str, Any]]]:
        """Enabled policies with their configured options, lowest priority first."""
        enabled = []
        for policy in self.registry.by_priority():
            is_enabled, options = normalize_policy_config(self.policy_config.get(policy.name))
            if is_enabled:
                enabled.append((policy, options))
        return enabled

    def run(self, html: str) -> PolicyEngineResult:
        result = PolicyEngineResult(html=html)
        current_html = html
        soup: BeautifulSoup = parse_html(current_html)

        for policy, options in self.get_enabled_policies():
            try:
                outcome = policy.apply(current_html, soup, policy.resolve_options(options))
            except Exception as e:
                logger.exception('Policy "%s" raised', policy.name)
                result.record_exception(policy.name, e)
                if self._stops_on_failure:
                    break
                continue

            result.merge(policy.name, outcome)
            if outcome.html != current_html or not outcome.passed:
                # a failed policy may have edited the tree before giving up
                current_html = outcome.html
                soup = parse_html(current_html)
            logger.debug(
                "Policy %s: passed=%s warnings=%d errors=%d actions=%d",
                policy.name,
                outcome.passed,
                len(outcome.warnings),
                len(outcome.errors),
                len(outcome.actions),
            )

            if not outcome.passed and self._stops_on_failure:
                logger.info('Stopping after failed policy "%s" (strict mode)', policy.name)
                break

        result.html = current_html
        return result

    def is_policy_enabled(self, name: str) -> bool:
        return normalize_policy_config(self.policy_config.get(name))[0]

    def enable_policy(self, name: str, options: Optional[Mapping[str, Any]] = None) -> None:
        self.policy_config[name] = {"enabled": True, "options": dict(options or {})}

    def disable_policy(self, name: str) -> None:
        self.policy_config[name] = False

    def get_config(self) -> Dict[str, Any]:
        return dict(self.policy_config)

    def set_options(self, *, mode: Optional[str] = None, stop_on_error: Optional[bool] = None) -> None:
        if mode is not None:
            if mode not in MODES:
                raise PolicyError(f"Unknown mode {mode!r}, expected one of {MODES}")
            self.mode = mode
        if stop_on_error is not None:
            self.stop_on_error = stop_on_error


def run_policies(
    html: str,
    policy_config: Optional[Mapping[str, Any]] = None,
    *,
    mode: str = "relaxed",
    stop_on_error: bool = False,
) -> PolicyEngineResult:
    return PolicyEngine(policy_config, mode=mode, stop_on_error=stop_on_error).run(html)


__all__ = ["PolicyEngine", "PolicyEngineResult", "normalize_policy_config", "run_policies"]
