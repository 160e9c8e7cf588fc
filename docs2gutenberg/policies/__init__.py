"""
Content policies applied between cleaning and block conversion.

* :mod:`docs2gutenberg.policies.base` – the :class:`Policy` contract and
  :class:`PolicyResult`
* :mod:`docs2gutenberg.policies.registry` – the process-wide registry
* :mod:`docs2gutenberg.policies.engine` – priority-ordered execution
* :mod:`docs2gutenberg.policies.builtin` – the shipped policies
"""

from .base import Policy, PolicyResult, failed_result, success_result, warning_result
from .engine import PolicyEngine, PolicyEngineResult, normalize_policy_config, run_policies
from .registry import REGISTRY, load_policies

__all__ = [
    "Policy",
    "PolicyResult",
    "PolicyEngine",
    "PolicyEngineResult",
    "REGISTRY",
    "failed_result",
    "load_policies",
    "normalize_policy_config",
    "run_policies",
    "success_result",
    "warning_result",
]
