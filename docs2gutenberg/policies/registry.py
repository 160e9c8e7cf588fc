"""Policy registry: an ordered name -> policy map shared by the process."""

from __future__ import annotations

import logging
from importlib import import_module
from typing import Dict, Iterable, Iterator, List, Optional, Sequence

from ..utils.errors import PolicyError
from .base import DEFAULT_PRIORITY, Policy

logger = logging.getLogger(__name__)

DEFAULT_POLICY_MODULES: Sequence[str] = (
    "docs2gutenberg.policies.builtin.remove_before_h1",
    "docs2gutenberg.policies.builtin.forbidden_tags",
    "docs2gutenberg.policies.builtin.remove_internal_notes",
    "docs2gutenberg.policies.builtin.require_h2",
    "docs2gutenberg.policies.builtin.min_image_count",
    "docs2gutenberg.policies.builtin.add_disclaimer",
)


class PolicyRegistry:
    def __init__(self) -> None:
        self._policies: Dict[str, Policy] = {}

    def register(self, policy: Policy) -> Policy:
        """Insert ``policy`` under its name, replacing (with a warning) any previous one."""
        if not isinstance(policy, Policy):
            raise PolicyError(f"Not a Policy instance: {policy!r}")
        if not policy.name:
            raise PolicyError(f"Policy {type(policy).__name__} has no name")
        if policy.name in self._policies:
            logger.warning('Policy "%s" is already registered, overwriting', policy.name)
        self._policies[policy.name] = policy
        return policy

    def unregister(self, name: str) -> None:
        self._policies.pop(name, None)

    def get(self, name: str) -> Optional[Policy]:
        return self._policies.get(name)

    def names(self) -> List[str]:
        return list(self._policies)

    def by_priority(self) -> List[Policy]:
        # sorted() is stable: equal priorities keep registration order
        return sorted(
            self._policies.values(),
            key=lambda p: p.priority if p.priority is not None else DEFAULT_PRIORITY,
        )

    def __contains__(self, name: object) -> bool:
        return name in self._policies

    def __iter__(self) -> Iterator[Policy]:
        return iter(list(self._policies.values()))

    def __len__(self) -> int:
        return len(self._policies)


REGISTRY = PolicyRegistry()


def load_policies(module_names: Optional[Iterable[str]] = None) -> None:
    """Import policy modules and trigger their registration side-effects."""
    for module in list(module_names or DEFAULT_POLICY_MODULES):
        import_module(module)


__all__ = ["REGISTRY", "DEFAULT_POLICY_MODULES", "PolicyRegistry", "load_policies"]
