"""Package registries consumed by the solver.

Public API::

    from pubgrub.registry import Registry, InMemoryRegistry, load_registry
"""

from __future__ import annotations

from pubgrub.registry.base import Registry
from pubgrub.registry.loader import load_registry, registry_from_text
from pubgrub.registry.memory import InMemoryRegistry

__all__ = [
    "InMemoryRegistry",
    "Registry",
    "load_registry",
    "registry_from_text",
]
