"""Technique auto-discovery and registration.

Scans design_checker/techniques/ for modules that define a `technique` object
of type Technique. Collects them into a dict keyed by name.

Handles both normal Python (pkgutil.iter_modules) and frozen PyInstaller
binaries (where iter_modules returns nothing — falls back to explicit
imports from techniques/__init__.py).
"""

import importlib
import pkgutil

from design_checker.core.types import Technique

# Known technique module names: fallback for frozen binaries
_TECHNIQUE_MODULES = [
    'accessibility',
    'colour',
    'critique',
    'layout',
    'ocr',
    'typography',
]


def discover() -> dict[str, Technique]:
    """Import all technique modules and return a fresh name -> Technique map."""
    import design_checker.techniques as pkg

    # Try pkgutil first (works in normal Python)
    found_modules = [
        modname for _importer, modname, _ispkg in pkgutil.iter_modules(pkg.__path__) if not modname.startswith('_')
    ]

    # Frozen binary fallback: pkgutil finds nothing, use known list
    if not found_modules:
        found_modules = _TECHNIQUE_MODULES

    registry: dict[str, Technique] = {}
    for modname in found_modules:
        module = importlib.import_module(f'design_checker.techniques.{modname}')
        tech = getattr(module, 'technique', None)
        if isinstance(tech, Technique):
            registry[tech.name] = tech

    return registry


def get(name: str) -> Technique:
    """Get a technique by name."""
    reg = discover()
    if name not in reg:
        raise KeyError(f'Unknown technique: {name}. Available: {", ".join(sorted(reg))}')
    return reg[name]


def all_techniques() -> dict[str, Technique]:
    """Return all registered techniques."""
    return discover()
