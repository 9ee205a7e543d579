"""
Mode injector - sync design-token collections into a variable store.

Reads collections of typed, per-mode tokens, orders them by their
cross-collection aliases, creates collections, modes, and variables in
the store, and links every alias once all collections exist.
"""

from __future__ import annotations

from ._version import get_version
from .core import ir
from .core.batch import apply_mode_to_collection, run_batch
from .core.errors import DocumentError, InjectorError, ModeLimitError, StructuralError

__version__ = get_version()

__all__ = [
    "__version__",
    "ir",
    "run_batch",
    "apply_mode_to_collection",
    "InjectorError",
    "DocumentError",
    "StructuralError",
    "ModeLimitError",
]
