"""
Juli Module Registry

Maps export names to ExportedModule snapshots. Entries are only ever added or
overwritten by ``export``; nothing is removed. Each RuntimeContext owns one
registry instead of sharing a process-wide global.
"""

from __future__ import annotations

import logging
import threading
from typing import Dict, Iterator, List, Optional, Union

from juli.runtime.module import ExportedModule, Module

logger = logging.getLogger(__name__)


class ModuleRegistry:
    """Registry of exported modules keyed by export name."""

    def __init__(self):
        self._modules: Dict[str, ExportedModule] = {}
        self._lock = threading.Lock()

    def export(self, name: str, module: Union[ExportedModule, Module]) -> ExportedModule:
        """
        Insert or overwrite the entry for ``name``.

        A Module is snapshotted first; an ExportedModule is stored as is.
        """
        exported = module.snapshot() if isinstance(module, Module) else module
        with self._lock:
            replaced = name in self._modules
            self._modules[name] = exported
        if replaced:
            logger.debug(f"[juli] Re-exported module {name!r}")
        else:
            logger.debug(f"[juli] Exported module {name!r}")
        return exported

    def lookup(self, name: str) -> Optional[ExportedModule]:
        """Return the module exported as ``name``, or None."""
        with self._lock:
            return self._modules.get(name)

    def names(self) -> List[str]:
        with self._lock:
            return sorted(self._modules)

    def __contains__(self, name: object) -> bool:
        with self._lock:
            return name in self._modules

    def __len__(self) -> int:
        with self._lock:
            return len(self._modules)

    def __iter__(self) -> Iterator[str]:
        return iter(self.names())

    def to_dict(self) -> Dict[str, Dict[str, object]]:
        with self._lock:
            return {name: mod.to_dict() for name, mod in sorted(self._modules.items())}
