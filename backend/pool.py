from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Optional, Type

from backend.model.be_base import Backend
from backend.model.be_cpu import CpuBackend
from backend.model.be_python import PythonBackend
from fractals.base import Fractal, RenderSettings
from utils.enums import BackendType

logger = logging.getLogger(__name__)


# Small descriptor of a backend implementation
@dataclass(frozen=True)
class BackendSpec:
    cls: Type[Backend]
    priority: int


# Default registry
DEFAULT_BACKENDS: Dict[str, BackendSpec] = {
    "PYTHON": BackendSpec(cls=PythonBackend, priority=0),
    "CPU":    BackendSpec(cls=CpuBackend,    priority=10),
}


class BackendPool:
    """
    Creates, caches and compiles backend instances, keyed by backend name.
    AUTO resolves to the highest-priority registered backend.
    """

    def __init__(self, registry: Optional[Dict[str, BackendSpec]] = None) -> None:
        self.registry: Dict[str, BackendSpec] = registry or DEFAULT_BACKENDS
        self._cache: Dict[str, Backend] = {}
        self._compiled: Dict[str, tuple] = {}

    def resolve(self, backend: BackendType) -> str:
        if backend == BackendType.AUTO:
            return max(self.registry, key=lambda n: self.registry[n].priority)
        if backend.name not in self.registry:
            raise KeyError(f"Backend {backend.name} is not registered.")
        return backend.name

    def get(self, backend: BackendType, fractal: Fractal, settings: RenderSettings) -> Backend:
        """
        Return a backend compiled for (fractal, settings); compile lazily when
        either changed since the last call.
        """
        name = self.resolve(backend)
        be = self._cache.get(name)
        if be is None:
            be = self.registry[name].cls()
            self._cache[name] = be
            logger.debug("Created %s backend", name)
        key = (fractal, settings.pixel_type, settings.escape_limit)
        if self._compiled.get(name) != key:
            be.compile(fractal, settings)
            self._compiled[name] = key
        return be

    def close_all(self) -> None:
        for name, be in list(self._cache.items()):
            try:
                be.close()
            except Exception:
                logger.exception("Error closing %s backend", name)
        self._cache.clear()
        self._compiled.clear()
