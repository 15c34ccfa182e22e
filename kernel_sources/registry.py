from __future__ import annotations
from typing import Dict, Any, List

# Nested dict: [fractal][op_name][backend][precision] -> meta
_REGISTRY: Dict[str, Dict[str, Dict[str, Dict[str, Dict[str, Any]]]]] = {}

def register_kernel(fractal: str, op_name: str, backend: str, precision: str, **meta: Any) -> None:
    """
    Register kernel metadata for a given fractal, operation, backend, and precision.
    Example:
        register_kernel("mandelbrot", "band", "CPU", "f64", func=my_njit_func, arg_order=[...])
    """
    _REGISTRY.setdefault(fractal, {}).setdefault(op_name, {}).setdefault(backend.upper(), {})[precision] = meta

def load_kernel(backend: str, fractal: str, op_name: str, precision: str) -> Dict[str, Any]:
    """
    Look up kernel metadata; the entry must carry a callable 'func' and its 'arg_order'.
    Raises KeyError if nothing usable is registered.
    """
    be = backend.upper()
    try:
        meta = _REGISTRY[fractal][op_name][be][precision]
    except KeyError as e:
        raise KeyError(f"Kernel not found for fractal='{fractal}', op='{op_name}', backend='{be}', precision='{precision}'") from e
    if not callable(meta.get("func")):
        raise KeyError(f"registry[{fractal}.{op_name}:{be}/{precision}] has no callable 'func'")
    if not meta.get("arg_order"):
        raise KeyError(f"registry[{fractal}.{op_name}:{be}/{precision}] has no 'arg_order'")
    return meta

def list_kernels(fractal: str, backend: str, precision: str) -> List[str]:
    """Sorted op names registered for (fractal, backend, precision)."""
    be = backend.upper()
    return sorted(op for op, backends in _REGISTRY.get(fractal, {}).items()
                  if precision in backends.get(be, {}))
