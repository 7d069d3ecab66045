"""
Linear-algebra backends.

Available backends:
    CPULinalgBackend: CPU reference implementation (scipy BLAS/LAPACK)
    GPULinalgBackend: GPU implementation using PyTorch

The process uses one active backend, chosen once from EngineConfig
(PYSUBSPACE_BACKEND) on first use or replaced with configure() /
set_backend(). Solver functions also accept ``backend=`` for injection.
"""

from __future__ import annotations

import logging

from pysubspace.core.config import EngineConfig
from pysubspace.core.compute.device import DevicePreference, select_device
from pysubspace.core.protocols import LinalgBackend
from pysubspace.core.trace import Verbosity, set_verbosity
from pysubspace.matrix.backends.cpu import CPULinalgBackend

logger = logging.getLogger(__name__)

_active: LinalgBackend | None = None


def create_backend(prefer: DevicePreference = 'cpu') -> LinalgBackend:
    """
    Build a backend for a device preference.

    'auto' picks the GPU backend when a GPU is present and PyTorch is
    installed, else the CPU backend. 'gpu' raises if no GPU is available.
    """
    device = select_device(prefer)
    if device.is_gpu:
        from pysubspace.matrix.backends.gpu import GPULinalgBackend
        return GPULinalgBackend(device=device)
    return CPULinalgBackend()


def get_backend() -> LinalgBackend:
    """The process-wide backend, created from the environment on first use."""
    global _active
    if _active is None:
        config = EngineConfig.from_env()
        _active = create_backend(config.backend)
        logger.info("Using linear-algebra backend %s", _active.name)
    return _active


def set_backend(backend: LinalgBackend | None) -> None:
    """Replace the process-wide backend (None re-reads the environment on next use)."""
    global _active
    _active = backend


def configure(
    *,
    backend: DevicePreference | LinalgBackend | None = None,
    verbosity: Verbosity | int | str | None = None,
) -> None:
    """
    Set process-wide engine settings.

    Args:
        backend: A device preference ('cpu', 'gpu', 'auto') or a backend instance
        verbosity: Diagnostic verbosity level
    """
    if backend is not None:
        if isinstance(backend, str):
            set_backend(create_backend(backend))
        else:
            set_backend(backend)
        logger.info("Using linear-algebra backend %s", get_backend().name)
    if verbosity is not None:
        set_verbosity(verbosity)


__all__ = [
    "CPULinalgBackend",
    "create_backend",
    "get_backend",
    "set_backend",
    "configure",
]
