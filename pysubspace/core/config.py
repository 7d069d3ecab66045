"""
Engine configuration.

Settings that are fixed for a process rather than passed per call:

    PYSUBSPACE_BACKEND     'cpu' | 'gpu' | 'auto'   (default 'cpu')
    PYSUBSPACE_VERBOSITY   0-3 or quiet|info|verbose|debug (default 'info')
    PYSUBSPACE_PRECISION   'single' | 'double'      (read by compute.precision)

The CPU backend is the default because the GPU backend reads operands
from device mirrors, which callers must synchronize explicitly.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping

from pysubspace.core.compute.device import DEVICE_PREFERENCES, DevicePreference
from pysubspace.core.exceptions import ValidationError
from pysubspace.core.trace import Verbosity, parse_verbosity


@dataclass(frozen=True)
class EngineConfig:
    """
    Process-level engine settings.

    Attributes:
        backend: Backend preference passed to select_device()
        verbosity: Diagnostic verbosity
    """
    backend: DevicePreference = 'cpu'
    verbosity: Verbosity = Verbosity.INFO

    def __post_init__(self) -> None:
        if self.backend not in DEVICE_PREFERENCES:
            raise ValidationError(
                f"backend must be 'cpu', 'gpu' or 'auto', got {self.backend!r}"
            )

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> EngineConfig:
        """Build a config from PYSUBSPACE_* environment variables."""
        env = os.environ if environ is None else environ
        backend = env.get('PYSUBSPACE_BACKEND', 'cpu').strip().lower()
        verbosity = parse_verbosity(env.get('PYSUBSPACE_VERBOSITY', 'info'))
        return cls(backend=backend, verbosity=verbosity)  # type: ignore[arg-type]
