"""
Shared compute infrastructure for PySubspace.

IMPORTANT: This is NOT where the linear-algebra backends live. Those go
in pysubspace/matrix/backends/. This module contains shared NUMERIC
infrastructure.

Submodules:
    device: Accelerator detection and device selection
    precision: Element type and numerical thresholds
    tolerances: Tolerance tiers for comparisons
    random: Named pseudo-random sources
"""

from pysubspace.core.compute.device import (
    DeviceInfo,
    detect_gpu,
    get_cpu_info,
    select_device,
)
from pysubspace.core.compute.precision import PRECISION, EIGENVALUE_EPSILON
from pysubspace.core.compute.random import (
    NormalSource,
    ShuffleSource,
    get_normal_source,
    set_normal_source,
    get_shuffle_source,
    set_shuffle_source,
)

__all__ = [
    # Device detection
    "DeviceInfo",
    "detect_gpu",
    "get_cpu_info",
    "select_device",
    # Precision
    "PRECISION",
    "EIGENVALUE_EPSILON",
    # Random sources
    "NormalSource",
    "ShuffleSource",
    "get_normal_source",
    "set_normal_source",
    "get_shuffle_source",
    "set_shuffle_source",
]
