"""
Tolerance tiers for numerical validation.

Defines precision expectations for different compute paths:
- CPU FP64: LAPACK double precision
- CPU FP32: LAPACK single precision (the default build)
- GPU FP32 / FP64: same expectations as the CPU path at equal width

Used by the test suite to compare products, inverses and
decompositions against exact or reference values.
"""

from dataclasses import dataclass

import numpy as np

from pysubspace.core.compute.precision import PRECISION


@dataclass(frozen=True)
class ToleranceTier:
    """Tolerance specification for numerical comparison."""
    rtol: float
    atol: float
    name: str
    description: str


CPU_FP64 = ToleranceTier(
    rtol=1e-10,
    atol=1e-12,
    name='cpu_fp64',
    description='CPU double precision',
)

# Inverse round trip in single precision must hold to 1e-4
CPU_FP32 = ToleranceTier(
    rtol=1e-4,
    atol=1e-4,
    name='cpu_fp32',
    description='CPU single precision',
)

GPU_FP64 = ToleranceTier(
    rtol=1e-10,
    atol=1e-12,
    name='gpu_fp64',
    description='GPU double precision, matches CPU reference',
)

GPU_FP32 = ToleranceTier(
    rtol=1e-4,
    atol=1e-4,
    name='gpu_fp32',
    description='GPU single precision, matches CPU reference',
)


def select_tolerance(backend_name: str | None = None) -> ToleranceTier:
    """
    Select appropriate tolerance tier for a given backend.

    With no backend name, the tier for the CPU path at the process
    precision is returned.
    """
    if backend_name is None:
        return CPU_FP64 if PRECISION == np.float64 else CPU_FP32
    if 'gpu' in backend_name:
        return GPU_FP64 if 'fp64' in backend_name else GPU_FP32
    return CPU_FP64 if 'fp64' in backend_name else CPU_FP32
