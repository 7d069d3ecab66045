"""
Locality and capability string constants for PySubspace.

This module is the SINGLE SOURCE OF TRUTH for these strings.
Import from here, never use raw strings.

Usage:
    from pysubspace.core.capabilities import (
        LOCALITY_DEVICE_MIRRORED,
        CAPABILITY_DEVICE_MIRROR,
    )

    if backend.supports(CAPABILITY_DEVICE_MIRROR):
        sync_to_device(M)
"""

# --- Matrix locality ---

# Only the host buffer exists
LOCALITY_HOST = 'host'

# A device buffer exists alongside the host buffer; the two are equal
# only immediately after an explicit sync
LOCALITY_DEVICE_MIRRORED = 'device_mirrored'

ALL_LOCALITIES = frozenset({
    LOCALITY_HOST,
    LOCALITY_DEVICE_MIRRORED,
})

# --- Backend capabilities ---

# Kernels read operands from device mirrors (sync_to_device required)
CAPABILITY_DEVICE_MIRROR = 'device_mirror'

# Kernels run at float64 width
CAPABILITY_FP64 = 'fp64'

# Backend reports LAPACK-style integer status codes
CAPABILITY_STATUS_CODES = 'status_codes'

ALL_CAPABILITIES = frozenset({
    CAPABILITY_DEVICE_MIRROR,
    CAPABILITY_FP64,
    CAPABILITY_STATUS_CODES,
})

__all__ = [
    'LOCALITY_HOST',
    'LOCALITY_DEVICE_MIRRORED',
    'ALL_LOCALITIES',
    'CAPABILITY_DEVICE_MIRROR',
    'CAPABILITY_FP64',
    'CAPABILITY_STATUS_CODES',
    'ALL_CAPABILITIES',
]
