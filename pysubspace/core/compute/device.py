"""
Accelerator detection and device selection.

Answers one question for the backend layer: is there a device the GPU
kernels can run on, and how is it addressed from PyTorch. CUDA wins over
MPS when both are present. A missing PyTorch install is the same as no
accelerator.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, TYPE_CHECKING
import platform

from pysubspace.core.exceptions import ValidationError

if TYPE_CHECKING:
    import torch


DevicePreference = Literal['cpu', 'gpu', 'auto']
DEVICE_PREFERENCES = ('cpu', 'gpu', 'auto')

_GIB = float(1 << 30)


@dataclass(frozen=True)
class DeviceInfo:
    """
    A device the engine can place matrix buffers on.

    Attributes:
        device_type: 'cpu', 'cuda' or 'mps'
        device_index: CUDA ordinal; 0 for MPS, None for the host
        name: Human-readable device name
        memory_bytes: Device memory, when the driver reports it
    """
    device_type: Literal['cpu', 'cuda', 'mps']
    device_index: int | None
    name: str
    memory_bytes: int | None = None

    def __str__(self) -> str:
        if not self.is_gpu:
            return f"CPU ({self.name})"
        memory = "" if self.memory_bytes is None else f", {self.memory_bytes / _GIB:.1f}GB"
        return f"{self.device_type.upper()}:{self.device_index} ({self.name}{memory})"

    @property
    def is_gpu(self) -> bool:
        return self.device_type != 'cpu'

    @property
    def supports_fp64(self) -> bool:
        """MPS kernels have no float64 path."""
        return self.device_type != 'mps'

    def to_torch(self) -> 'torch.device':
        """The torch.device that addresses this device."""
        import torch

        if self.device_type == 'cuda':
            return torch.device('cuda', self.device_index or 0)
        return torch.device(self.device_type)


def detect_gpu() -> DeviceInfo | None:
    """The preferred accelerator, or None when there is none."""
    try:
        import torch
    except ImportError:
        return None

    if torch.cuda.is_available():
        ordinal = torch.cuda.current_device()
        props = torch.cuda.get_device_properties(ordinal)
        return DeviceInfo('cuda', ordinal, props.name, props.total_memory)

    mps = getattr(torch.backends, 'mps', None)
    if mps is not None and mps.is_available():
        # MPS does not report its memory size
        return DeviceInfo('mps', 0, 'Apple Silicon GPU')

    return None


def get_cpu_info() -> DeviceInfo:
    """DeviceInfo for the host processor."""
    return DeviceInfo('cpu', None, platform.processor() or platform.machine() or 'unknown CPU')


def select_device(prefer: DevicePreference = 'auto') -> DeviceInfo:
    """
    Resolve a device preference against what this machine has.

    'cpu' always gives the host. 'gpu' requires an accelerator. 'auto'
    takes an accelerator when one is found and the host otherwise.

    Raises:
        ValidationError: If prefer is not a known preference
        RuntimeError: If 'gpu' is requested and no accelerator is found
    """
    if prefer not in DEVICE_PREFERENCES:
        raise ValidationError(
            f"Unknown device preference {prefer!r}; expected one of {DEVICE_PREFERENCES}"
        )
    if prefer == 'cpu':
        return get_cpu_info()

    gpu = detect_gpu()
    if gpu is not None:
        return gpu
    if prefer == 'gpu':
        raise RuntimeError(
            "GPU backend requested but no CUDA or MPS device was found "
            "(is PyTorch installed with accelerator support?)"
        )
    return get_cpu_info()
