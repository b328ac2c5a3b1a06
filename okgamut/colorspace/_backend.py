"""Backend dispatch for numpy/torch compatibility.

Provides unified math operations that work with Python floats, numpy arrays
and torch tensors. Torch is imported lazily on first use to avoid loading it
when not needed.
"""

import numpy as np
from typing import Any

Array = Any  # float, numpy.ndarray or torch.Tensor

# Lazy torch reference - only imported when needed
_torch = None


def _get_torch():
    """Get torch module, importing it on first use."""
    global _torch
    if _torch is None:
        import torch
        _torch = torch
    return _torch


def is_torch(x: Array) -> bool:
    """Check if x is a torch tensor."""
    return type(x).__module__.startswith('torch')


# === Dispatched operations ===

def sin(x: Array) -> Array:
    if is_torch(x):
        return _get_torch().sin(x)
    return np.sin(x)


def cos(x: Array) -> Array:
    if is_torch(x):
        return _get_torch().cos(x)
    return np.cos(x)


def sqrt(x: Array) -> Array:
    if is_torch(x):
        return _get_torch().sqrt(x)
    return np.sqrt(x)


def cbrt(x: Array) -> Array:
    """Cube root (sign-preserving)."""
    if is_torch(x):
        torch = _get_torch()
        return torch.sign(x) * torch.abs(x).pow(1/3)
    return np.cbrt(x)


def sign(x: Array) -> Array:
    if is_torch(x):
        return _get_torch().sign(x)
    return np.sign(x)


def abs(x: Array) -> Array:
    if is_torch(x):
        return _get_torch().abs(x)
    return np.abs(x)


def pow(x: Array, exp: float) -> Array:
    if is_torch(x):
        return _get_torch().pow(x, exp)
    return np.power(x, exp)


def where(cond: Array, true_val: Array, false_val: Array) -> Array:
    if is_torch(cond):
        torch = _get_torch()
        # torch.where wants tensors (or python scalars) on both branches
        if not is_torch(true_val) and not isinstance(true_val, (int, float)):
            true_val = torch.as_tensor(true_val, device=cond.device)
        if not is_torch(false_val) and not isinstance(false_val, (int, float)):
            false_val = torch.as_tensor(false_val, device=cond.device)
        return torch.where(cond, true_val, false_val)
    return np.where(cond, true_val, false_val)


def stack(arrays: list[Array], axis: int = -1) -> Array:
    """Stack arrays along a new axis."""
    if is_torch(arrays[0]):
        return _get_torch().stack(arrays, dim=axis)
    return np.stack(arrays, axis=axis)


def atan2(y: Array, x: Array) -> Array:
    if is_torch(y):
        return _get_torch().atan2(y, x)
    return np.arctan2(y, x)


def maximum(x: Array, y: Array) -> Array:
    if is_torch(x):
        return _get_torch().maximum(x, y)
    return np.maximum(x, y)


def zeros_like(x: Array) -> Array:
    if is_torch(x):
        return _get_torch().zeros_like(x)
    return np.zeros_like(x, dtype=np.float64)


def full_like(x: Array, value: float) -> Array:
    if is_torch(x):
        return _get_torch().full_like(x, value)
    return np.full_like(x, value, dtype=np.float64)


def all(x: Array) -> bool:
    """True if every element of x is truthy."""
    if is_torch(x):
        return bool(_get_torch().all(x))
    return bool(np.all(x))


def all_finite(*values: Array) -> bool:
    """True if no value contains NaN or +/-inf."""
    for x in values:
        if is_torch(x):
            if not bool(_get_torch().isfinite(x).all()):
                return False
        elif not np.all(np.isfinite(x)):
            return False
    return True


def to_numpy(x: Array) -> np.ndarray:
    """Convert to numpy array (moves from GPU if needed)."""
    if is_torch(x):
        return x.detach().cpu().numpy()
    return np.asarray(x)


def from_numpy(arr: np.ndarray, reference: Array) -> Array:
    """Convert numpy array to same type/device as reference."""
    if is_torch(reference):
        return _get_torch().from_numpy(arr).to(device=reference.device, dtype=reference.dtype)
    return arr
