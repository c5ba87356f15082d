# hypergrad/core/config.py
"""Engine configuration (immutable)."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any

import numpy as np

_FALSY = ("0", "false", "no", "off")


@dataclass(frozen=True)
class GraphConfig:
    """Immutable Hypergraph configuration.

    Args:
        checked: Fail fast on caller contract violations (unevaluated reads,
                 backward before forward, bad tail indices). When False the
                 engine trusts the caller and skips those checks.
        dtype: numpy dtype for scalar inputs, zero gradients and the seed
    """
    checked: bool = True
    dtype: Any = np.float64

    @classmethod
    def from_env(cls) -> "GraphConfig":
        """Build a config from ``HYPERGRAD_CHECKED`` (``0``/``false`` disables checks)."""
        raw = os.environ.get("HYPERGRAD_CHECKED")
        if raw is None:
            return cls()
        return cls(checked=raw.strip().lower() not in _FALSY)


DEFAULT_CONFIG = GraphConfig()
