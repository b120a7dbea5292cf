# qstate/config.py
"""Simulator configuration.

Defaults live in a frozen dataclass; ``SimConfig.from_env`` lets ``QSTATE_*``
environment variables override them, e.g.::

    QSTATE_BACKEND=numba QSTATE_NUM_THREADS=8 QSTATE_MAX_QUBITS=24
"""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from typing import Any, Mapping, Optional

BACKENDS = ("serial", "numpy", "numba")
PATTERNS = ("linear", "circular", "all-to-all")

# 2**30 complex128 amplitudes is 16 GiB; nothing above this is ever allocated.
HARD_MAX_QUBITS = 30


def _opt_int(v: Optional[str]) -> Optional[int]:
    if v is None or str(v).strip() == "":
        return None
    return int(v)


@dataclass(frozen=True)
class SimConfig:
    max_qubits: int = 20
    backend: str = "numpy"  # serial|numpy|numba
    shots: int = 1000
    depth: int = 4
    pattern: str = "linear"  # linear|circular|all-to-all
    feature_dim: Optional[int] = None  # None -> 2 * 2**n
    seed: Optional[int] = None
    num_threads: Optional[int] = None  # numba backend only

    def validate(self) -> "SimConfig":
        if not (1 <= int(self.max_qubits) <= HARD_MAX_QUBITS):
            raise ValueError(f"max_qubits must be in [1, {HARD_MAX_QUBITS}], got {self.max_qubits}")
        if self.backend not in BACKENDS:
            raise ValueError(f"backend must be serial|numpy|numba, got {self.backend!r}")
        if int(self.shots) < 0:
            raise ValueError("shots must be >= 0")
        if int(self.depth) < 1:
            raise ValueError("depth must be >= 1")
        if self.pattern not in PATTERNS:
            raise ValueError(f"pattern must be linear|circular|all-to-all, got {self.pattern!r}")
        if self.feature_dim is not None and int(self.feature_dim) < 1:
            raise ValueError("feature_dim must be >= 1")
        if self.num_threads is not None and int(self.num_threads) < 1:
            raise ValueError("num_threads must be >= 1")
        return self

    def with_overrides(self, **kwargs: Any) -> "SimConfig":
        return replace(self, **kwargs).validate()

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "SimConfig":
        env = os.environ if env is None else env
        base = cls()
        cfg = cls(
            max_qubits=int(env.get("QSTATE_MAX_QUBITS", base.max_qubits)),
            backend=str(env.get("QSTATE_BACKEND", base.backend)).strip().lower(),
            shots=int(env.get("QSTATE_SHOTS", base.shots)),
            depth=int(env.get("QSTATE_DEPTH", base.depth)),
            pattern=str(env.get("QSTATE_PATTERN", base.pattern)).strip().lower(),
            feature_dim=_opt_int(env.get("QSTATE_FEATURE_DIM")),
            seed=_opt_int(env.get("QSTATE_SEED")),
            num_threads=_opt_int(env.get("QSTATE_NUM_THREADS")),
        )
        return cfg.validate()

