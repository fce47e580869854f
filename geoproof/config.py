"""Configuration helpers for the proof pipeline."""

from __future__ import annotations

import copy
import string
from dataclasses import dataclass
from typing import Optional


@dataclass
class ProofConfig:
    """Numeric tolerances and naming defaults shared by the pipeline stages.

    ``slope_decimals`` controls how slopes are rounded before they are compared;
    hidden-figure discovery depends on it, so changing it changes which
    compound segments and angles are found.
    """

    epsilon: float = 1e-4
    slope_decimals: int = 4
    measure_decimals: int = 4
    vertex_names: str = string.ascii_uppercase
    seed_reflexive: bool = True


_PROOF_CONFIG = ProofConfig()


def get_proof_config() -> ProofConfig:
    return copy.deepcopy(_PROOF_CONFIG)


def set_proof_config(config: ProofConfig) -> None:
    global _PROOF_CONFIG
    _PROOF_CONFIG = copy.deepcopy(config)


def resolve_config(config: Optional[ProofConfig]) -> ProofConfig:
    return copy.deepcopy(config) if config is not None else get_proof_config()
