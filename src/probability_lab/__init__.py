"""
Stochastic trial engine for the probability lab.

Builds normalized probability models for coins, dice, spinners and custom
devices, samples them from a seeded generator, and records every trial in
chunked fixed-width history.
"""

from .cdf import build_cdf, sample_index
from .devices import DeviceConfig, DeviceDefinition, DeviceKind, build_device_definition
from .history import IndexHistory, PackedPairHistory
from .relationships import Complement, Copy, Dependent, Independent, Relationship, check_relationship
from .rng import create_entropy_rng, create_rng_from_seed, hash_string_to_uint32, mulberry32
from .scheduler import TrialScheduler
from .settings import EngineSettings
from .simulate_single import simulate_single_trials
from .simulate_two import simulate_two_trials
from .state import SingleTrialState, TwoTrialState

__all__ = [
    "build_cdf",
    "sample_index",
    "DeviceConfig",
    "DeviceDefinition",
    "DeviceKind",
    "build_device_definition",
    "IndexHistory",
    "PackedPairHistory",
    "Complement",
    "Copy",
    "Dependent",
    "Independent",
    "Relationship",
    "check_relationship",
    "create_entropy_rng",
    "create_rng_from_seed",
    "hash_string_to_uint32",
    "mulberry32",
    "TrialScheduler",
    "EngineSettings",
    "simulate_single_trials",
    "simulate_two_trials",
    "SingleTrialState",
    "TwoTrialState",
]
