"""
Seeded simulation utilities.

Synthetic long-format PK study data and Monte Carlo dose optimization.
Every function draws from a :class:`numpy.random.Generator` built from an
explicit ``seed`` argument; nothing touches global random state.
"""

from clinicalpk.simulation._common import DoseOptimizationResult
from clinicalpk.simulation._data import DEFAULT_TIMES, simulate_pk_data
from clinicalpk.simulation._dose import TARGET_EXPOSURES, dose_optimization

__all__ = [
    "DEFAULT_TIMES",
    "DoseOptimizationResult",
    "TARGET_EXPOSURES",
    "dose_optimization",
    "simulate_pk_data",
]
