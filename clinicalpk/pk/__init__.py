"""
Pharmacokinetic parameter estimation.

Single-subject non-compartmental parameters (Cmax, Tmax, AUC, Ke,
half-life, clearance, volume of distribution, Cav, C0) and their
population-level geometric summaries.
"""

from clinicalpk.pk._common import (
    EmptyPopulationError,
    InsufficientDataError,
    ParameterSummary,
    PKError,
    PKParameters,
    PopulationPKResult,
    PopulationSummary,
)
from clinicalpk.pk._nca import AUC_METHODS, TERMINAL_POINTS, estimate_pk_parameters
from clinicalpk.pk._population import (
    LOGNORMAL_PARAMETERS,
    population_pk,
    summarize_population,
)

__all__ = [
    "AUC_METHODS",
    "EmptyPopulationError",
    "InsufficientDataError",
    "LOGNORMAL_PARAMETERS",
    "ParameterSummary",
    "PKError",
    "PKParameters",
    "PopulationPKResult",
    "PopulationSummary",
    "TERMINAL_POINTS",
    "estimate_pk_parameters",
    "population_pk",
    "summarize_population",
]
