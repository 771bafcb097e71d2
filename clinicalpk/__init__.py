"""
ClinicalPK: Pharmacokinetic parameter estimation for clinical data.

Non-compartmental analysis of concentration-time profiles, population
aggregation of the derived parameters, closed-form PK/PD model functions,
and seeded simulation utilities for synthetic studies and dose selection.

Usage:
    from clinicalpk import pk, models, simulation
"""

import logging

__version__ = "0.1.0"

from clinicalpk import pk
from clinicalpk import models
from clinicalpk import simulation

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "__version__",
    "pk",
    "models",
    "simulation",
]
