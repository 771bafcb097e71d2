"""
Closed-form pharmacokinetic and pharmacodynamic models.

PK: one- and two-compartment models with first-order absorption.
PD: sigmoid Emax and indirect response (turnover) models.

These are the forward models used to simulate concentration and effect
profiles; parameter estimation from observed data lives in
:mod:`clinicalpk.pk`.
"""

from clinicalpk.models._pk import pk_one_compartment, pk_two_compartment
from clinicalpk.models._pd import pd_emax, pd_indirect_response

__all__ = [
    "pk_one_compartment",
    "pk_two_compartment",
    "pd_emax",
    "pd_indirect_response",
]
