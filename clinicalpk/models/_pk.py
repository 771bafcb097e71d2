"""Compartmental pharmacokinetic models with first-order absorption.

Each function returns the plasma concentration at the requested times
after a single extravascular dose given at ``t = 0``.  Times before the
dose evaluate to zero concentration.

References
----------
Gibaldi & Perrier (1982). *Pharmacokinetics*, 2nd ed., ch. 1-2.
"""

from __future__ import annotations

import numpy as np
from numpy.typing import ArrayLike, NDArray


def _check_positive(**params: float) -> None:
    for name, value in params.items():
        if not np.isfinite(value) or value <= 0:
            raise ValueError(f"{name} must be positive, got {value!r}")


# ---------------------------------------------------------------------------
# One compartment
# ---------------------------------------------------------------------------

def pk_one_compartment(
    time: ArrayLike,
    dose: float,
    ka: float,
    ke: float,
    vd: float,
) -> NDArray[np.float64]:
    """One-compartment model with first-order absorption and elimination.

    .. math::
        C(t) = \\frac{D \\, k_a}{V (k_a - k_e)}
               \\bigl(e^{-k_e t} - e^{-k_a t}\\bigr)

    Parameters
    ----------
    time : array
        Time points.  Negative times give zero concentration.
    dose : float
        Dose amount (bioavailable).
    ka : float
        Absorption rate constant.
    ke : float
        Elimination rate constant.  Must differ from *ka*.
    vd : float
        Volume of distribution.

    Returns
    -------
    NDArray
        Concentrations at *time*.
    """
    _check_positive(ka=ka, ke=ke, vd=vd)
    if ka == ke:
        raise ValueError("ka and ke must differ (the model is singular at ka == ke)")

    time = np.asarray(time, dtype=np.float64)
    t = np.maximum(time, 0.0)
    conc = (dose * ka) / (vd * (ka - ke)) * (np.exp(-ke * t) - np.exp(-ka * t))
    return np.where(time < 0, 0.0, conc)


# ---------------------------------------------------------------------------
# Two compartments
# ---------------------------------------------------------------------------

def _two_compartment_rates(ke: float, vd: float, v2: float, q12: float) -> tuple[float, float]:
    """Hybrid disposition rate constants (alpha, beta), alpha > beta."""
    s = ke + q12 / vd + q12 / v2
    root = np.sqrt(s * s - 4.0 * ke * q12 / v2)
    return (s + root) / 2.0, (s - root) / 2.0


def pk_two_compartment(
    time: ArrayLike,
    dose: float,
    ka: float,
    ke: float,
    vd: float,
    v2: float,
    q12: float,
) -> NDArray[np.float64]:
    """Two-compartment model with first-order absorption.

    With micro-constants ``k12 = Q/V1``, ``k21 = Q/V2`` and ``k10 = ke``,
    disposition follows the hybrid rate constants

    .. math::
        \\lambda_{1,2} = \\tfrac{1}{2}\\Bigl(s \\pm \\sqrt{s^2 - 4 k_e k_{21}}\\Bigr),
        \\qquad s = k_e + k_{12} + k_{21}

    and the central concentration is

    .. math::
        C(t) = \\frac{D k_a}{V_1} \\sum_{r \\in \\{\\lambda_1, \\lambda_2, k_a\\}}
               \\frac{k_{21} - r}{\\prod_{q \\ne r} (q - r)} e^{-r t}

    which is zero at ``t = 0``.

    Parameters
    ----------
    time : array
        Time points.  Negative times give zero concentration.
    dose : float
        Dose amount.
    ka : float
        Absorption rate constant.  Must differ from both hybrid rates.
    ke : float
        Elimination rate constant from the central compartment.
    vd : float
        Central volume of distribution.
    v2 : float
        Peripheral volume of distribution.
    q12 : float
        Intercompartmental clearance.

    Returns
    -------
    NDArray
        Concentrations at *time*.
    """
    _check_positive(ka=ka, ke=ke, vd=vd, v2=v2, q12=q12)
    lambda1, lambda2 = _two_compartment_rates(ke, vd, v2, q12)
    if np.isclose(ka, lambda1) or np.isclose(ka, lambda2):
        raise ValueError(
            f"ka={ka!r} coincides with a disposition rate constant "
            f"({lambda1:.6g}, {lambda2:.6g}); the model is singular"
        )

    k21 = q12 / v2
    scale = dose * ka / vd
    a = scale * (k21 - lambda1) / ((ka - lambda1) * (lambda2 - lambda1))
    b = scale * (k21 - lambda2) / ((ka - lambda2) * (lambda1 - lambda2))
    c = scale * (k21 - ka) / ((lambda1 - ka) * (lambda2 - ka))

    time = np.asarray(time, dtype=np.float64)
    t = np.maximum(time, 0.0)
    conc = a * np.exp(-lambda1 * t) + b * np.exp(-lambda2 * t) + c * np.exp(-ka * t)
    return np.where(time < 0, 0.0, conc)
