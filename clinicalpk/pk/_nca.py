"""Non-compartmental pharmacokinetic parameter estimation.

Derives the standard exposure and elimination parameters from a single
subject's concentration-time profile and administered dose:
Cmax/Tmax, AUC (linear trapezoidal or linear-rectangle), the terminal
elimination rate constant Ke via log-linear regression, half-life,
clearance, volume of distribution, average concentration, and the
back-extrapolated initial concentration.

The terminal phase is a fixed window of the last ``TERMINAL_POINTS``
valid observations, not the best-adjusted-r-squared search done by
PKNCA or WinNonlin.

Parameters that cannot be computed are returned as ``None``, never as a
numeric placeholder, so a missing half-life can never be confused with a
computed zero.

References
----------
Gabrielsson & Weiner (2000). *Pharmacokinetic and Pharmacodynamic
Data Analysis*, 3rd ed.

Rowland & Tozer (2011). *Clinical Pharmacokinetics and
Pharmacodynamics*, 4th ed.
"""

from __future__ import annotations

import math

import numpy as np
from numpy.typing import ArrayLike, NDArray
from scipy import stats

from clinicalpk.pk._common import InsufficientDataError, PKParameters

AUC_METHODS = ("trapezoidal", "linear-rectangle")
TERMINAL_POINTS = 4


# ---------------------------------------------------------------------------
# Input validation and cleaning
# ---------------------------------------------------------------------------

def _validate_inputs(
    time: ArrayLike,
    concentration: ArrayLike,
    dose: float,
    method: str,
) -> tuple[NDArray[np.float64], NDArray[np.float64], bool]:
    """Validate inputs and return the cleaned, time-sorted profile.

    Pairs with non-positive (or non-finite) concentration or negative
    (or non-finite) time are dropped before sorting.  The third return
    value flags a pre-dose sample (``t = 0``, ``C = 0``) among the
    dropped pairs.
    """
    time = np.asarray(time, dtype=np.float64).ravel()
    concentration = np.asarray(concentration, dtype=np.float64).ravel()

    if time.shape[0] != concentration.shape[0]:
        raise ValueError(
            f"time and concentration must have equal length, "
            f"got {time.shape[0]} and {concentration.shape[0]}"
        )

    if not np.isfinite(dose) or dose <= 0:
        raise ValueError(f"dose must be a positive number, got {dose!r}")

    if method not in AUC_METHODS:
        raise ValueError(f"method must be one of {AUC_METHODS}, got {method!r}")

    valid = (
        np.isfinite(time)
        & np.isfinite(concentration)
        & (time >= 0)
        & (concentration > 0)
    )
    has_predose_zero = bool(np.any((time == 0) & (concentration == 0)))
    time = time[valid]
    concentration = concentration[valid]

    if time.shape[0] < 2:
        raise InsufficientDataError(
            f"Need at least 2 valid concentration-time points, "
            f"got {time.shape[0]} after removing non-positive "
            f"concentrations and negative times"
        )

    order = np.argsort(time, kind="stable")
    return time[order], concentration[order], has_predose_zero


# ---------------------------------------------------------------------------
# AUC
# ---------------------------------------------------------------------------

def _auc_trapezoidal_segment(t1: float, t2: float, c1: float, c2: float) -> float:
    """Linear trapezoidal AUC for a single interval."""
    return 0.5 * (c1 + c2) * (t2 - t1)


def _auc_rectangle_segment(t1: float, t2: float, c1: float, c2: float) -> float:
    """Right-endpoint rectangle AUC for a single interval."""
    return c2 * (t2 - t1)


def _compute_auc(
    time: NDArray[np.float64],
    concentration: NDArray[np.float64],
    method: str,
    predose_zero: bool = False,
) -> float:
    """Sum the per-interval AUC contributions for the chosen rule.

    With *predose_zero*, the curve is anchored at ``(0, 0)`` so the
    absorption interval from dosing to the first quantifiable sample
    is included.
    """
    if predose_zero and time[0] > 0:
        time = np.concatenate(([0.0], time))
        concentration = np.concatenate(([0.0], concentration))

    segment = (
        _auc_trapezoidal_segment if method == "trapezoidal" else _auc_rectangle_segment
    )
    auc = 0.0
    for i in range(len(time) - 1):
        auc += segment(time[i], time[i + 1], concentration[i], concentration[i + 1])
    return float(auc)


# ---------------------------------------------------------------------------
# Terminal elimination rate constant
# ---------------------------------------------------------------------------

def _estimate_ke(
    time: NDArray[np.float64],
    concentration: NDArray[np.float64],
) -> tuple[float | None, float | None, int]:
    """Fit ln(C) against time over the last ``TERMINAL_POINTS`` points.

    *time* and *concentration* are a cleaned profile of at least two points.

    Returns
    -------
    ke : negative of the fitted slope, or None if the fit is not computable
    r_squared : r-squared of the fit, or None
    n_terminal : number of points in the terminal window
    """
    n_terminal = min(TERMINAL_POINTS, len(time))
    t_term = time[-n_terminal:]
    if np.ptp(t_term) == 0:
        # All terminal samples share one time point: slope is undefined
        return None, None, n_terminal

    log_c_term = np.log(concentration[-n_terminal:])
    fit = stats.linregress(t_term, log_c_term)
    return -float(fit.slope), float(fit.rvalue ** 2), n_terminal


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def estimate_pk_parameters(
    time: ArrayLike,
    concentration: ArrayLike,
    dose: float,
    *,
    method: str = "trapezoidal",
) -> PKParameters:
    """Estimate non-compartmental PK parameters for one subject.

    Parameters
    ----------
    time : array
        Sampling times.  Negative times are discarded.
    concentration : array
        Concentrations, same length as *time*.  Non-positive values
        (e.g. below the limit of quantification recorded as 0) are
        discarded.  A pre-dose zero at ``t = 0`` still anchors the AUC
        but does not count as a valid point.
    dose : float
        Administered dose (positive).
    method : str
        AUC rule: ``'trapezoidal'`` (linear trapezoidal, the default) or
        ``'linear-rectangle'`` (right-endpoint rectangles).  The two are
        not interchangeable, so the rule is stored on the result.

    Returns
    -------
    PKParameters
        Frozen dataclass; parameters that cannot be computed are ``None``.

    Raises
    ------
    InsufficientDataError
        If fewer than 2 valid points remain after cleaning.
    ValueError
        On mismatched lengths, a non-positive dose, or an unknown method.
    """
    time, concentration, predose_zero = _validate_inputs(
        time, concentration, dose, method
    )
    dose = float(dose)

    # ----- Cmax / Tmax -----
    idx_cmax = int(np.argmax(concentration))
    cmax = float(concentration[idx_cmax])
    tmax = float(time[idx_cmax])

    # ----- AUC -----
    auc = _compute_auc(time, concentration, method, predose_zero)

    # ----- Terminal elimination -----
    ke, r_squared, n_terminal = _estimate_ke(time, concentration)

    half_life: float | None = None
    if ke is not None and ke > 0:
        half_life = math.log(2) / ke

    clearance: float | None = None
    if auc > 0:
        clearance = dose / auc

    vd: float | None = None
    if clearance is not None and ke is not None and ke > 0:
        vd = clearance / ke

    cav: float | None = None
    t_end = float(time[-1])
    if t_end > 0:
        cav = auc / t_end

    c0: float | None = None
    if vd is not None:
        c0 = dose / vd

    return PKParameters(
        cmax=cmax,
        tmax=tmax,
        auc=auc,
        ke=ke,
        half_life=half_life,
        clearance=clearance,
        vd=vd,
        cav=cav,
        c0=c0,
        dose=dose,
        auc_method=method,
        n_points=len(time),
        n_terminal=n_terminal,
        ke_r_squared=r_squared,
    )
