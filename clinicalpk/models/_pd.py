"""Pharmacodynamic models linking concentration to effect."""

from __future__ import annotations

import numpy as np
from numpy.typing import ArrayLike, NDArray


def pd_emax(
    concentration: ArrayLike,
    emax: float,
    ec50: float,
    *,
    baseline: float = 0.0,
    hill: float = 1.0,
) -> NDArray[np.float64]:
    """Sigmoid Emax model.

    .. math::
        E = E_0 + \\frac{E_{max} C^h}{EC_{50}^h + C^h}

    Parameters
    ----------
    concentration : array
        Non-negative concentrations.
    emax : float
        Maximum effect above baseline.
    ec50 : float
        Concentration producing half the maximum effect (positive).
    baseline : float
        Effect at zero concentration.
    hill : float
        Hill coefficient (positive).  ``1.0`` gives the hyperbolic Emax model.

    Returns
    -------
    NDArray
        Effect at each concentration.
    """
    if ec50 <= 0:
        raise ValueError(f"ec50 must be positive, got {ec50!r}")
    if hill <= 0:
        raise ValueError(f"hill must be positive, got {hill!r}")

    conc = np.asarray(concentration, dtype=np.float64)
    if np.any(conc < 0):
        raise ValueError("concentration values must be non-negative")

    c_h = conc ** hill
    return baseline + emax * c_h / (ec50 ** hill + c_h)


def pd_indirect_response(
    time: ArrayLike,
    concentration: ArrayLike,
    kin: float,
    kout: float,
    emax: float,
    ec50: float,
    *,
    inhibition: bool = True,
) -> NDArray[np.float64]:
    """Indirect response (turnover) model.

    The response is produced at zero-order rate ``kin`` and lost at
    first-order rate ``kout``; the drug inhibits (or stimulates)
    production:

    .. math::
        \\frac{dR}{dt} = k_{in} \\Bigl(1 \\mp \\frac{E_{max} C}{EC_{50} + C}\\Bigr)
                         - k_{out} R, \\qquad R(t_0) = k_{in} / k_{out}

    Integrated with explicit Euler steps over the supplied time grid,
    using the concentration at the end of each step.  Accuracy depends on
    the grid spacing relative to ``1 / kout``.

    Parameters
    ----------
    time : array
        Increasing time grid.
    concentration : array
        Concentration at each time point.
    kin : float
        Zero-order production rate.
    kout : float
        First-order loss rate.
    emax : float
        Maximum fractional inhibition or stimulation.
    ec50 : float
        Concentration producing half the maximal drug effect.
    inhibition : bool
        ``True`` for inhibition of production, ``False`` for stimulation.

    Returns
    -------
    NDArray
        Response at each time point.
    """
    time = np.asarray(time, dtype=np.float64).ravel()
    conc = np.asarray(concentration, dtype=np.float64).ravel()

    if time.shape[0] != conc.shape[0]:
        raise ValueError(
            f"time and concentration must have equal length, "
            f"got {time.shape[0]} and {conc.shape[0]}"
        )
    if kin <= 0 or kout <= 0:
        raise ValueError("kin and kout must be positive")
    if ec50 <= 0:
        raise ValueError(f"ec50 must be positive, got {ec50!r}")
    if np.any(np.diff(time) < 0):
        raise ValueError("time must be non-decreasing")

    n = time.shape[0]
    response = np.empty(n, dtype=np.float64)
    if n == 0:
        return response

    drug = emax * conc / (ec50 + conc)
    modifier = 1.0 - drug if inhibition else 1.0 + drug

    response[0] = kin / kout
    for i in range(1, n):
        dt = time[i] - time[i - 1]
        response[i] = response[i - 1] + dt * (kin * modifier[i] - kout * response[i - 1])
    return response
