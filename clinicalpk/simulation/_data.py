"""Synthetic concentration-time data for a parallel-arm PK study.

Subjects follow the one-compartment oral model with log-normal
inter-individual variability on clearance and volume, normally
distributed absorption rate, and proportional residual error.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

import numpy as np
import pandas as pd

from clinicalpk.models import pk_one_compartment

logger = logging.getLogger(__name__)

DEFAULT_TIMES = (0.0, 0.5, 1.0, 2.0, 4.0, 6.0, 8.0, 12.0, 24.0, 48.0, 72.0)

_MIN_KA = 0.05


def simulate_pk_data(
    n_subjects: int = 50,
    *,
    doses: Sequence[float] = (50.0, 100.0, 200.0),
    times: Sequence[float] = DEFAULT_TIMES,
    cl: float = 2.5,
    vd: float = 50.0,
    ka: float = 0.8,
    omega_cl: float = 0.3,
    omega_vd: float = 0.2,
    ka_sd: float = 0.2,
    residual_cv: float = 0.1,
    seed: int | np.random.Generator | None = None,
) -> pd.DataFrame:
    """Simulate long-format PK observations for a population.

    Parameters
    ----------
    n_subjects : int
        Number of subjects.  Subjects are assigned to the dose arms
        in rotation.
    doses : sequence of float
        Dose for each study arm (positive).
    times : sequence of float
        Nominal sampling times, shared by all subjects.
    cl, vd, ka : float
        Typical clearance, volume of distribution, absorption rate.
    omega_cl, omega_vd : float
        Log-scale standard deviations of the inter-individual
        variability on CL and Vd.
    ka_sd : float
        Standard deviation of Ka across subjects (natural scale).
        Draws are floored at a small positive rate.
    residual_cv : float
        Proportional residual error.  Observations are floored at 0.
    seed : int, Generator, or None
        Seed for :func:`numpy.random.default_rng`.

    Returns
    -------
    DataFrame
        Columns ``USUBJID``, ``ARM``, ``DOSE``, ``TIME``, ``CONC``, one
        row per subject and sampling time.
    """
    if n_subjects < 1:
        raise ValueError(f"n_subjects must be >= 1, got {n_subjects}")
    if len(doses) == 0 or any(d <= 0 for d in doses):
        raise ValueError("doses must be a non-empty sequence of positive values")
    if cl <= 0 or vd <= 0 or ka <= 0:
        raise ValueError("cl, vd and ka must be positive")
    if min(omega_cl, omega_vd, ka_sd, residual_cv) < 0:
        raise ValueError("variability parameters must be non-negative")

    rng = np.random.default_rng(seed)
    times = np.asarray(times, dtype=np.float64)

    cl_i = cl * np.exp(rng.normal(0.0, omega_cl, n_subjects))
    vd_i = vd * np.exp(rng.normal(0.0, omega_vd, n_subjects))
    ka_i = np.maximum(rng.normal(ka, ka_sd, n_subjects), _MIN_KA)
    ke_i = cl_i / vd_i

    frames = []
    for i in range(n_subjects):
        dose = float(doses[i % len(doses)])
        ka_subj = ka_i[i]
        if np.isclose(ka_subj, ke_i[i]):
            ka_subj *= 1.01
        conc = pk_one_compartment(times, dose, ka_subj, ke_i[i], vd_i[i])
        conc = conc * (1.0 + rng.normal(0.0, residual_cv, len(times)))
        frames.append(pd.DataFrame({
            "USUBJID": f"SUBJ{i + 1:03d}",
            "ARM": f"{dose:g}",
            "DOSE": dose,
            "TIME": times,
            "CONC": np.maximum(conc, 0.0),
        }))

    logger.debug("Simulated %d subjects x %d samples", n_subjects, len(times))
    return pd.concat(frames, ignore_index=True)
