"""Population aggregation of pharmacokinetic parameters.

Clearance, volume of distribution and half-life are log-normally
distributed across subjects, so they are summarised on the log scale:

.. math::
    GM = \\exp\\bigl(\\overline{\\ln x}\\bigr), \\qquad
    CV_{geo} = \\sqrt{\\operatorname{Var}(\\ln x)}

with the sample (``ddof=1``) variance.  Median and range are reported on
the natural scale.  Each parameter is aggregated over the subjects for
which it is defined, and the contributing count is reported alongside so
that callers can judge how reliable an aggregate is.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable, Sequence
from dataclasses import fields

import numpy as np
import pandas as pd

from clinicalpk.pk._common import (
    EmptyPopulationError,
    InsufficientDataError,
    ParameterSummary,
    PKParameters,
    PopulationPKResult,
    PopulationSummary,
)
from clinicalpk.pk._nca import AUC_METHODS, estimate_pk_parameters

logger = logging.getLogger(__name__)

LOGNORMAL_PARAMETERS = ("clearance", "vd", "half_life")

_NUMERIC_FIELDS = tuple(
    f.name for f in fields(PKParameters)
    if f.name not in ("auc_method", "n_points", "n_terminal", "dose")
)

# Output columns of the per-subject table, keyed by PKParameters field
_INDIVIDUAL_COLUMNS = {
    "cmax": "CMAX",
    "tmax": "TMAX",
    "auc": "AUC",
    "ke": "KE",
    "half_life": "HALF_LIFE",
    "clearance": "CL",
    "vd": "VD",
    "cav": "CAV",
    "c0": "C0",
}


# ---------------------------------------------------------------------------
# Per-parameter aggregation
# ---------------------------------------------------------------------------

def _usable_values(
    parameter_sets: Sequence[PKParameters], name: str,
) -> np.ndarray:
    """Collect defined, finite, strictly positive values of one parameter."""
    values = []
    for p in parameter_sets:
        value = getattr(p, name)
        if value is None:
            continue
        value = float(value)
        if math.isfinite(value) and value > 0:
            values.append(value)
    return np.asarray(values, dtype=np.float64)


def _check_parameters(parameters: str | Sequence[str]) -> tuple[str, ...]:
    """Normalise requested parameter names, rejecting unknown ones."""
    if isinstance(parameters, str):
        parameters = (parameters,)
    parameters = tuple(parameters)
    for name in parameters:
        if name not in _NUMERIC_FIELDS:
            raise ValueError(
                f"Unknown PK parameter {name!r}; expected one of {_NUMERIC_FIELDS}"
            )
    return parameters


def _subject_dose(doses: pd.Series) -> float | None:
    """First recorded dose of a subject, or None if it is not a positive number."""
    try:
        dose = float(doses.iloc[0])
    except (TypeError, ValueError):
        return None
    if not math.isfinite(dose) or dose <= 0:
        return None
    return dose


def _summarize_parameter(name: str, values: np.ndarray) -> ParameterSummary:
    n = len(values)
    if n == 0:
        return ParameterSummary(
            name=name, n=0, geometric_mean=None, geometric_cv=None,
            median=None, min=None, max=None,
        )

    log_values = np.log(values)
    geometric_cv = float(np.sqrt(np.var(log_values, ddof=1))) if n > 1 else None

    return ParameterSummary(
        name=name,
        n=n,
        geometric_mean=float(np.exp(np.mean(log_values))),
        geometric_cv=geometric_cv,
        median=float(np.median(values)),
        min=float(np.min(values)),
        max=float(np.max(values)),
    )


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def summarize_population(
    parameter_sets: Iterable[PKParameters],
    *,
    parameters: str | Sequence[str] = LOGNORMAL_PARAMETERS,
) -> PopulationSummary:
    """Summarise PK parameters across a population of subjects.

    Parameters
    ----------
    parameter_sets : iterable of PKParameters
        One result of :func:`estimate_pk_parameters` per subject.
    parameters : str or sequence of str
        Names of :class:`PKParameters` fields to aggregate.  Defaults to
        the log-normal parameters ``('clearance', 'vd', 'half_life')``.
        A single name is treated as a one-element sequence.

    Returns
    -------
    PopulationSummary
        One :class:`ParameterSummary` per requested parameter.  A
        parameter with no usable values has ``n == 0`` and every
        statistic ``None``.

    Raises
    ------
    EmptyPopulationError
        If *parameter_sets* is empty.
    ValueError
        If a requested parameter name is not a numeric PK parameter.

    Notes
    -----
    Only strictly positive values contribute, since the statistics are
    taken on the log scale.  A non-positive Ke (no terminal decline) is
    therefore excluded from a Ke aggregate just like an undefined one.
    """
    parameter_sets = list(parameter_sets)
    if not parameter_sets:
        raise EmptyPopulationError("Cannot summarise an empty population")

    parameters = _check_parameters(parameters)

    summaries = {
        name: _summarize_parameter(name, _usable_values(parameter_sets, name))
        for name in parameters
    }
    return PopulationSummary(n_subjects=len(parameter_sets), parameters=summaries)


def population_pk(
    data: pd.DataFrame,
    *,
    subject_col: str = "USUBJID",
    time_col: str = "TIME",
    conc_col: str = "CONC",
    dose_col: str = "DOSE",
    method: str = "trapezoidal",
    parameters: str | Sequence[str] = LOGNORMAL_PARAMETERS,
) -> PopulationPKResult:
    """Estimate PK parameters per subject from long-format data and summarise.

    Parameters
    ----------
    data : DataFrame
        One row per sample with subject, time, concentration and dose
        columns.
    subject_col, time_col, conc_col, dose_col : str
        Column names.  Defaults follow CDISC-style naming.
    method : str
        AUC rule passed to :func:`estimate_pk_parameters`.
    parameters : str or sequence of str
        Parameters to aggregate in the population summary.

    Returns
    -------
    PopulationPKResult
        ``individual`` has one row per estimated subject (undefined
        parameters appear as NaN), ``summary`` the population aggregate,
        and ``skipped`` the subjects with unusable data.

    Raises
    ------
    EmptyPopulationError
        If no subject yields a parameter estimate.
    ValueError
        If a required column is missing, a row has no subject ID, or
        *method* or *parameters* is invalid.

    Notes
    -----
    Subjects are processed in order of first appearance.  A subject with
    several recorded doses is analysed with the first one.  Only
    subject-level data problems (too few quantifiable samples, a missing
    or non-positive dose) cause a subject to be skipped.
    """
    missing = [c for c in (subject_col, time_col, conc_col, dose_col) if c not in data.columns]
    if missing:
        raise ValueError(f"data is missing required columns: {missing}")

    if method not in AUC_METHODS:
        raise ValueError(f"method must be one of {AUC_METHODS}, got {method!r}")
    parameters = _check_parameters(parameters)

    n_unidentified = int(data[subject_col].isna().sum())
    if n_unidentified:
        raise ValueError(f"{n_unidentified} rows have a missing {subject_col!r} value")

    estimated: list[PKParameters] = []
    rows: list[dict] = []
    skipped: list = []

    for subject, subj_data in data.groupby(subject_col, sort=False):
        dose = _subject_dose(subj_data[dose_col])
        if dose is None:
            logger.warning(
                "Could not calculate parameters for subject %s: invalid dose %r",
                subject, subj_data[dose_col].iloc[0],
            )
            skipped.append(subject)
            continue

        try:
            params = estimate_pk_parameters(
                subj_data[time_col].to_numpy(),
                subj_data[conc_col].to_numpy(),
                dose,
                method=method,
            )
        except InsufficientDataError as exc:
            logger.warning("Could not calculate parameters for subject %s: %s", subject, exc)
            skipped.append(subject)
            continue

        estimated.append(params)
        row = {subject_col: subject, "DOSE": dose}
        for name, column in _INDIVIDUAL_COLUMNS.items():
            value = getattr(params, name)
            row[column] = np.nan if value is None else value
        rows.append(row)

    if not estimated:
        raise EmptyPopulationError(
            f"No individual parameters could be calculated "
            f"({len(skipped)} subjects skipped)"
        )

    logger.debug(
        "Estimated PK parameters for %d subjects (%d skipped)",
        len(estimated), len(skipped),
    )

    individual = pd.DataFrame(rows, columns=[subject_col, "DOSE", *_INDIVIDUAL_COLUMNS.values()])
    return PopulationPKResult(
        individual=individual,
        summary=summarize_population(estimated, parameters=parameters),
        skipped=tuple(skipped),
    )
