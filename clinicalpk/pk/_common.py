"""Shared result types and errors for pharmacokinetic analysis."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import pandas as pd


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------

class PKError(ValueError):
    """Base class for pharmacokinetic analysis errors."""


class InsufficientDataError(PKError):
    """Fewer than 2 usable time-concentration points remain after cleaning."""


class EmptyPopulationError(PKError):
    """No subjects were available for a population summary."""


# ---------------------------------------------------------------------------
# Single-subject result
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class PKParameters:
    """Pharmacokinetic parameters for one subject.

    Fields typed ``float | None`` are ``None`` when the parameter could not
    be computed from the data (e.g. no terminal decline, so no half-life).
    """

    # Exposure parameters (always defined)
    cmax: float  # maximum observed concentration
    tmax: float  # time of Cmax (first occurrence)
    auc: float  # area under the curve over the observed window

    # Elimination parameters
    ke: float | None  # terminal elimination rate constant
    half_life: float | None  # ln(2) / ke
    clearance: float | None  # dose / AUC
    vd: float | None  # clearance / ke
    cav: float | None  # AUC / max(time)
    c0: float | None  # dose / vd

    # Metadata
    dose: float
    auc_method: str  # 'trapezoidal' or 'linear-rectangle'
    n_points: int  # valid points after cleaning
    n_terminal: int  # points used for the terminal regression
    ke_r_squared: float | None = None  # r-squared of the terminal fit

    def to_dict(self) -> dict[str, float | int | str | None]:
        """Return the parameters as a plain dictionary."""
        return asdict(self)

    def summary(self) -> str:
        """Human-readable PK summary."""
        lines = ["Pharmacokinetic Parameters", ""]
        lines.append(f"  AUC method: {self.auc_method}")
        lines.append(f"  Dose: {self.dose}")
        lines.append(f"  Points: {self.n_points} ({self.n_terminal} terminal)")
        lines.append("")
        lines.append(f"  Cmax          = {self.cmax:.4g}")
        lines.append(f"  Tmax          = {self.tmax:.4g}")
        lines.append(f"  AUC           = {self.auc:.4g}")
        for label, value in (
            ("Ke", self.ke),
            ("t1/2", self.half_life),
            ("CL", self.clearance),
            ("Vd", self.vd),
            ("Cav", self.cav),
            ("C0", self.c0),
        ):
            shown = "undefined" if value is None else f"{value:.4g}"
            lines.append(f"  {label:<13s} = {shown}")
        if self.ke_r_squared is not None:
            lines.append(f"  r-squared     = {self.ke_r_squared:.4f}")
        return "\n".join(lines)


# ---------------------------------------------------------------------------
# Population results
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ParameterSummary:
    """Population aggregate of a single PK parameter.

    ``n`` is the number of subjects that contributed a usable value.
    Every statistic is ``None`` when ``n == 0``; ``geometric_cv`` is also
    ``None`` when ``n == 1`` (a variance needs two values).
    """

    name: str
    n: int
    geometric_mean: float | None
    geometric_cv: float | None
    median: float | None
    min: float | None
    max: float | None

    @property
    def defined(self) -> bool:
        return self.n > 0

    @property
    def range(self) -> tuple[float, float] | None:
        if self.min is None or self.max is None:
            return None
        return (self.min, self.max)


@dataclass(frozen=True)
class PopulationSummary:
    """Geometric summaries of PK parameters across a population."""

    n_subjects: int
    parameters: dict[str, ParameterSummary] = field(default_factory=dict)

    def __getitem__(self, name: str) -> ParameterSummary:
        return self.parameters[name]

    def __contains__(self, name: object) -> bool:
        return name in self.parameters

    def summary(self) -> str:
        """Human-readable population summary."""
        lines = [f"Population PK Summary (n = {self.n_subjects})", ""]
        for p in self.parameters.values():
            if not p.defined:
                lines.append(f"  {p.name:<10s} undefined (0 of {self.n_subjects} subjects)")
                continue
            cv = "NA" if p.geometric_cv is None else f"{100.0 * p.geometric_cv:.1f}%"
            lines.append(
                f"  {p.name:<10s} GM = {p.geometric_mean:.4g}  CV = {cv}  "
                f"median = {p.median:.4g}  range = [{p.min:.4g}, {p.max:.4g}]  "
                f"(n = {p.n})"
            )
        return "\n".join(lines)


@dataclass(frozen=True)
class PopulationPKResult:
    """Result of a long-format population PK analysis."""

    individual: pd.DataFrame  # one row per estimated subject
    summary: PopulationSummary
    skipped: tuple = ()  # subject IDs that could not be estimated

    @property
    def n_subjects(self) -> int:
        return len(self.individual)
