"""Shared result types for simulation."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np
import pandas as pd
from numpy.typing import NDArray


@dataclass(frozen=True)
class DoseOptimizationResult:
    """Exposure distribution per candidate dose.

    Each array has one entry per dose in ``dose``.
    """

    dose: NDArray[np.floating]
    mean_exposure: NDArray[np.floating]
    median_exposure: NDArray[np.floating]
    cv_exposure: NDArray[np.floating]  # sd / mean
    prob_target: NDArray[np.floating]  # P(exposure >= target_value)
    p25_exposure: NDArray[np.floating]
    p75_exposure: NDArray[np.floating]
    target_exposure: str  # 'AUC' or 'Cmax'
    target_value: float
    n_simulations: int

    def to_frame(self) -> pd.DataFrame:
        """One row per dose."""
        return pd.DataFrame({
            "dose": self.dose,
            "n_simulations": self.n_simulations,
            "mean_exposure": self.mean_exposure,
            "median_exposure": self.median_exposure,
            "cv_exposure": self.cv_exposure,
            "prob_achieving_target": self.prob_target,
            "p25_exposure": self.p25_exposure,
            "p75_exposure": self.p75_exposure,
        })

    def best_dose(self, prob: float = 0.9) -> float | None:
        """Lowest dose whose probability of target attainment is at least *prob*."""
        reached = np.nonzero(self.prob_target >= prob)[0]
        if len(reached) == 0:
            return None
        return float(np.min(self.dose[reached]))

    def summary(self) -> str:
        """Human-readable table of target attainment by dose."""
        lines = [
            f"Dose optimization: {self.target_exposure} >= {self.target_value:g} "
            f"({self.n_simulations} simulations per dose)",
            "",
            f"  {'dose':>8s}  {'median':>10s}  {'CV':>6s}  {'P(target)':>9s}",
        ]
        for i in range(len(self.dose)):
            lines.append(
                f"  {self.dose[i]:>8.4g}  {self.median_exposure[i]:>10.4g}  "
                f"{100.0 * self.cv_exposure[i]:>5.1f}%  {self.prob_target[i]:>9.3f}"
            )
        return "\n".join(lines)
