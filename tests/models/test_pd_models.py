"""Tests for pharmacodynamic model functions."""

import numpy as np
import pytest

from clinicalpk.models import pd_emax, pd_indirect_response


# ---------------------------------------------------------------------------
# Emax
# ---------------------------------------------------------------------------

class TestEmax:
    """Sigmoid Emax model."""

    def test_baseline_at_zero(self):
        e = pd_emax([0.0], emax=100, ec50=5, baseline=10)
        assert e[0] == pytest.approx(10.0)

    def test_half_max_at_ec50(self):
        e = pd_emax([5.0], emax=100, ec50=5, baseline=10)
        assert e[0] == pytest.approx(60.0)

    def test_hill_steepness(self):
        """Higher hill gives a steeper curve around EC50."""
        conc = np.array([2.5, 10.0])
        shallow = pd_emax(conc, emax=1, ec50=5, hill=1)
        steep = pd_emax(conc, emax=1, ec50=5, hill=4)
        assert steep[0] < shallow[0]
        assert steep[1] > shallow[1]

    def test_approaches_emax(self):
        e = pd_emax([1e9], emax=80, ec50=5)
        assert e[0] == pytest.approx(80.0, rel=1e-6)

    def test_monotone(self):
        e = pd_emax(np.linspace(0, 50, 20), emax=1, ec50=5, hill=2)
        assert np.all(np.diff(e) > 0)

    def test_negative_emax_inhibits(self):
        e = pd_emax([5.0], emax=-40, ec50=5, baseline=100)
        assert e[0] == pytest.approx(80.0)

    def test_invalid_ec50(self):
        with pytest.raises(ValueError, match="ec50"):
            pd_emax([1.0], emax=1, ec50=0)

    def test_invalid_hill(self):
        with pytest.raises(ValueError, match="hill"):
            pd_emax([1.0], emax=1, ec50=1, hill=0)

    def test_negative_concentration(self):
        with pytest.raises(ValueError, match="non-negative"):
            pd_emax([-1.0], emax=1, ec50=1)


# ---------------------------------------------------------------------------
# Indirect response
# ---------------------------------------------------------------------------

class TestIndirectResponse:
    """Turnover model with Euler integration."""

    @pytest.fixture
    def grid(self):
        return np.linspace(0, 100, 1001)

    def test_starts_at_baseline(self, grid):
        r = pd_indirect_response(grid, np.full_like(grid, 5.0), kin=10, kout=0.5, emax=0.8, ec50=5)
        assert r[0] == pytest.approx(20.0)

    def test_no_drug_stays_at_baseline(self, grid):
        r = pd_indirect_response(grid, np.zeros_like(grid), kin=10, kout=0.5, emax=0.8, ec50=5)
        np.testing.assert_allclose(r, 20.0, rtol=1e-12)

    def test_inhibition_steady_state(self, grid):
        """Constant C = EC50: production reduced by emax/2."""
        r = pd_indirect_response(grid, np.full_like(grid, 5.0), kin=10, kout=0.5, emax=0.8, ec50=5)
        assert r[-1] == pytest.approx(10 * (1 - 0.4) / 0.5, rel=1e-6)

    def test_stimulation_steady_state(self, grid):
        r = pd_indirect_response(
            grid, np.full_like(grid, 5.0), kin=10, kout=0.5, emax=0.8, ec50=5,
            inhibition=False,
        )
        assert r[-1] == pytest.approx(10 * (1 + 0.4) / 0.5, rel=1e-6)

    def test_inhibition_lowers_response(self, grid):
        conc = 10.0 * np.exp(-0.1 * grid)
        r = pd_indirect_response(grid, conc, kin=10, kout=0.5, emax=0.8, ec50=5)
        assert np.min(r) < 20.0
        assert np.all(r <= 20.0 + 1e-12)

    def test_empty(self):
        r = pd_indirect_response([], [], kin=1, kout=1, emax=1, ec50=1)
        assert r.shape == (0,)

    def test_length_mismatch(self):
        with pytest.raises(ValueError, match="equal length"):
            pd_indirect_response([0, 1], [1.0], kin=1, kout=1, emax=1, ec50=1)

    def test_invalid_rates(self):
        with pytest.raises(ValueError, match="kin and kout"):
            pd_indirect_response([0, 1], [1.0, 1.0], kin=0, kout=1, emax=1, ec50=1)

    def test_decreasing_time(self):
        with pytest.raises(ValueError, match="non-decreasing"):
            pd_indirect_response([1, 0], [1.0, 1.0], kin=1, kout=1, emax=1, ec50=1)
