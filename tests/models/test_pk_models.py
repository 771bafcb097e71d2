"""Tests for compartmental PK model functions."""

import numpy as np
import pytest

from clinicalpk.models import pk_one_compartment, pk_two_compartment
from clinicalpk.pk import estimate_pk_parameters


# ---------------------------------------------------------------------------
# One compartment
# ---------------------------------------------------------------------------

class TestOneCompartment:
    """First-order absorption, one compartment."""

    def test_zero_at_dosing_time(self):
        c = pk_one_compartment([0.0], 100, ka=1.0, ke=0.1, vd=10)
        assert c[0] == pytest.approx(0.0, abs=1e-12)

    def test_zero_before_dose(self):
        c = pk_one_compartment([-2.0, -0.5], 100, ka=1.0, ke=0.1, vd=10)
        np.testing.assert_array_equal(c, [0.0, 0.0])

    def test_formula(self):
        t = np.array([0.5, 2.0, 12.0])
        expected = 100 * 1.0 / (10 * 0.9) * (np.exp(-0.1 * t) - np.exp(-1.0 * t))
        np.testing.assert_allclose(pk_one_compartment(t, 100, 1.0, 0.1, 10), expected, rtol=1e-12)

    def test_peak_at_analytical_tmax(self):
        ka, ke = 1.2, 0.15
        tmax = np.log(ka / ke) / (ka - ke)
        t = np.array([tmax - 0.01, tmax, tmax + 0.01])
        c = pk_one_compartment(t, 100, ka, ke, 20)
        assert c[1] > c[0]
        assert c[1] > c[2]

    def test_ka_less_than_ke(self):
        """Flip-flop kinetics still give positive concentrations."""
        c = pk_one_compartment([1.0, 5.0], 100, ka=0.05, ke=0.5, vd=10)
        assert np.all(c > 0)

    def test_scalar_time(self):
        c = pk_one_compartment(2.0, 100, 1.0, 0.1, 10)
        assert np.ndim(c) == 0
        assert c > 0

    def test_auc_recovers_clearance(self):
        """AUC(0-inf) = Dose / (ke * V); dense sampling recovers CL = ke * V."""
        t = np.linspace(0, 150, 3001)
        c = pk_one_compartment(t, 100, ka=1.0, ke=0.1, vd=10)
        r = estimate_pk_parameters(t, c, 100)
        assert r.clearance == pytest.approx(1.0, rel=1e-3)
        assert r.ke == pytest.approx(0.1, rel=1e-6)

    def test_equal_rates_rejected(self):
        with pytest.raises(ValueError, match="ka and ke must differ"):
            pk_one_compartment([1.0], 100, ka=0.5, ke=0.5, vd=10)

    @pytest.mark.parametrize("ka,ke,vd", [(0, 0.1, 10), (1, -0.1, 10), (1, 0.1, 0)])
    def test_non_positive_parameters(self, ka, ke, vd):
        with pytest.raises(ValueError, match="must be positive"):
            pk_one_compartment([1.0], 100, ka=ka, ke=ke, vd=vd)


# ---------------------------------------------------------------------------
# Two compartments
# ---------------------------------------------------------------------------

class TestTwoCompartment:
    """First-order absorption, two compartments."""

    def test_zero_at_dosing_time(self):
        c = pk_two_compartment([0.0], 100, ka=1.0, ke=0.2, vd=10, v2=20, q12=2)
        assert c[0] == pytest.approx(0.0, abs=1e-10)

    def test_zero_before_dose(self):
        c = pk_two_compartment([-1.0], 100, ka=1.0, ke=0.2, vd=10, v2=20, q12=2)
        assert c[0] == 0.0

    def test_positive_after_dose(self):
        t = np.array([0.25, 1, 4, 12, 48])
        c = pk_two_compartment(t, 100, ka=1.0, ke=0.2, vd=10, v2=20, q12=2)
        assert np.all(c > 0)

    def test_reduces_to_one_compartment(self):
        """Negligible intercompartmental clearance leaves one compartment."""
        t = np.array([0.5, 2.0, 6.0, 12.0])
        c2 = pk_two_compartment(t, 100, ka=1.0, ke=0.1, vd=10, v2=10, q12=1e-9)
        c1 = pk_one_compartment(t, 100, ka=1.0, ke=0.1, vd=10)
        np.testing.assert_allclose(c2, c1, rtol=1e-5)

    def test_auc_equals_dose_over_clearance(self):
        """AUC(0-inf) = Dose / (ke * V1) regardless of distribution."""
        t = np.linspace(0, 400, 8001)
        c = pk_two_compartment(t, 100, ka=1.0, ke=0.2, vd=10, v2=20, q12=2)
        r = estimate_pk_parameters(t, c, 100)
        assert r.auc == pytest.approx(100 / (0.2 * 10), rel=1e-3)

    def test_terminal_slope_is_beta(self):
        """Late phase declines with the slower hybrid rate constant."""
        ke, vd, v2, q12 = 0.2, 10.0, 20.0, 2.0
        s = ke + q12 / vd + q12 / v2
        beta = (s - np.sqrt(s * s - 4 * ke * q12 / v2)) / 2
        t = np.array([60.0, 80.0, 100.0, 120.0])
        c = pk_two_compartment(t, 100, ka=1.0, ke=ke, vd=vd, v2=v2, q12=q12)
        r = estimate_pk_parameters(t, c, 100)
        assert r.ke == pytest.approx(beta, rel=1e-6)

    def test_non_positive_parameters(self):
        with pytest.raises(ValueError, match="q12 must be positive"):
            pk_two_compartment([1.0], 100, ka=1.0, ke=0.2, vd=10, v2=20, q12=0)

    def test_singular_ka(self):
        ke, vd, v2, q12 = 0.2, 10.0, 20.0, 2.0
        s = ke + q12 / vd + q12 / v2
        alpha = (s + np.sqrt(s * s - 4 * ke * q12 / v2)) / 2
        with pytest.raises(ValueError, match="singular"):
            pk_two_compartment([1.0], 100, ka=alpha, ke=ke, vd=vd, v2=v2, q12=q12)
