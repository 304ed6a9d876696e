"""Tests for the SIR right-hand side and the trajectory simulator."""

import numpy as np
import pytest

from sirfit.errors import NumericalInstability
from sirfit.sir import CompartmentState, SIRParams, sir_rhs, simulate_sir


@pytest.fixture
def default_params():
    """Default parameters for the SIR model simulation."""
    return {
        "y0": CompartmentState(S=999.0, I=1.0, R=0.0),
        "N": 1000.0,
        "params": SIRParams(beta=0.4, gamma=0.1),
    }


class TestSirRhs:
    """Tests for sir_rhs function."""

    @pytest.mark.parametrize("state", [
        (999.0, 1.0, 0.0),
        (500.0, 300.0, 200.0),
        (0.0, 0.0, 1000.0),
        (123456.7, 8910.11, 121.314),
    ])
    @pytest.mark.parametrize("beta,gamma", [(0.1, 0.01), (0.273, 0.033), (1.0, 0.07)])
    def test_derivatives_sum_to_zero(self, state, beta, gamma):
        """Total population is conserved by the vector field."""
        S, I, R = state
        N = S + I + R
        dS, dI, dR = sir_rhs(S, I, R, N, beta, gamma)
        scale = max(abs(dS), abs(dI), abs(dR), 1.0)
        assert dS + dI + dR == pytest.approx(0.0, abs=1e-12 * scale)

    def test_known_values(self):
        dS, dI, dR = sir_rhs(900.0, 100.0, 0.0, 1000.0, 0.5, 0.1)
        assert dS == pytest.approx(-45.0)
        assert dI == pytest.approx(35.0)
        assert dR == pytest.approx(10.0)

    def test_no_infected_is_equilibrium(self):
        assert sir_rhs(1000.0, 0.0, 0.0, 1000.0, 0.5, 0.1) == (0.0, 0.0, 0.0)


class TestSimulateSir:
    """Tests for simulate_sir function."""

    def test_output_shape(self, default_params):
        t = np.arange(1, 11, dtype=float)
        out = simulate_sir(t, **default_params)
        for key in ("S", "I", "R"):
            assert len(out[key]) == len(t)

    def test_initial_conditions(self, default_params):
        """First point equals the initial state."""
        out = simulate_sir(np.arange(1, 50, dtype=float), **default_params)
        assert out["S"][0] == pytest.approx(999.0)
        assert out["I"][0] == pytest.approx(1.0)
        assert out["R"][0] == pytest.approx(0.0)

    def test_population_conservation_long_horizon(self):
        """S + I + R stays at N over a fit + projection horizon."""
        N = 5_000_000.0
        y0 = CompartmentState(S=N - 120.0 - 30.0, I=120.0, R=30.0)
        t = np.arange(1, 1501, dtype=float)
        out = simulate_sir(t, y0, N, SIRParams(0.273, 0.033))
        total = out["S"] + out["I"] + out["R"]
        assert np.allclose(total, N, rtol=1e-6, atol=0)

    def test_single_time_point(self, default_params):
        out = simulate_sir([1.0], **default_params)
        assert out["I"].tolist() == [1.0]

    def test_susceptible_never_increases(self, default_params):
        out = simulate_sir(np.arange(1, 161, dtype=float), **default_params)
        assert np.all(np.diff(out["S"]) <= 1e-9)

    def test_removed_never_decreases(self, default_params):
        out = simulate_sir(np.arange(1, 161, dtype=float), **default_params)
        assert np.all(np.diff(out["R"]) >= -1e-9)

    def test_higher_beta_increases_peak(self, default_params):
        t = np.arange(1, 161, dtype=float)
        low = simulate_sir(t, default_params["y0"], default_params["N"], SIRParams(0.2, 0.1))
        high = simulate_sir(t, default_params["y0"], default_params["N"], SIRParams(0.6, 0.1))
        assert np.max(high["I"]) > np.max(low["I"])

    def test_time_invariance(self, default_params):
        """Shifting the time axis does not change the trajectory."""
        a = simulate_sir(np.arange(1, 61, dtype=float), **default_params)
        b = simulate_sir(np.arange(101, 161, dtype=float), **default_params)
        assert np.allclose(a["I"], b["I"], rtol=1e-6)

    def test_non_increasing_time_rejected(self, default_params):
        with pytest.raises(ValueError):
            simulate_sir([1.0, 3.0, 2.0], **default_params)

    def test_evaluation_budget_raises_instability(self, default_params):
        with pytest.raises(NumericalInstability):
            simulate_sir(np.arange(1, 200, dtype=float), max_rhs_evaluations=10, **default_params)

    def test_non_positive_population_raises_instability(self, default_params):
        params = dict(default_params, N=0.0)
        with pytest.raises(NumericalInstability):
            simulate_sir([1.0, 2.0], **params)


class TestDataTypes:
    def test_r0_and_recovery_days(self):
        p = SIRParams(beta=0.3, gamma=0.05)
        assert p.R0 == pytest.approx(6.0)
        assert p.recovery_days == pytest.approx(20.0)

    def test_state_from_observed(self):
        y0 = CompartmentState.from_observed(1_000_000, 10, 2)
        assert y0.as_tuple() == (999_988.0, 10.0, 2.0)
        assert y0.total == pytest.approx(1_000_000)

    def test_state_is_immutable(self):
        y0 = CompartmentState(1.0, 2.0, 3.0)
        with pytest.raises(AttributeError):
            y0.S = 5.0
