"""Tests for the bounded (beta, gamma) optimizer."""

import pytest

from sirfit.loss import make_loss
from sirfit.optimizer import OptimizationResult, fit_beta_gamma
from sirfit.series import ObservedSeries
from sirfit.sir import CompartmentState

INITIAL_GUESS = (0.273, 0.033)
LOWER, UPPER = (0.1, 0.01), (1.0, 0.07)


@pytest.fixture
def scenario_loss():
    observed = ObservedSeries.from_arrays([10, 15, 22, 30], [2, 3, 5, 8])
    N = 1_000_000.0
    y0 = CompartmentState.from_observed(N, observed.active0, observed.removed0)
    return make_loss(observed, y0, N)


class TestFitBetaGamma:
    def test_improves_on_initial_guess(self, scenario_loss):
        """Optimized loss is no worse than the loss at the starting point."""
        result = fit_beta_gamma(scenario_loss, INITIAL_GUESS, LOWER, UPPER)
        assert isinstance(result, OptimizationResult)
        assert result.loss <= scenario_loss(INITIAL_GUESS)

    def test_respects_bounds(self, scenario_loss):
        result = fit_beta_gamma(scenario_loss, INITIAL_GUESS, LOWER, UPPER)
        assert LOWER[0] <= result.params.beta <= UPPER[0]
        assert LOWER[1] <= result.params.gamma <= UPPER[1]

    def test_deterministic(self, scenario_loss):
        """Identical inputs give identical parameters and loss."""
        a = fit_beta_gamma(scenario_loss, INITIAL_GUESS, LOWER, UPPER)
        b = fit_beta_gamma(scenario_loss, INITIAL_GUESS, LOWER, UPPER)
        assert a.params == b.params
        assert a.loss == b.loss

    def test_iteration_cap_reports_non_convergence(self, observed, true_params):
        N = true_params["N"]
        y0 = CompartmentState.from_observed(N, observed.active0, observed.removed0)
        loss = make_loss(observed, y0, N)
        result = fit_beta_gamma(loss, INITIAL_GUESS, LOWER, UPPER, max_iterations=1)
        assert result.converged is False
        assert result.message

    def test_loss_matches_returned_parameters(self, scenario_loss):
        result = fit_beta_gamma(scenario_loss, INITIAL_GUESS, LOWER, UPPER)
        assert result.loss == pytest.approx(scenario_loss((result.params.beta, result.params.gamma)))

    def test_initial_guess_clipped_into_bounds(self, scenario_loss):
        result = fit_beta_gamma(scenario_loss, (5.0, 0.5), LOWER, UPPER)
        assert LOWER[0] <= result.params.beta <= UPPER[0]
        assert LOWER[1] <= result.params.gamma <= UPPER[1]
