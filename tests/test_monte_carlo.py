"""
Tests for the Monte Carlo bankroll simulator
Run with: pytest tests/test_monte_carlo.py -v
"""

import pytest
import numpy as np

from betjournal.services.monte_carlo import MonteCarloResult, MonteCarloSimulator, SimulationParams


class TestSimulationBasics:
    """Shape and bookkeeping of a run"""

    def test_run_shapes(self):
        result = MonteCarloSimulator().run(SimulationParams(num_bets=95, num_runs=30), seed=42)
        assert result.num_runs == 30
        assert result.final_bankrolls.shape == (30,)
        # 0, 10, ..., 90 plus the final bet
        assert result.sample_steps.tolist() == [0, 10, 20, 30, 40, 50, 60, 70, 80, 90, 95]
        assert result.trajectories.shape == (30, 11)
        assert np.all(result.trajectories[:, 0] == 10_000)

    def test_last_sample_is_final_bankroll(self):
        result = MonteCarloSimulator().run(SimulationParams(num_bets=100, num_runs=10), seed=1)
        assert result.sample_steps[-1] == 100
        assert np.allclose(result.trajectories[:, -1], result.final_bankrolls)

    def test_seed_is_reproducible(self):
        params = SimulationParams(num_bets=200, num_runs=25)
        a = MonteCarloSimulator().run(params, seed=7)
        b = MonteCarloSimulator().run(params, seed=7)
        assert np.array_equal(a.final_bankrolls, b.final_bankrolls)

    def test_injected_generator(self):
        params = SimulationParams(num_bets=50, num_runs=5)
        a = MonteCarloSimulator().run(params, rng=np.random.default_rng(3))
        b = MonteCarloSimulator().run(params, seed=3)
        assert np.array_equal(a.final_bankrolls, b.final_bankrolls)

    def test_custom_sampling_interval(self):
        result = MonteCarloSimulator(sample_every=25).run(SimulationParams(num_bets=100, num_runs=2), seed=0)
        assert result.sample_steps.tolist() == [0, 25, 50, 75, 100]

    def test_invalid_sampling_interval(self):
        with pytest.raises(ValueError):
            MonteCarloSimulator(sample_every=0)


class TestDegenerateProbabilities:

    def test_certain_win(self):
        result = MonteCarloSimulator().run(SimulationParams(win_prob=1.0, num_bets=100, num_runs=20), seed=42)
        assert np.all(result.final_bankrolls > 10_000)
        assert result.profit_probability == 100.0
        assert result.ruin_probability == 0.0

    def test_certain_loss(self):
        result = MonteCarloSimulator().run(SimulationParams(win_prob=0.0, num_bets=100, num_runs=20), seed=42)
        assert np.all(result.final_bankrolls <= 10_000)
        assert result.profit_probability == 0.0

    def test_all_in_loss_is_ruin(self):
        params = SimulationParams(win_prob=0.0, stake_fraction=1.0, num_bets=10, num_runs=5)
        result = MonteCarloSimulator().run(params, seed=0)
        assert np.all(result.final_bankrolls == 0.0)
        assert result.ruin_probability == 100.0

    def test_bankroll_never_negative(self):
        params = SimulationParams(win_prob=0.3, stake_fraction=1.5, num_bets=20, num_runs=50)
        result = MonteCarloSimulator().run(params, seed=5)
        assert np.all(result.trajectories >= 0.0)

    def test_ruin_threshold_counts_near_zero_finish(self):
        # 10 straight losses at 90% stake: 10_000 × 0.1¹⁰ ≈ 1e-6
        params = SimulationParams(win_prob=0.0, stake_fraction=0.9, num_bets=10, num_runs=3)
        result = MonteCarloSimulator(ruin_threshold=1.0).run(params, seed=0)
        assert np.all(result.final_bankrolls > 0.0)
        assert result.ruin_probability == 100.0


class TestSummaryStats:

    def _result(self, finals, start=100.0):
        finals = np.array(finals, dtype=float)
        return MonteCarloResult(
            params=SimulationParams(bankroll=start, num_runs=len(finals)),
            final_bankrolls=finals,
            ruined=finals <= 1.0,
            sample_steps=np.array([0]),
            trajectories=finals.reshape(-1, 1),
        )

    def test_lower_median_even_count(self):
        # sorted [10, 20, 30, 40] → index (4 − 1) // 2 = 1
        assert self._result([40, 10, 30, 20]).median_ending == 20.0

    def test_median_odd_count(self):
        assert self._result([5, 1, 3]).median_ending == 3.0

    def test_probabilities(self):
        result = self._result([150, 50, 0.5, 100])
        assert result.profit_probability == pytest.approx(25.0)
        assert result.ruin_probability == pytest.approx(25.0)

    def test_empty(self):
        result = MonteCarloSimulator().run(SimulationParams(num_runs=0, num_bets=10), seed=0)
        assert result.median_ending == 0.0
        assert result.profit_probability == 0.0

    def test_chart_series_caps_runs(self):
        result = MonteCarloSimulator().run(SimulationParams(num_bets=20, num_runs=30), seed=9)
        rows = result.chart_series(max_runs=20)
        assert len(rows) == 3
        assert rows[0]["step"] == 0
        assert set(rows[0]) == {"step"} | {f"run{i}" for i in range(20)}

    def test_to_dict_keys(self):
        d = MonteCarloSimulator().run(SimulationParams(num_bets=10, num_runs=5), seed=2).to_dict()
        assert {"profit_probability", "ruin_probability", "median_ending"} <= set(d)
