"""
Monte Carlo bankroll projection.

Each run is a random walk of ``num_bets`` wagers under a fixed policy: stake
a constant fraction of the *current* bankroll at fixed decimal odds and win
with a fixed probability.  Runs are simulated side by side as one numpy
vector, one bet per iteration.

Per bet, for every run still solvent::

    stake     = bankroll × stake_fraction
    won       ~ Bernoulli(win_prob)
    bankroll += stake × (odds − 1)   if won
    bankroll −= stake                otherwise   (floored at 0)

A run that touches zero stays at zero.  A run is counted as ruined if it
ever hit zero or ends at or below ``ruin_threshold``.

Usage::

    sim = MonteCarloSimulator()
    result = sim.run(SimulationParams(), seed=42)
    print(result.profit_probability, result.median_ending)
"""

import logging
import os
from dataclasses import dataclass
from typing import Dict, List, Optional

import numpy as np
from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)

DEFAULT_RUIN_THRESHOLD = float(os.getenv("MC_RUIN_THRESHOLD", "1.0"))
DEFAULT_SAMPLE_EVERY = int(os.getenv("MC_SAMPLE_EVERY", "10"))


@dataclass
class SimulationParams:
    bankroll: float = 10_000.0
    win_prob: float = 0.55
    avg_odds: float = 1.95
    stake_fraction: float = 0.02
    num_bets: int = 500
    num_runs: int = 50


@dataclass
class MonteCarloResult:
    """Outcome of :meth:`MonteCarloSimulator.run`."""

    params: SimulationParams
    final_bankrolls: np.ndarray          # shape (num_runs,)
    ruined: np.ndarray                   # bool, shape (num_runs,)
    sample_steps: np.ndarray             # bet indices kept in ``trajectories``
    trajectories: np.ndarray             # shape (num_runs, len(sample_steps))
    ruin_threshold: float = DEFAULT_RUIN_THRESHOLD

    @property
    def num_runs(self) -> int:
        return len(self.final_bankrolls)

    @property
    def profit_probability(self) -> float:
        """Percent of runs that end above the starting bankroll."""
        if self.num_runs == 0:
            return 0.0
        return float(np.mean(self.final_bankrolls > self.params.bankroll) * 100.0)

    @property
    def ruin_probability(self) -> float:
        if self.num_runs == 0:
            return 0.0
        return float(np.mean(self.ruined) * 100.0)

    @property
    def median_ending(self) -> float:
        """Lower median: element ``(M − 1) // 2`` of the sorted finals."""
        if self.num_runs == 0:
            return 0.0
        ordered = np.sort(self.final_bankrolls)
        return float(ordered[(self.num_runs - 1) // 2])

    @property
    def mean_ending(self) -> float:
        return float(np.mean(self.final_bankrolls)) if self.num_runs else 0.0

    def percentile_ending(self, pct: float) -> float:
        if self.num_runs == 0:
            return 0.0
        return float(np.percentile(self.final_bankrolls, pct))

    def chart_series(self, max_runs: int = 20) -> List[Dict]:
        """
        Rows of ``{"step": i, "run0": v, "run1": v, ...}`` for the first
        ``max_runs`` runs, one row per sampled step.
        """
        shown = min(max_runs, self.num_runs)
        rows = []
        for col, step in enumerate(self.sample_steps):
            row = {"step": int(step)}
            for j in range(shown):
                row[f"run{j}"] = round(float(self.trajectories[j, col]), 2)
            rows.append(row)
        return rows

    def to_dict(self) -> Dict:
        return {
            "num_runs": self.num_runs,
            "num_bets": self.params.num_bets,
            "profit_probability": round(self.profit_probability, 2),
            "ruin_probability": round(self.ruin_probability, 2),
            "median_ending": round(self.median_ending, 2),
            "mean_ending": round(self.mean_ending, 2),
            "p5_ending": round(self.percentile_ending(5), 2),
            "p95_ending": round(self.percentile_ending(95), 2),
        }


class MonteCarloSimulator:
    """
    Vectorised bankroll simulator.

    Attributes:
        ruin_threshold: Final bankroll at or below this counts as ruin.
        sample_every: Keep every N-th bet of each trajectory (plus the last).
    """

    def __init__(
        self,
        ruin_threshold: float = DEFAULT_RUIN_THRESHOLD,
        sample_every: int = DEFAULT_SAMPLE_EVERY,
    ):
        if sample_every < 1:
            raise ValueError("sample_every must be >= 1")
        self.ruin_threshold = ruin_threshold
        self.sample_every = sample_every

    def _sample_steps(self, num_bets: int) -> np.ndarray:
        steps = list(range(0, num_bets + 1, self.sample_every))
        if steps[-1] != num_bets:
            steps.append(num_bets)
        return np.array(steps, dtype=int)

    def run(
        self,
        params: SimulationParams,
        rng: Optional[np.random.Generator] = None,
        seed: Optional[int] = None,
    ) -> MonteCarloResult:
        """
        Simulate ``params.num_runs`` independent trajectories.

        Args:
            params: Betting policy and run sizes.
            rng: Random source.  Takes precedence over ``seed``.
            seed: Seed for a fresh ``np.random.default_rng`` when ``rng`` is
                not given.
        """
        if rng is None:
            rng = np.random.default_rng(seed)

        m = max(0, int(params.num_runs))
        n = max(0, int(params.num_bets))
        sample_steps = self._sample_steps(n)
        keep = set(sample_steps.tolist())

        bankroll = np.full(m, float(params.bankroll))
        ever_ruined = bankroll <= 0.0
        trajectories = np.empty((m, len(sample_steps)))
        trajectories[:, 0] = bankroll
        col = 1

        for i in range(1, n + 1):
            stake = bankroll * params.stake_fraction
            won = rng.random(m) < params.win_prob
            bankroll = np.where(won, bankroll + stake * (params.avg_odds - 1.0), bankroll - stake)
            bankroll = np.maximum(bankroll, 0.0)
            ever_ruined |= bankroll <= 0.0
            if i in keep:
                trajectories[:, col] = bankroll
                col += 1

        ruined = ever_ruined | (bankroll <= self.ruin_threshold)

        result = MonteCarloResult(
            params=params,
            final_bankrolls=bankroll,
            ruined=ruined,
            sample_steps=sample_steps,
            trajectories=trajectories,
            ruin_threshold=self.ruin_threshold,
        )
        logger.info(
            "Monte Carlo: %d runs × %d bets, profit %.1f%%, ruin %.1f%%",
            m, n, result.profit_probability, result.ruin_probability,
        )
        return result
