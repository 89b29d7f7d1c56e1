"""
Tests for the cycle / ladder state machine
Run with: pytest tests/test_cycle.py -v
"""

import pytest

from betjournal.services.cycle import (
    CycleTransitionError,
    clear_history,
    configure,
    current_profit,
    cycle_summary,
    generate_ladder,
    new_cycle,
    record_result,
    reset_cycle,
    start_cycle,
    target_multiplier,
    target_profit,
    win_rate,
)


class TestLadder:

    def test_three_step_even_money(self):
        ladder = generate_ladder(100, 3, 2.0)
        assert [s.stake for s in ladder] == [100, 200, 400]
        assert [s.target for s in ladder] == [200, 400, 800]
        assert [s.step for s in ladder] == [1, 2, 3]
        assert all(s.status == "PENDING" for s in ladder)

    def test_stake_chains_from_previous_target(self):
        ladder = generate_ladder(1_000, 4, 1.5)
        for prev, nxt in zip(ladder, ladder[1:]):
            assert nxt.stake == pytest.approx(prev.target)

    def test_new_cycle_defaults(self):
        state = new_cycle()
        assert state.cycle_status == "IDLE"
        assert state.start_capital == 100_000
        assert state.steps == 5
        assert len(state.ladder) == 5
        assert state.cycle_bankroll == 100_000


class TestTransitions:

    def test_start_clears_counters(self):
        state = start_cycle(new_cycle(100, 3, 2.0))
        assert state.cycle_status == "ACTIVE"
        assert state.current_step == 1
        assert state.cycle_bankroll == 100
        assert state.wins == 0 and state.losses == 0

    def test_loss_at_step_two(self):
        state = start_cycle(new_cycle(100, 3, 2.0))
        state = record_result(state, "WIN")
        assert state.cycle_bankroll == 200
        assert state.current_step == 2

        state = record_result(state, "LOSS")
        assert state.cycle_status == "FAILED"
        assert state.cycle_bankroll == 0
        assert [s.status for s in state.ladder] == ["WIN", "LOSS", "PENDING"]
        assert len(state.history) == 1
        entry = state.history[0]
        assert entry.status == "FAILED"
        assert entry.steps_completed == 1
        assert entry.total_steps == 3
        assert entry.profit == pytest.approx(-100)
        assert entry.end_bankroll == 0

    def test_full_run_completes(self):
        state = start_cycle(new_cycle(100, 3, 2.0))
        for _ in range(3):
            state = record_result(state, "WIN")
        assert state.cycle_status == "COMPLETED"
        assert state.cycle_bankroll == pytest.approx(800)
        assert state.wins == 3
        entry = state.history[-1]
        assert entry.status == "COMPLETED"
        assert entry.profit == pytest.approx(700)
        assert entry.steps_completed == 3

    def test_transitions_do_not_mutate_input(self):
        idle = new_cycle(100, 3, 2.0)
        active = start_cycle(idle)
        record_result(active, "LOSS")
        assert idle.cycle_status == "IDLE"
        assert active.cycle_status == "ACTIVE"
        assert active.ladder[0].status == "PENDING"
        assert active.history == []

    def test_record_requires_active(self):
        with pytest.raises(CycleTransitionError):
            record_result(new_cycle(), "WIN")

    def test_record_after_terminal_rejected(self):
        state = record_result(start_cycle(new_cycle(100, 2, 2.0)), "LOSS")
        with pytest.raises(CycleTransitionError):
            record_result(state, "WIN")

    def test_start_twice_rejected(self):
        with pytest.raises(CycleTransitionError):
            start_cycle(start_cycle(new_cycle()))

    def test_configure_only_when_idle(self):
        with pytest.raises(CycleTransitionError):
            configure(start_cycle(new_cycle()), 500, 4, 1.8)

    def test_transition_error_is_value_error(self):
        assert issubclass(CycleTransitionError, ValueError)

    def test_invalid_result_rejected(self):
        with pytest.raises(ValueError):
            record_result(start_cycle(new_cycle()), "PUSH")

    def test_configure_regenerates_ladder_and_keeps_history(self):
        state = reset_cycle(record_result(start_cycle(new_cycle(100, 2, 2.0)), "LOSS"))
        state = configure(state, 50, 4, 3.0)
        assert [s.stake for s in state.ladder] == [50, 150, 450, 1350]
        assert state.cycle_bankroll == 50
        assert len(state.history) == 1

    def test_reset_keeps_history(self):
        state = record_result(start_cycle(new_cycle(100, 2, 2.0)), "LOSS")
        state = reset_cycle(state)
        assert state.cycle_status == "IDLE"
        assert state.cycle_bankroll == 100
        assert all(s.status == "PENDING" for s in state.ladder)
        assert len(state.history) == 1

    def test_history_is_chronological(self):
        state = record_result(start_cycle(new_cycle(100, 1, 2.0)), "WIN")
        state = record_result(start_cycle(reset_cycle(state)), "LOSS")
        assert [h.status for h in state.history] == ["COMPLETED", "FAILED"]

    def test_clear_history(self):
        state = record_result(start_cycle(new_cycle(100, 1, 2.0)), "WIN")
        assert clear_history(state).history == []


class TestDerivedMetrics:

    def test_targets(self):
        state = new_cycle(100, 3, 2.0)
        assert target_multiplier(state) == pytest.approx(8.0)
        assert target_profit(state) == pytest.approx(700.0)
        assert current_profit(state) == 0

    def test_win_rate(self):
        state = start_cycle(new_cycle(100, 3, 2.0))
        assert win_rate(state) == 0.0
        state = record_result(record_result(state, "WIN"), "LOSS")
        assert win_rate(state) == pytest.approx(50.0)

    def test_summary_counts(self):
        state = record_result(start_cycle(new_cycle(100, 1, 2.0)), "WIN")
        summary = cycle_summary(state)
        assert summary["completed_cycles"] == 1
        assert summary["failed_cycles"] == 0
        assert summary["current_profit"] == pytest.approx(100.0)
