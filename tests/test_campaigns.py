"""Tests for logsim.emulator.campaigns — CampaignStateMachine transitions."""

from __future__ import annotations

import random

import pytest

from logsim.contracts.enums import CampaignKind
from logsim.emulator.campaigns import (
    BRUTE_FORCE,
    FLOOD,
    IDLE,
    CampaignSpec,
    CampaignState,
    CampaignStateMachine,
)
from logsim.shared.errors import InvariantViolation

NEVER_FLOOD = CampaignSpec(CampaignKind.FLOOD, start_probability=0.0, length=(50, 200))
NEVER_BRUTE = CampaignSpec(CampaignKind.BRUTE_FORCE, start_probability=0.0, length=(20, 50))


def _octets(address: str) -> list[int]:
    return [int(part) for part in address.split(".")]


# ═══════════════════════════════════════════════════════════════════════════
#  CampaignState
# ═══════════════════════════════════════════════════════════════════════════


class TestCampaignState:
    def test_idle_is_consistent(self):
        IDLE.check()
        assert not IDLE.active
        assert IDLE.pinned_identity == ""

    @pytest.mark.parametrize(
        "state",
        [
            CampaignState(active=True, remaining=0, pinned_identity="1.2.3.4"),
            CampaignState(active=False, remaining=3),
        ],
    )
    def test_inconsistent_state_rejected(self, state):
        with pytest.raises(InvariantViolation):
            state.check()

    def test_module_defaults(self):
        assert FLOOD.start_probability == 0.001
        assert FLOOD.length == (50, 200)
        assert BRUTE_FORCE.start_probability == 0.005
        assert BRUTE_FORCE.length == (20, 50)


# ═══════════════════════════════════════════════════════════════════════════
#  Transitions
# ═══════════════════════════════════════════════════════════════════════════


class TestTransitions:
    def test_idle_without_start_emits_nothing(self):
        sm = CampaignStateMachine(random.Random(1), flood=NEVER_FLOOD, brute_force=NEVER_BRUTE)
        for _ in range(100):
            assert sm.next_signal() is None
        assert sm.state(CampaignKind.FLOOD) == IDLE

    def test_forced_start(self):
        flood = CampaignSpec(CampaignKind.FLOOD, start_probability=1.0, length=(5, 5))
        sm = CampaignStateMachine(random.Random(7), flood=flood)
        sig = sm.signal(CampaignKind.FLOOD)
        assert sig is not None
        assert sig.started
        st = sm.state(CampaignKind.FLOOD)
        assert st.active
        assert st.remaining == 5
        assert st.pinned_identity == sig.pinned_identity
        octets = _octets(sig.pinned_identity)
        assert len(octets) == 4
        assert all(1 <= o <= 255 for o in octets)

    def test_burst_lasts_one_plus_remaining_ticks(self):
        flood = CampaignSpec(CampaignKind.FLOOD, start_probability=1.0, length=(3, 3))
        sm = CampaignStateMachine(random.Random(7), flood=flood, brute_force=NEVER_BRUTE)
        first = sm.next_signal()
        follow = [sm.next_signal() for _ in range(3)]
        assert all(s is not None and not s.started for s in follow)
        assert {s.pinned_identity for s in follow} == {first.pinned_identity}
        # the last follow-up tick already returned to idle
        assert sm.state(CampaignKind.FLOOD) == IDLE

    def test_identity_released_and_redrawn(self):
        flood = CampaignSpec(CampaignKind.FLOOD, start_probability=1.0, length=(1, 1))
        sm = CampaignStateMachine(random.Random(3), flood=flood)
        identities = set()
        for _ in range(10):
            start = sm.signal(CampaignKind.FLOOD)
            assert start.started
            identities.add(start.pinned_identity)
            tail = sm.signal(CampaignKind.FLOOD)
            assert not tail.started
            assert sm.state(CampaignKind.FLOOD).pinned_identity == ""
        assert sm.started_count(CampaignKind.FLOOD) == 10
        assert len(identities) > 1

    def test_remaining_within_range(self):
        sm = CampaignStateMachine(
            random.Random(11),
            brute_force=CampaignSpec(CampaignKind.BRUTE_FORCE, 1.0, BRUTE_FORCE.length),
        )
        for _ in range(50):
            sm.reset()
            sm.signal(CampaignKind.BRUTE_FORCE)
            assert 20 <= sm.state(CampaignKind.BRUTE_FORCE).remaining <= 50


class TestPriority:
    def test_flood_preempts_brute_force(self):
        sm = CampaignStateMachine(
            random.Random(5),
            flood=CampaignSpec(CampaignKind.FLOOD, 1.0, (4, 4)),
            brute_force=CampaignSpec(CampaignKind.BRUTE_FORCE, 1.0, (4, 4)),
        )
        kinds = [sm.next_signal().kind for _ in range(5)]
        assert kinds == [CampaignKind.FLOOD] * 5
        # brute force was never evaluated while the flood signalled
        assert sm.state(CampaignKind.BRUTE_FORCE) == IDLE
        assert sm.next_signal().kind is CampaignKind.FLOOD  # a new flood starts at p=1

    def test_brute_force_when_flood_silent(self):
        sm = CampaignStateMachine(
            random.Random(5),
            flood=NEVER_FLOOD,
            brute_force=CampaignSpec(CampaignKind.BRUTE_FORCE, 1.0, (2, 2)),
        )
        sig = sm.next_signal()
        assert sig.kind is CampaignKind.BRUTE_FORCE
        assert sig.started


class TestInspection:
    def test_state_is_a_copy(self):
        sm = CampaignStateMachine(random.Random(1), flood=CampaignSpec(CampaignKind.FLOOD, 1.0, (9, 9)))
        sm.signal(CampaignKind.FLOOD)
        before = sm.state(CampaignKind.FLOOD)
        sm.signal(CampaignKind.FLOOD)
        assert before.remaining == 9
        assert sm.state(CampaignKind.FLOOD).remaining == 8

    def test_snapshot(self):
        sm = CampaignStateMachine(random.Random(1), flood=CampaignSpec(CampaignKind.FLOOD, 1.0, (9, 9)))
        sm.signal(CampaignKind.FLOOD)
        snap = sm.snapshot()
        assert snap["flood"]["active"] is True
        assert snap["flood"]["started"] == 1
        assert snap["brute_force"]["pinned_identity"] is None

    def test_reset(self):
        sm = CampaignStateMachine(random.Random(1), flood=CampaignSpec(CampaignKind.FLOOD, 1.0, (9, 9)))
        sm.signal(CampaignKind.FLOOD)
        sm.reset()
        assert sm.state(CampaignKind.FLOOD) == IDLE
