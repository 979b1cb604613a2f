"""Stateful attack campaigns (sustained bursts from one pinned source).

Two campaign kinds exist, flood and brute force.  Each one is either idle
or active with a number of remaining burst ticks and a pinned source
address.  ``CampaignStateMachine`` owns that state; callers only ever see
immutable ``CampaignSignal`` values and ``CampaignState`` copies.
"""

from __future__ import annotations

import logging
import random as _random_mod
import threading
from dataclasses import dataclass, replace

from logsim.contracts.enums import CampaignKind
from logsim.emulator.traffic import _randint_range, random_address
from logsim.shared.errors import InvariantViolation

log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class CampaignSpec:
    kind: CampaignKind
    start_probability: float
    length: tuple[int, int]  # inclusive [lo, hi] burst length


FLOOD = CampaignSpec(CampaignKind.FLOOD, start_probability=0.001, length=(50, 200))
BRUTE_FORCE = CampaignSpec(CampaignKind.BRUTE_FORCE, start_probability=0.005, length=(20, 50))

# evaluation order: flood pre-empts brute force
PRIORITY: tuple[CampaignKind, ...] = (CampaignKind.FLOOD, CampaignKind.BRUTE_FORCE)


@dataclass(frozen=True, slots=True)
class CampaignState:
    active: bool = False
    remaining: int = 0
    pinned_identity: str = ""

    def check(self) -> None:
        if (self.remaining > 0) != self.active:
            raise InvariantViolation(
                f"Campaign state inconsistent: active={self.active}, remaining={self.remaining}"
            )


IDLE = CampaignState()


@dataclass(frozen=True, slots=True)
class CampaignSignal:
    kind: CampaignKind
    pinned_identity: str
    started: bool  # True on the tick that opened the burst


class CampaignStateMachine:
    """Per-kind Idle/Active state with a fixed evaluation priority.

    All transitions happen under one lock, so a single instance may be
    shared between the driver and anything that inspects it (API status).
    """

    def __init__(
        self,
        rng: _random_mod.Random,
        flood: CampaignSpec = FLOOD,
        brute_force: CampaignSpec = BRUTE_FORCE,
    ) -> None:
        self.rng = rng
        self.specs: dict[CampaignKind, CampaignSpec] = {
            CampaignKind.FLOOD: flood,
            CampaignKind.BRUTE_FORCE: brute_force,
        }
        self._states: dict[CampaignKind, CampaignState] = {k: IDLE for k in PRIORITY}
        self._started: dict[CampaignKind, int] = {k: 0 for k in PRIORITY}
        self._lock = threading.Lock()

    # ── transitions ─────────────────────────────────────────────────────

    def signal(self, kind: CampaignKind) -> CampaignSignal | None:
        """Advance *kind* by one tick; return a signal if it emits this tick."""
        with self._lock:
            return self._advance(kind)

    def next_signal(self) -> CampaignSignal | None:
        """Evaluate kinds in priority order, stopping at the first signal.

        Kinds after the signalling one are not advanced on this tick.
        """
        with self._lock:
            for kind in PRIORITY:
                sig = self._advance(kind)
                if sig is not None:
                    return sig
        return None

    def _advance(self, kind: CampaignKind) -> CampaignSignal | None:
        state = self._states[kind]
        if state.active:
            remaining = state.remaining - 1
            if remaining == 0:
                # burst ends with this tick; identity is released
                self._states[kind] = IDLE
                log.info("%s campaign from %s finished", kind.value, state.pinned_identity)
            else:
                self._states[kind] = replace(state, remaining=remaining)
            self._states[kind].check()
            return CampaignSignal(kind, state.pinned_identity, started=False)

        spec = self.specs[kind]
        if self.rng.random() < spec.start_probability:
            remaining = _randint_range(self.rng, spec.length)
            identity = random_address(self.rng)
            new_state = CampaignState(active=True, remaining=remaining, pinned_identity=identity)
            new_state.check()
            self._states[kind] = new_state
            self._started[kind] += 1
            log.info(
                "%s campaign started from %s (%d follow-up ticks)",
                kind.value,
                identity,
                remaining,
            )
            return CampaignSignal(kind, identity, started=True)
        return None

    # ── inspection ──────────────────────────────────────────────────────

    def state(self, kind: CampaignKind) -> CampaignState:
        with self._lock:
            return self._states[kind]

    def started_count(self, kind: CampaignKind) -> int:
        with self._lock:
            return self._started[kind]

    def snapshot(self) -> dict[str, dict[str, object]]:
        """JSON-friendly view for status endpoints."""
        with self._lock:
            return {
                kind.value: {
                    "active": st.active,
                    "remaining": st.remaining,
                    "pinned_identity": st.pinned_identity or None,
                    "started": self._started[kind],
                }
                for kind, st in self._states.items()
            }

    def reset(self) -> None:
        with self._lock:
            self._states = {k: IDLE for k in PRIORITY}
