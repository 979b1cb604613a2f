"""Event synthesis: one correlated (application, access) pair per tick."""

from __future__ import annotations

import logging
import random as _random_mod
import uuid
from collections import Counter
from dataclasses import dataclass
from datetime import datetime

from logsim.contracts.enums import AttackCategory
from logsim.contracts.events import (
    ATTACK_EVENT_PREFIX,
    ERROR_STATUSES,
    HTTP_VERSION,
    SERVICE_NAME,
    SUCCESS_STATUSES,
    WARNING_STATUSES,
    AccessEvent,
    ErrorLog,
    EventPair,
    SuccessLog,
    WarningLog,
)
from logsim.contracts.timefmt import iso_ts, utc_now
from logsim.emulator.attacks import attack_path, attack_response_time, attack_status
from logsim.emulator.campaigns import CampaignSignal, CampaignStateMachine
from logsim.emulator.catalogs import ACTIONS, ERROR_CODES, WARNING_TYPES, Action
from logsim.emulator.traffic import (
    ATTACKER_AGENTS,
    BOT_AGENTS,
    BROWSER_AGENTS,
    NO_REFERER,
    _pick,
    generate_ip,
    http_method,
    referer,
)
from logsim.shared.settings import AttackSettings, GeneratorSettings, PatternSettings

log = logging.getLogger(__name__)

STACK_TRACE_PROBABILITY = 0.3

# order of the cumulative bands for non-campaign attacks
BAND_ORDER: tuple[AttackCategory, ...] = (
    AttackCategory.SQL_INJECTION,
    AttackCategory.XSS,
    AttackCategory.PATH_TRAVERSAL,
    AttackCategory.BOT_TRAFFIC,
)


@dataclass(frozen=True, slots=True)
class _Envelope:
    timestamp: str
    user_id: int
    session_id: str
    baseline_ms: int


class EventSynthesizer:
    """Produces one ``EventPair`` per ``tick()``.

    Decision order: campaign bursts (flood, then brute force), then one
    draw against the cumulative attack bands, then ordinary traffic.
    """

    def __init__(
        self,
        rng: _random_mod.Random,
        generator: GeneratorSettings | None = None,
        attacks: AttackSettings | None = None,
        patterns: PatternSettings | None = None,
        campaigns: CampaignStateMachine | None = None,
    ) -> None:
        self.rng = rng
        self.generator = generator or GeneratorSettings()
        self.attacks = attacks or AttackSettings()
        self.patterns = patterns or PatternSettings()
        self.campaigns = campaigns or CampaignStateMachine(rng)
        self.counts: Counter[str] = Counter()

    # ── public API ──────────────────────────────────────────────────────

    def tick(self, now: datetime | None = None) -> EventPair:
        if not self.attacks.enabled:
            return self.ordinary(now)

        if self.attacks.campaigns:
            sig = self.campaigns.next_signal()
            if sig is not None:
                return self.attack(sig.kind.category, now, signal=sig)

        category = self._select_category()
        if category is not None:
            return self.attack(category, now)
        return self.ordinary(now)

    def ordinary(self, now: datetime | None = None) -> EventPair:
        env = self._envelope(now)
        action: Action = _pick(self.rng, ACTIONS)
        path = f"/api/{action.name}/{self.rng.randint(1, 1000)}"
        ip = generate_ip(self.rng, self.patterns.geographic_distribution)
        agent = _pick(self.rng, BROWSER_AGENTS)
        method = http_method(self.rng)
        ref = referer(self.rng)

        er = self.generator.error_rate
        wr = self.generator.warning_rate
        r = self.rng.random()
        common = {
            "timestamp": env.timestamp,
            "user_id": env.user_id,
            "session_id": env.session_id,
            "service": SERVICE_NAME,
        }

        if r < er:
            status = _pick(self.rng, ERROR_STATUSES)
            rt = self.rng.randint(200, 2000)
            app: SuccessLog | WarningLog | ErrorLog = ErrorLog(
                **common,
                response_time_ms=rt,
                event=f"{action.name}_failed",
                status=status,
                message=action.fail_msg,
                error_code=_pick(self.rng, ERROR_CODES),
                stack_trace=self._stack_trace(action),
            )
            nbytes = self.rng.randint(100, 1000)
            label = "error"
        elif r < er + wr:
            status = _pick(self.rng, WARNING_STATUSES)
            rt = self.rng.randint(50, 800)
            app = WarningLog(
                **common,
                response_time_ms=rt,
                event=f"{action.name}_warning",
                status=status,
                message=action.warning_msg or f"Warning during {action.name}",
                warning_type=_pick(self.rng, WARNING_TYPES),
            )
            nbytes = self.rng.randint(100, 2000)
            label = "warning"
        else:
            status = _pick(self.rng, SUCCESS_STATUSES)
            rt = env.baseline_ms
            app = SuccessLog(
                **common,
                response_time_ms=rt,
                event=action.name,
                status=status,
                message=action.success_msg,
            )
            nbytes = self.rng.randint(500, 5000)
            label = "success"

        access = AccessEvent(
            ip=ip,
            timestamp=env.timestamp,
            method=method,
            path=path,
            http_version=HTTP_VERSION,
            status=status,
            bytes=nbytes,
            referer=ref,
            user_agent=agent,
            response_time_ms=rt,
            user_id=f"user{env.user_id}",
        )
        self.counts[label] += 1
        return EventPair(app, access)

    def attack(
        self,
        category: AttackCategory,
        now: datetime | None = None,
        signal: CampaignSignal | None = None,
    ) -> EventPair:
        """Build an attack pair; a campaign *signal* pins the source address."""
        env = self._envelope(now)
        status = attack_status(self.rng, category)
        rt = attack_response_time(self.rng, category)
        path = attack_path(self.rng, category)
        if signal is not None:
            ip = signal.pinned_identity
        else:
            ip = generate_ip(self.rng, self.patterns.geographic_distribution)
        agents = BOT_AGENTS if category is AttackCategory.BOT_TRAFFIC else ATTACKER_AGENTS

        app = ErrorLog(
            timestamp=env.timestamp,
            user_id=env.user_id,
            session_id=env.session_id,
            response_time_ms=rt,
            service=SERVICE_NAME,
            event=f"{ATTACK_EVENT_PREFIX}{category.value}",
            status=status,
            message=f"Security attack detected: {category.value}",
            error_code=f"ERR_SECURITY_{category.value.upper()}",
        )
        access = AccessEvent(
            ip=ip,
            timestamp=env.timestamp,
            method=http_method(self.rng, attack=True),
            path=path,
            http_version=HTTP_VERSION,
            status=status,
            bytes=self.rng.randint(50, 500),
            referer=NO_REFERER,
            user_agent=_pick(self.rng, agents),
            response_time_ms=rt,
            user_id=None,
        )
        self.counts[category.value] += 1
        if signal is not None and signal.started:
            log.debug("Campaign %s opened at %s", signal.kind.value, env.timestamp)
        return EventPair(app, access, category=category.value)

    def stats(self) -> dict[str, int]:
        return dict(self.counts)

    # ── internals ───────────────────────────────────────────────────────

    def _select_category(self) -> AttackCategory | None:
        """One uniform draw against cumulative probability bands."""
        r = self.rng.random()
        edge = 0.0
        for category in BAND_ORDER:
            edge += getattr(self.attacks, category.value)
            if r < edge:
                return category
        return None

    def _envelope(self, now: datetime | None) -> _Envelope:
        return _Envelope(
            timestamp=iso_ts(now or utc_now()),
            user_id=self.rng.randint(1, 1000),
            session_id=self._session_id(),
            baseline_ms=self.rng.randint(20, 500),
        )

    def _session_id(self) -> str:
        # uuid4 layout drawn from the seeded generator keeps batch runs reproducible
        return uuid.UUID(int=self.rng.getrandbits(128), version=4).hex[:6]

    def _stack_trace(self, action: Action) -> str | None:
        if self.rng.random() < STACK_TRACE_PROBABILITY:
            return f"Error at {action.name}Handler.process (line {self.rng.randint(10, 500)})"
        return None