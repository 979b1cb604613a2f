"""Realistic traffic shape: source addresses, user agents, methods, referers.

All helpers take an explicit ``random.Random`` so a seeded run is fully
reproducible; nothing here touches the global ``random`` module.
"""

from __future__ import annotations

import random as _random_mod
from collections.abc import Callable, Sequence
from datetime import datetime
from typing import Any

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _pick(rng: _random_mod.Random, seq: Sequence[Any]) -> Any:
    return seq[rng.randint(0, len(seq) - 1)]


def _randint_range(rng: _random_mod.Random, r: Sequence[int]) -> int:
    """Return random int from a two-element [lo, hi] range (inclusive)."""
    return rng.randint(int(r[0]), int(r[1]))


def random_address(rng: _random_mod.Random) -> str:
    """Four octets, each uniform in 1..255."""
    return ".".join(str(rng.randint(1, 255)) for _ in range(4))


# ---------------------------------------------------------------------------
# Source addresses
# ---------------------------------------------------------------------------

# One builder per network block; the geo-weighted choice is uniform
# across blocks.
_NETWORK_BLOCKS: tuple[Callable[[_random_mod.Random], str], ...] = (
    lambda r: f"192.168.{r.randint(1, 255)}.{r.randint(1, 255)}",  # private
    lambda r: f"10.{r.randint(0, 255)}.{r.randint(0, 255)}.{r.randint(1, 255)}",  # private
    lambda r: f"172.{r.randint(16, 31)}.{r.randint(0, 255)}.{r.randint(1, 255)}",  # private
    lambda r: f"203.0.{r.randint(1, 255)}.{r.randint(1, 255)}",  # Asia-Pacific
    lambda r: f"185.{r.randint(1, 255)}.{r.randint(1, 255)}.{r.randint(1, 255)}",  # Europe
    lambda r: f"104.{r.randint(1, 255)}.{r.randint(1, 255)}.{r.randint(1, 255)}",  # North America
    lambda r: f"41.{r.randint(1, 255)}.{r.randint(1, 255)}.{r.randint(1, 255)}",  # Africa
)

NETWORK_PREFIXES: tuple[str, ...] = ("192.168.", "10.", "172.", "203.0.", "185.", "104.", "41.")


def generate_ip(rng: _random_mod.Random, geographic: bool = True) -> str:
    if geographic:
        return _pick(rng, _NETWORK_BLOCKS)(rng)
    return f"192.168.{rng.randint(1, 255)}.{rng.randint(1, 255)}"


# ---------------------------------------------------------------------------
# User agents
# ---------------------------------------------------------------------------

BROWSER_AGENTS: tuple[str, ...] = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64; rv:121.0) Gecko/20100101 Firefox/121.0",
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/605.1.15 (KHTML, like Gecko) Version/17.1 Safari/605.1.15",
    "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Edge/120.0.0.0",
    "Mozilla/5.0 (iPhone; CPU iPhone OS 17_1 like Mac OS X) AppleWebKit/605.1.15 (KHTML, like Gecko) Version/17.1 Mobile/15E148 Safari/604.1",
    "Mozilla/5.0 (iPad; CPU OS 17_1 like Mac OS X) AppleWebKit/605.1.15 (KHTML, like Gecko) Version/17.1 Mobile/15E148 Safari/604.1",
    "Mozilla/5.0 (Linux; Android 14) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Mobile Safari/537.36",
)

BOT_AGENTS: tuple[str, ...] = (
    "Googlebot/2.1 (+http://www.google.com/bot.html)",
    "Mozilla/5.0 (compatible; bingbot/2.0; +http://www.bing.com/bingbot.htm)",
    "Mozilla/5.0 (compatible; Yahoo! Slurp; http://help.yahoo.com/help/us/ysearch/slurp)",
    "facebookexternalhit/1.1 (+http://www.facebook.com/externalhit_uatext.php)",
    "Mozilla/5.0 (compatible; Baiduspider/2.0; +http://www.baidu.com/search/spider.html)",
    "Twitterbot/1.0",
    "LinkedInBot/1.0 (compatible; Mozilla/5.0; +http://www.linkedin.com)",
    "Slackbot-LinkExpanding 1.0 (+https://api.slack.com/robots)",
)

ATTACKER_AGENTS: tuple[str, ...] = (
    "python-requests/2.31.0",
    "curl/7.88.1",
    "Wget/1.21.3",
    "sqlmap/1.7.2",
    "Nikto/2.5.0",
    "Nmap Scripting Engine",
    "() { :; }; /bin/bash -c 'echo vulnerable'",
    "masscan/1.3",
    "Scrapy/2.11.0",
    "Mozilla/4.0 (compatible; MSIE 6.0; Windows NT 5.1)",
)


# ---------------------------------------------------------------------------
# Methods and referers
# ---------------------------------------------------------------------------

# cumulative thresholds: 70% GET, 20% POST, 5% PUT, 3% DELETE, rest PATCH
_METHOD_BANDS: tuple[tuple[float, str], ...] = (
    (0.70, "GET"),
    (0.90, "POST"),
    (0.95, "PUT"),
    (0.98, "DELETE"),
)
ATTACK_METHODS: tuple[str, ...] = ("GET", "POST", "PUT", "DELETE", "OPTIONS", "HEAD")

REFERER_DOMAINS: tuple[str, ...] = (
    "https://example.com",
    "https://www.google.com/search",
    "https://www.facebook.com",
    "https://twitter.com",
    "https://linkedin.com",
    "https://reddit.com",
)
NO_REFERER = "-"


def http_method(rng: _random_mod.Random, attack: bool = False) -> str:
    if attack:
        return _pick(rng, ATTACK_METHODS)
    r = rng.random()
    for threshold, method in _METHOD_BANDS:
        if r < threshold:
            return method
    return "PATCH"


def referer(rng: _random_mod.Random) -> str:
    """30% direct traffic, otherwise one of the external domains."""
    if rng.random() < 0.3:
        return NO_REFERER
    return _pick(rng, REFERER_DOMAINS)


# ---------------------------------------------------------------------------
# Business-hours shaping
# ---------------------------------------------------------------------------

def traffic_multiplier(now: datetime | None = None, enabled: bool = True) -> float:
    """Rate multiplier for the local hour of *now*.

    09:00–17:59 → 2.0, 23:00–06:59 → 0.3, otherwise 1.0.
    """
    if not enabled:
        return 1.0
    hour = (now or datetime.now()).hour
    if 9 <= hour <= 17:
        return 2.0
    if hour <= 6 or hour >= 23:
        return 0.3
    return 1.0
