"""Log emulator — campaign-aware synthesis of application/access events.

Modules
───────
  catalogs    — actions, error codes, warning types
  traffic     — source addresses, user agents, methods, referers, hour shaping
  attacks     — payload catalogs, attack paths and statuses
  campaigns   — flood / brute-force burst state machine
  synthesizer — one correlated EventPair per tick
  writers     — JSONL app log + Nginx access log with rotation
"""
