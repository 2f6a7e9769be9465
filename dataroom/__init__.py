"""Investor data room: API clients, session gating, flows, admin console and demo backend."""

__version__ = "1.0.0"
