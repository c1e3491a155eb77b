"""Deterministic Carbon compliance scoring: models, rule tables, engine."""
