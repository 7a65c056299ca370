"""Deterministic scholarship matching, prioritization and at-risk scoring."""
