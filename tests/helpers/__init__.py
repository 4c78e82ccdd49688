"""Shared test helpers for Agent Pro."""
