"""Freebet planner backend package."""
