"""Opponent targeting policies."""
