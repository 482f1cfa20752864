"""Utility helpers for issuetrack."""
