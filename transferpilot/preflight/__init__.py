"""Preflight analysis of picked items before a transfer."""

from .analyzer import PreflightReport, preflight

__all__ = ["PreflightReport", "preflight"]
