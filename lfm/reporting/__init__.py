"""Batch match reporting."""

from .aggregator import MatchReport, ReportAggregator

__all__ = ["MatchReport", "ReportAggregator"]
