"""Requisite matching strategies."""

from docprep.strategies.requisites.matcher import MatchResult, RequisiteMatcher

__all__ = [
    "MatchResult",
    "RequisiteMatcher",
]
