"""
Analysis module - summary, sentiment, tags and highlights for a transcript.
"""

from .analyzer import AnalysisService, analysis_from_dict, fallback_analysis, parse_analysis

__all__ = ["AnalysisService", "analysis_from_dict", "fallback_analysis", "parse_analysis"]
