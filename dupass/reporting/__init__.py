"""
dupass Reporting Module
=======================

Report generation for analysis results.

Components:
- report_builder.py: Builds AnalysisResult, writes JSON, renders text
"""

from .report_builder import ReportBuilder, generate_text_report
