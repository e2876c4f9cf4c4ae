"""
dupass - Duplicate Password Analysis for Identity Risk Data
===========================================================

Pulls identity risk data from a cursor-paginated GraphQL API, finds the
accounts that share passwords, and reports them grouped by password.

Architecture Overview:
----------------------
- ingestion/: Authentication, GraphQL transport and the pagination engine
- model/: Typed data models for entities, risk factors and results
- analysis/: Flattening and grouping of duplicate-password risk factors
- reporting/: Console and JSON report generation
- pipeline.py: Single-run orchestration (authenticate, fetch, group, report)

Design Decisions:
-----------------
1. A run is one sequential batch; nothing is persisted between runs
2. All data models use Python dataclasses
3. A failed page ends retrieval but keeps what was fetched, flagged partial
4. pandas backs the grouping step and the tabular report
"""

__version__ = "1.0.0"

from .config import DupassConfig
