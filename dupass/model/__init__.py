"""
dupass Model Module
===================

Core data models for identity risk entities and analysis output.

Key Components:
- schemas.py: Typed dataclasses for entities, risk factors, pages and groups
"""

from .schemas import (
    RiskFactorType,
    RiskSeverity,
    EntityType,
    Account,
    RiskFactor,
    DuplicatePasswordRiskFactor,
    AttackPathRiskFactor,
    OpaqueRiskFactor,
    Entity,
    PageInfo,
    EntityPage,
    FetchResult,
    FlatRecord,
    PasswordGroup,
    AnalysisResult
)
