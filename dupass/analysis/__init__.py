"""
dupass Analysis Module
======================

Deterministic grouping of entities that share a password.
"""

from .password_groups import PasswordGroupAnalyzer, flatten_entities, group_records, filter_groups
