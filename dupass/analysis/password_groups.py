"""
Password Group Analysis
=======================

Turns the fetched entities into clusters of accounts that share a password.

Steps:
1. Flatten: one FlatRecord per duplicate-password risk factor that carries
   a group ID. An entity in two password groups yields two records
2. Group: partition records by group ID, keeping first-seen group order and
   the original record order inside each group
3. Filter: keep only groups with more than one member

Design Decisions:
-----------------
1. Records are produced per risk factor instance, not per entity, so the
   same entity can be reported in several groups
2. Missing optional data (no accounts, no timestamps) never raises;
   it only leaves password_last_set empty
3. Grouping is done with pandas so the same frame can feed the tabular report
"""

from datetime import datetime
from typing import Optional

import pandas as pd

from ..model.schemas import Entity, FlatRecord, PasswordGroup


REPORT_COLUMNS = {
    "primary_display_name": "primaryDisplayName",
    "secondary_display_name": "secondaryDisplayName",
    "is_admin": "isAdmin",
    "archived": "archived",
    "password_last_set": "passwordLastSet",
    "entity_type": "entityType",
    "risk_score": "riskScore",
}


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    """Parse an ISO-8601 timestamp from the API.

    Returns None for empty or unparseable values.
    """
    if not value:
        return None
    text = str(value).strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        return None


def resolve_password_last_set(accounts: list) -> Optional[datetime]:
    """Return the first non-null password change time across accounts.

    Accounts are scanned in order and the scan stops at the first account
    that reports a value.
    """
    for account in accounts or []:
        if account.last_change is not None:
            return parse_timestamp(account.last_change)
    return None


def flatten_entity(entity: Entity) -> list[FlatRecord]:
    """Build the FlatRecords for a single entity."""
    factors = [f for f in entity.duplicate_password_factors if f.has_group]
    if not factors:
        return []

    password_last_set = resolve_password_last_set(entity.accounts)
    return [
        FlatRecord(
            group_id=factor.group_id,
            primary_display_name=entity.primary_display_name,
            secondary_display_name=entity.secondary_display_name,
            is_admin=entity.is_admin,
            archived=entity.archived,
            password_last_set=password_last_set,
            risk_score=entity.risk_score,
            entity_type=entity.type,
        )
        for factor in factors
    ]


def flatten_entities(entities: list[Entity]) -> list[FlatRecord]:
    """Flatten entities in order, then risk factors in order."""
    records = []
    for entity in entities:
        records.extend(flatten_entity(entity))
    return records


def group_records(records: list[FlatRecord]) -> list[PasswordGroup]:
    """Partition records by group ID.

    Groups come out in the order their key is first seen; members keep
    their relative order.
    """
    if not records:
        return []

    frame = pd.DataFrame({"group_id": [r.group_id for r in records]})
    groups = []
    for group_id, rows in frame.groupby("group_id", sort=False):
        groups.append(PasswordGroup(
            group_id=group_id,
            members=[records[i] for i in rows.index]
        ))
    return groups


def filter_groups(groups: list[PasswordGroup], min_members: int = 2) -> list[PasswordGroup]:
    """Drop groups with fewer than `min_members` members."""
    return [g for g in groups if g.size >= min_members]


def records_to_dataframe(records: list[FlatRecord]) -> pd.DataFrame:
    """Tabular projection of records using the API's field names."""
    rows = []
    for record in records:
        rows.append({
            "primary_display_name": record.primary_display_name,
            "secondary_display_name": record.secondary_display_name,
            "is_admin": record.is_admin,
            "archived": record.archived,
            "password_last_set": record.password_last_set,
            "entity_type": record.entity_type.value,
            "risk_score": record.risk_score,
        })
    frame = pd.DataFrame(rows, columns=list(REPORT_COLUMNS))
    return frame.rename(columns=REPORT_COLUMNS)


class PasswordGroupAnalyzer:
    """Finds groups of entities sharing a password.

    Usage:
        analyzer = PasswordGroupAnalyzer()
        groups, grouped_count = analyzer.analyze(entities)
    """

    def __init__(self, min_members: int = 2):
        self.min_members = min_members

    def analyze(self, entities: list[Entity]) -> tuple[list[PasswordGroup], int]:
        """Flatten, group and filter.

        Returns:
            The reportable groups and their count
        """
        records = flatten_entities(entities)
        groups = filter_groups(group_records(records), self.min_members)
        return groups, len(groups)
