"""Flattening, grouping and filtering of duplicate-password risk factors."""

from datetime import datetime, timezone

from dupass.analysis.password_groups import (
    PasswordGroupAnalyzer,
    filter_groups,
    flatten_entities,
    group_records,
    parse_timestamp,
    records_to_dataframe,
    resolve_password_last_set,
)
from dupass.model.schemas import Account, Entity, EntityType, FlatRecord

from tests.factories import make_node


def _entity(entity_id, group_ids=(), **kwargs) -> Entity:
    return Entity.from_dict(make_node(entity_id, entity_id.upper(), group_ids=group_ids, **kwargs))


def test_first_non_null_password_change_wins():
    accounts = [Account(None), Account("2023-01-01"), Account("2022-01-01")]
    assert resolve_password_last_set(accounts) == datetime(2023, 1, 1)


def test_password_change_absent():
    assert resolve_password_last_set([]) is None
    assert resolve_password_last_set([Account(None), Account(None)]) is None


def test_parse_timestamp_accepts_zulu():
    assert parse_timestamp("2024-03-05T10:20:30Z") == datetime(2024, 3, 5, 10, 20, 30, tzinfo=timezone.utc)
    assert parse_timestamp("not a date") is None
    assert parse_timestamp("") is None


def test_one_record_per_duplicate_password_factor():
    entity = _entity("a", group_ids=["G1", "G2"], last_changes=["2023-05-01T00:00:00Z"],
                     is_admin=True, risk_score=0.9)

    records = flatten_entities([entity])

    assert [r.group_id for r in records] == ["G1", "G2"]
    for record in records:
        assert record.primary_display_name == "A"
        assert record.secondary_display_name == "CORP\\a"
        assert record.is_admin
        assert not record.archived
        assert record.risk_score == 0.9
        assert record.entity_type == EntityType.USER
        assert record.password_last_set == datetime(2023, 5, 1, tzinfo=timezone.utc)


def test_factors_without_group_are_skipped():
    node = make_node("a", "A", group_ids=["G1", None, ""])
    node["riskFactors"].append({"type": "DUPLICATE_PASSWORD", "score": 0.1, "severity": "LOW_RISK"})

    records = flatten_entities([Entity.from_dict(node)])

    assert [r.group_id for r in records] == ["G1"]


def test_other_risk_factors_contribute_nothing():
    node = make_node("a", "A", extra_factors=[
        {"type": "ATTACK_PATH", "score": 0.4, "severity": "HIGH_RISK", "attackPath": []},
        {"type": "STALE_ACCOUNT", "score": 0.1, "severity": "LOW_RISK"},
    ])
    assert flatten_entities([Entity.from_dict(node)]) == []


def test_entity_without_accounts_still_grouped():
    entities = [_entity("a", group_ids=["G1"]), _entity("b", group_ids=["G1"])]

    groups, grouped_count = PasswordGroupAnalyzer().analyze(entities)

    assert grouped_count == 1
    assert all(m.password_last_set is None for m in groups[0].members)


def test_grouping_keeps_first_seen_order_and_member_order():
    records = [FlatRecord(group_id=g, primary_display_name=n)
               for g, n in [("G2", "a"), ("G1", "b"), ("G2", "c"), ("G3", "d"), ("G1", "e")]]

    groups = group_records(records)

    assert [g.group_id for g in groups] == ["G2", "G1", "G3"]
    assert [m.primary_display_name for m in groups[0].members] == ["a", "c"]
    assert [m.primary_display_name for m in groups[1].members] == ["b", "e"]
    assert sum(g.size for g in groups) == len(records)


def test_group_records_empty():
    assert group_records([]) == []


def test_filter_drops_singletons():
    groups = group_records([FlatRecord(group_id="G1"), FlatRecord(group_id="G1"),
                            FlatRecord(group_id="G2")])

    kept = filter_groups(groups)

    assert [g.group_id for g in kept] == ["G1"]


def test_end_to_end_grouping():
    entities = [
        _entity("a", group_ids=["G1"]),
        _entity("b", group_ids=["G1"]),
        _entity("c", group_ids=["G2"]),
    ]

    groups, grouped_count = PasswordGroupAnalyzer().analyze(entities)

    assert grouped_count == 1
    assert groups[0].group_id == "G1"
    assert [m.primary_display_name for m in groups[0].members] == ["A", "B"]


def test_entity_fans_out_into_several_groups():
    entities = [
        _entity("a", group_ids=["G1", "G2"]),
        _entity("b", group_ids=["G1"]),
        _entity("c", group_ids=["G2"]),
    ]

    groups, grouped_count = PasswordGroupAnalyzer().analyze(entities)

    assert grouped_count == 2
    assert [[m.primary_display_name for m in g.members] for g in groups] == [["A", "B"], ["A", "C"]]


def test_records_to_dataframe_uses_api_column_names():
    frame = records_to_dataframe([FlatRecord(group_id="G1", primary_display_name="A",
                                             entity_type=EntityType.USER, risk_score=0.7)])

    assert list(frame.columns) == [
        "primaryDisplayName", "secondaryDisplayName", "isAdmin", "archived",
        "passwordLastSet", "entityType", "riskScore",
    ]
    assert frame.loc[0, "entityType"] == "USER"
    assert frame.loc[0, "riskScore"] == 0.7
