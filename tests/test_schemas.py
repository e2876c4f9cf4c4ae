"""Parsing of raw API payloads into the dataclass model."""

import pytest

from dupass.model.schemas import (
    AttackPathRiskFactor,
    DuplicatePasswordRiskFactor,
    Entity,
    EntityPage,
    EntityType,
    OpaqueRiskFactor,
    RiskFactor,
    RiskFactorType,
    RiskSeverity,
)

from tests.factories import make_node, make_response


def test_duplicate_password_variant():
    factor = RiskFactor.from_dict(
        {"type": "DUPLICATE_PASSWORD", "score": 0.25, "severity": "MEDIUM_RISK", "groupId": "G9"}
    )

    assert isinstance(factor, DuplicatePasswordRiskFactor)
    assert factor.group_id == "G9"
    assert factor.has_group
    assert factor.score == 0.25
    assert factor.severity == RiskSeverity.MEDIUM


def test_attack_path_variant():
    factor = RiskFactor.from_dict({
        "type": "ATTACK_PATH",
        "score": 0.5,
        "severity": "HIGH_RISK",
        "attackPath": [{"relation": "MEMBER_OF"}],
    })

    assert isinstance(factor, AttackPathRiskFactor)
    assert factor.attack_path == [{"relation": "MEMBER_OF"}]


@pytest.mark.parametrize("attack_path", [None, "oops"])
def test_attack_path_variant_chosen_by_type(attack_path):
    payload = {"type": "ATTACK_PATH", "score": 0.5, "severity": "HIGH_RISK"}
    if attack_path is not None:
        payload["attackPath"] = attack_path

    factor = RiskFactor.from_dict(payload)

    assert isinstance(factor, AttackPathRiskFactor)
    assert factor.attack_path == []


def test_attack_path_key_on_other_type_is_ignored():
    factor = RiskFactor.from_dict({"type": "WEAK_PASSWORD", "attackPath": [{"relation": "X"}]})

    assert isinstance(factor, OpaqueRiskFactor)


@pytest.mark.parametrize("payload", [{"type": 7, "severity": ["x"]}, {"type": None}, {}])
def test_non_string_enums_are_unknown(payload):
    factor = RiskFactor.from_dict(payload)

    assert isinstance(factor, OpaqueRiskFactor)
    assert factor.type == RiskFactorType.UNKNOWN
    assert factor.severity == RiskSeverity.UNKNOWN


def test_entity_skips_elements_that_are_not_objects():
    node = make_node("e-1", "Alice", group_ids=["G1"])
    node["riskFactors"].extend(["junk", None, 3])
    node["accounts"] = ["junk", {"passwordAttributes": "oops"}]
    node["type"] = {"not": "a string"}

    entity = Entity.from_dict(node)

    assert [r.group_id for r in entity.risk_factors] == ["G1"]
    assert [a.last_change for a in entity.accounts] == [None]
    assert entity.type == EntityType.UNKNOWN


def test_entity_with_scalar_collections():
    node = make_node("e-1", "Alice")
    node["riskFactors"] = "oops"
    node["accounts"] = {"passwordAttributes": {}}

    entity = Entity.from_dict(node)

    assert entity.risk_factors == []
    assert entity.accounts == []


def test_unknown_variant_is_opaque():
    factor = RiskFactor.from_dict({"type": "SOMETHING_NEW", "score": None, "extra": {"x": 1}})

    assert isinstance(factor, OpaqueRiskFactor)
    assert factor.type == RiskFactorType.UNKNOWN
    assert factor.raw_type == "SOMETHING_NEW"
    assert factor.score == 0.0


def test_entity_with_null_fields():
    entity = Entity.from_dict({
        "entityId": "e1",
        "primaryDisplayName": "Alice",
        "secondaryDisplayName": None,
        "type": None,
        "riskScore": None,
        "archived": None,
        "isAdmin": None,
        "accounts": None,
        "riskFactors": None,
    })

    assert entity.entity_id == "e1"
    assert entity.secondary_display_name is None
    assert entity.type == EntityType.UNKNOWN
    assert entity.risk_score == 0.0
    assert not entity.archived
    assert not entity.is_admin
    assert entity.accounts == []
    assert entity.risk_factors == []


def test_account_without_password_attributes():
    entity = Entity.from_dict(make_node("e1", "Alice"))
    entity_raw = make_node("e2", "Bob")
    entity_raw["accounts"] = [{}, {"passwordAttributes": None}, {"passwordAttributes": {"lastChange": "2024-01-01"}}]

    assert entity.accounts == []
    assert [a.last_change for a in Entity.from_dict(entity_raw).accounts] == [None, None, "2024-01-01"]


def test_duplicate_password_factors_keep_order():
    entity = Entity.from_dict(make_node("e1", "Alice", group_ids=["G2", "G1"], extra_factors=[
        {"type": "STALE_ACCOUNT", "score": 0.1, "severity": "LOW_RISK"},
    ]))

    assert [f.group_id for f in entity.duplicate_password_factors] == ["G2", "G1"]
    assert len(entity.risk_factors) == 3


def test_entity_page_parsing():
    page = EntityPage.from_response(
        make_response([make_node("e1", "Alice"), make_node("e2", "Bob")],
                      has_next_page=True, end_cursor="abc")
    )

    assert [e.entity_id for e in page.entities] == ["e1", "e2"]
    assert page.page_info.has_next_page
    assert page.page_info.end_cursor == "abc"


def test_entity_page_skips_null_nodes():
    response = make_response([make_node("e1", "Alice")])
    response["data"]["entities"]["edges"].append({"node": None})

    page = EntityPage.from_response(response)

    assert len(page.entities) == 1
    assert not page.page_info.has_next_page


@pytest.mark.parametrize("response", [None, [], {}, {"data": {}}, {"data": {"entities": None}}])
def test_entity_page_rejects_malformed_response(response):
    with pytest.raises(ValueError):
        EntityPage.from_response(response)
