"""
dupass Data Schemas
===================

Typed dataclasses representing identity risk entities returned by the
GraphQL API, and the derived records produced by the analysis.

Design Decisions:
-----------------
1. Raw API payloads are parsed into explicit dataclasses; every optional
   field is modelled as Optional and defaulted when missing or null
2. RiskFactor is a small class hierarchy keyed by its type enum. Only the
   duplicate-password variant carries data the analysis consumes; unknown
   variants parse into OpaqueRiskFactor instead of failing
3. FetchResult is the accumulator handed from the paginator to the analysis
4. AnalysisResult aggregates all findings for reporting

Schema Hierarchy:
- Entity
  - Account (password metadata)
  - RiskFactor (base)
    - DuplicatePasswordRiskFactor
    - AttackPathRiskFactor
    - OpaqueRiskFactor

- PageInfo / EntityPage: one page of the cursor-paginated response
- FetchResult: all pages accumulated by one run
- FlatRecord: one row per duplicate-password risk factor instance
- PasswordGroup: FlatRecords sharing one groupId
- AnalysisResult: complete analysis output container
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional
from datetime import datetime


class RiskFactorType(Enum):
    """Risk factor types reported by the identity risk API.

    Only the types this tool filters on or parses specially are listed;
    anything else maps to UNKNOWN.
    """
    DUPLICATE_PASSWORD = "DUPLICATE_PASSWORD"
    ATTACK_PATH = "ATTACK_PATH"
    WEAK_PASSWORD_POLICY = "WEAK_PASSWORD_POLICY"
    STALE_ACCOUNT = "STALE_ACCOUNT"
    EXPOSED_PASSWORD = "EXPOSED_PASSWORD"
    PASSWORD_NEVER_EXPIRES = "PASSWORD_NEVER_EXPIRES"
    UNKNOWN = "UNKNOWN"

    @classmethod
    def from_string(cls, s: Optional[str]) -> "RiskFactorType":
        """Convert string to RiskFactorType, falling back to UNKNOWN."""
        if not isinstance(s, str) or not s:
            return cls.UNKNOWN
        normalized = s.strip().upper()
        for factor_type in cls:
            if factor_type.value == normalized:
                return factor_type
        return cls.UNKNOWN


class RiskSeverity(Enum):
    """Severity levels attached to risk factors."""
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"
    NORMAL = "NORMAL"
    UNKNOWN = "UNKNOWN"

    @classmethod
    def from_string(cls, s: Optional[str]) -> "RiskSeverity":
        if not isinstance(s, str) or not s:
            return cls.UNKNOWN
        normalized = s.strip().upper()
        # The API suffixes severities, e.g. HIGH_RISK
        if normalized.endswith("_RISK"):
            normalized = normalized[:-len("_RISK")]
        for severity in cls:
            if severity.value == normalized:
                return severity
        return cls.UNKNOWN


class EntityType(Enum):
    """Categories of identity entities."""
    USER = "USER"
    ENDPOINT = "ENDPOINT"
    SERVICE_ACCOUNT = "SERVICE_ACCOUNT"
    UNKNOWN = "UNKNOWN"

    @classmethod
    def from_string(cls, s: Optional[str]) -> "EntityType":
        if not isinstance(s, str) or not s:
            return cls.UNKNOWN
        normalized = s.strip().upper()
        for entity_type in cls:
            if entity_type.value == normalized:
                return entity_type
        return cls.UNKNOWN


def _as_dict(value) -> dict:
    """Return value if it is a JSON object, else an empty dict."""
    return value if isinstance(value, dict) else {}


def _as_list(value) -> list:
    """Return value if it is a JSON array, else an empty list."""
    return value if isinstance(value, list) else []


def _as_float(value) -> float:
    """Coerce a possibly-null numeric field to float."""
    if value is None:
        return 0.0
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0


@dataclass
class Account:
    """An account descriptor attached to an entity.

    Attributes:
        last_change: Raw password-last-changed timestamp, if the account
            reports one
    """
    last_change: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> "Account":
        """Parse `{"passwordAttributes": {"lastChange": ...}}`."""
        data = _as_dict(data)
        password_attributes = _as_dict(data.get("passwordAttributes"))
        return cls(last_change=password_attributes.get("lastChange"))


@dataclass
class RiskFactor:
    """Base class for all risk factors.

    Attributes:
        type: Risk factor type
        score: Contribution of this factor to the entity risk score
        severity: Severity level
        raw_type: Type string exactly as returned by the API
    """
    type: RiskFactorType = RiskFactorType.UNKNOWN
    score: float = 0.0
    severity: RiskSeverity = RiskSeverity.UNKNOWN
    raw_type: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> "RiskFactor":
        """Build the variant matching the payload's `type`.

        Unrecognized types and payloads never raise; they become
        OpaqueRiskFactor instances.
        """
        data = _as_dict(data)
        raw_type = data.get("type")
        factor_type = RiskFactorType.from_string(raw_type)
        common = {
            "type": factor_type,
            "score": _as_float(data.get("score")),
            "severity": RiskSeverity.from_string(data.get("severity")),
            "raw_type": raw_type,
        }

        if factor_type == RiskFactorType.DUPLICATE_PASSWORD:
            return DuplicatePasswordRiskFactor(group_id=data.get("groupId"), **common)
        if factor_type == RiskFactorType.ATTACK_PATH:
            return AttackPathRiskFactor(attack_path=list(_as_list(data.get("attackPath"))), **common)
        return OpaqueRiskFactor(**common)


@dataclass
class DuplicatePasswordRiskFactor(RiskFactor):
    """Entity shares its password with the other members of `group_id`."""
    group_id: Optional[str] = None

    @property
    def has_group(self) -> bool:
        return bool(self.group_id)


@dataclass
class AttackPathRiskFactor(RiskFactor):
    """Risk factor derived from an attack path; payload is not analysed."""
    attack_path: list = field(default_factory=list)


@dataclass
class OpaqueRiskFactor(RiskFactor):
    """Any other risk factor variant."""
    pass


@dataclass
class Entity:
    """A risk-bearing identity record.

    Attributes:
        entity_id: Opaque identifier
        primary_display_name: Main display name
        secondary_display_name: Secondary name (e.g. DOMAIN\\user), optional
        type: Entity category
        risk_score: Overall entity risk score
        archived: Whether the entity is archived
        is_admin: Whether the entity holds an admin role
        accounts: Account descriptors in API order
        risk_factors: Risk factors in API order
    """
    entity_id: str
    primary_display_name: Optional[str] = None
    secondary_display_name: Optional[str] = None
    type: EntityType = EntityType.UNKNOWN
    risk_score: float = 0.0
    archived: bool = False
    is_admin: bool = False
    accounts: list = field(default_factory=list)      # List of Account
    risk_factors: list = field(default_factory=list)  # List of RiskFactor

    @classmethod
    def from_dict(cls, data: dict) -> "Entity":
        """Parse one `edges[].node` payload, tolerating null fields.

        Accounts and risk factors that are not JSON objects are skipped.
        """
        data = _as_dict(data)
        return cls(
            entity_id=str(data.get("entityId") or ""),
            primary_display_name=data.get("primaryDisplayName"),
            secondary_display_name=data.get("secondaryDisplayName"),
            type=EntityType.from_string(data.get("type")),
            risk_score=_as_float(data.get("riskScore")),
            archived=bool(data.get("archived")),
            is_admin=bool(data.get("isAdmin")),
            accounts=[Account.from_dict(a) for a in _as_list(data.get("accounts"))
                      if isinstance(a, dict)],
            risk_factors=[RiskFactor.from_dict(r) for r in _as_list(data.get("riskFactors"))
                          if isinstance(r, dict)],
        )

    @property
    def duplicate_password_factors(self) -> list:
        """Duplicate-password risk factors, in API order."""
        return [r for r in self.risk_factors if isinstance(r, DuplicatePasswordRiskFactor)]


@dataclass
class PageInfo:
    """Cursor state of one response page.

    `end_cursor` is only meaningful when `has_next_page` is True.
    """
    has_next_page: bool = False
    end_cursor: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> "PageInfo":
        data = _as_dict(data)
        return cls(
            has_next_page=bool(data.get("hasNextPage")),
            end_cursor=data.get("endCursor")
        )


@dataclass
class EntityPage:
    """One page of entities and its page info."""
    entities: list = field(default_factory=list)  # List of Entity
    page_info: PageInfo = field(default_factory=PageInfo)

    @classmethod
    def from_response(cls, response: dict) -> "EntityPage":
        """Parse a `{"data": {"entities": {...}}}` response body.

        A missing or null edge list counts as zero entities. Edges or nodes
        that are not JSON objects are skipped. A response whose envelope
        (`data`, `data.entities`, `edges`, `pageInfo`) has the wrong shape
        is malformed and raises ValueError.
        """
        if not isinstance(response, dict):
            raise ValueError("Response body is not a JSON object")
        data = response.get("data")
        if not isinstance(data, dict):
            raise ValueError("Response does not contain a data object")
        entities_block = data.get("entities")
        if not isinstance(entities_block, dict):
            raise ValueError("Response does not contain a data.entities object")

        edges = entities_block.get("edges")
        if edges is not None and not isinstance(edges, list):
            raise ValueError("data.entities.edges is not a list")
        page_info = entities_block.get("pageInfo")
        if page_info is not None and not isinstance(page_info, dict):
            raise ValueError("data.entities.pageInfo is not an object")

        entities = []
        for edge in edges or []:
            node = _as_dict(edge).get("node")
            if isinstance(node, dict) and node:
                entities.append(Entity.from_dict(node))

        return cls(
            entities=entities,
            page_info=PageInfo.from_dict(page_info)
        )


@dataclass
class FetchResult:
    """Accumulated output of a pagination run.

    Attributes:
        entities: All entities across fetched pages, in page order
        complete: False when the run stopped before the last page
        pages_fetched: Number of pages successfully retrieved
        error: Description of the failure that ended the run early
        permission_related: Whether the failure looks like a scope problem
    """
    entities: list = field(default_factory=list)
    complete: bool = True
    pages_fetched: int = 0
    error: Optional[str] = None
    permission_related: bool = False


@dataclass
class FlatRecord:
    """One duplicate-password risk factor instance of one entity."""
    group_id: str
    primary_display_name: Optional[str] = None
    secondary_display_name: Optional[str] = None
    is_admin: bool = False
    archived: bool = False
    password_last_set: Optional[datetime] = None
    risk_score: float = 0.0
    entity_type: EntityType = EntityType.UNKNOWN

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "group_id": self.group_id,
            "primary_display_name": self.primary_display_name,
            "secondary_display_name": self.secondary_display_name,
            "is_admin": self.is_admin,
            "archived": self.archived,
            "password_last_set": self.password_last_set.isoformat() if self.password_last_set else None,
            "risk_score": self.risk_score,
            "entity_type": self.entity_type.value,
        }


@dataclass
class PasswordGroup:
    """Entities sharing one password, keyed by group ID."""
    group_id: str
    members: list = field(default_factory=list)  # List of FlatRecord

    @property
    def size(self) -> int:
        return len(self.members)

    def to_dict(self) -> dict:
        return {
            "group_id": self.group_id,
            "member_count": self.size,
            "members": [m.to_dict() for m in self.members],
        }


@dataclass
class AnalysisResult:
    """Complete analysis result container.

    Attributes:
        groups: Reportable password groups (more than one member each)
        grouped_count: Number of reportable groups
        total_entities: Entities retrieved from the API
        complete: False when pagination stopped early
        error: Pagination error message, if any
        permission_related: Whether that error looks like a scope problem
        report_path: Path to the JSON report, if one was written
        metadata: Additional metadata (timestamp, pages fetched, etc.)
    """
    groups: list = field(default_factory=list)  # List of PasswordGroup
    grouped_count: int = 0
    total_entities: int = 0
    complete: bool = True
    error: Optional[str] = None
    permission_related: bool = False
    report_path: Optional[str] = None
    metadata: dict = field(default_factory=dict)

    def __post_init__(self):
        if self.groups and self.grouped_count == 0:
            self.grouped_count = len(self.groups)

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "groups": [g.to_dict() for g in self.groups],
            "grouped_count": self.grouped_count,
            "total_entities": self.total_entities,
            "complete": self.complete,
            "error": self.error,
            "permission_related": self.permission_related,
            "report_path": self.report_path,
            "metadata": self.metadata,
        }
