"""
GraphQL Query Execution
=======================

Thin transport for the identity protection GraphQL endpoint. Each call
posts one query document with its variables and returns the parsed JSON
body. No retries: the paginator decides what a failure means.
"""

from typing import Optional

import requests

from ..config import ApiConfig


GRAPHQL_PATH = "/identity-protection/combined/graphql/v1"

_PERMISSION_HINTS = ("scope", "permission", "forbidden", "unauthorized", "access denied")


class QueryExecutionError(RuntimeError):
    """Raised when a GraphQL request fails.

    Attributes:
        status_code: HTTP status, when a response was received
        permission_related: True when the failure looks like missing API
            scope or authorization
    """

    def __init__(self, message: str, status_code: Optional[int] = None,
                 permission_related: bool = False):
        super().__init__(message)
        self.status_code = status_code
        self.permission_related = permission_related


def _looks_permission_related(message: str) -> bool:
    lowered = message.lower()
    return any(hint in lowered for hint in _PERMISSION_HINTS)


class GraphQLClient:
    """Executes GraphQL queries with a bearer token.

    Usage:
        client = GraphQLClient(token, config)
        body = client.execute(query, {"first": 1000, "after": None})
    """

    def __init__(self, token: str, config: Optional[ApiConfig] = None,
                 session: Optional[requests.Session] = None):
        self.token = token
        self.config = config or ApiConfig()
        self.session = session or requests.Session()

    @property
    def endpoint(self) -> str:
        return f"{self.config.base_url}{GRAPHQL_PATH}"

    def execute(self, query: str, variables: Optional[dict] = None) -> dict:
        """Run a query and return the JSON body.

        Raises:
            QueryExecutionError: On transport errors, non-2xx responses,
                invalid JSON, or a GraphQL `errors` array
        """
        headers = {
            "Authorization": f"Bearer {self.token}",
            "Content-Type": "application/json",
            "Accept": "application/json",
        }

        try:
            response = self.session.post(
                self.endpoint,
                json={"query": query, "variables": variables or {}},
                headers=headers,
                timeout=self.config.timeout
            )
        except requests.exceptions.RequestException as e:
            raise QueryExecutionError(f"GraphQL request failed: {e}") from e

        if response.status_code in (401, 403):
            raise QueryExecutionError(
                f"GraphQL request denied with HTTP {response.status_code}",
                status_code=response.status_code,
                permission_related=True
            )
        if not 200 <= response.status_code < 300:
            raise QueryExecutionError(
                f"GraphQL request failed with HTTP {response.status_code}: {response.text[:200]}",
                status_code=response.status_code
            )

        try:
            body = response.json()
        except ValueError as e:
            raise QueryExecutionError(
                "GraphQL response is not valid JSON",
                status_code=response.status_code
            ) from e

        errors = body.get("errors") if isinstance(body, dict) else None
        if errors:
            messages = "; ".join(str((err or {}).get("message", err)) for err in errors)
            raise QueryExecutionError(
                f"GraphQL errors: {messages}",
                status_code=response.status_code,
                permission_related=_looks_permission_related(messages)
            )

        return body
