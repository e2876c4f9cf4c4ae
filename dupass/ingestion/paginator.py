"""
Entity Paginator Module
=======================

Retrieves every entity matching a risk-factor filter from the
cursor-paginated entities query.

Features:
- Follows `pageInfo.endCursor` until `hasNextPage` is false
- Fixed pause between requests to stay under API rate limits
- Fail-fast: the first failed page ends the run; pages already fetched
  are kept and returned as a partial result

Design Decisions:
-----------------
1. The accumulator is local to fetch_all() and returned inside a
   FetchResult, which the analysis stage then owns
2. Failures are not retried and the delay is never increased. A partial
   result is flagged incomplete and must not be read as the full set
3. There is no iteration cap unless max_pages is configured. Setting it
   changes behavior on a server that never reports the last page: the run
   then ends incomplete instead of looping
"""

import time
from typing import Optional, Callable

from ..model.schemas import EntityPage, FetchResult
from .graphql_client import QueryExecutionError
from .queries import ENTITIES_BY_RISK_FACTOR_QUERY


# Prefix of the per-page progress message; the CLI filters on it
PAGE_PROGRESS_PREFIX = "[*] Fetched page"


class EntityPaginator:
    """Cursor pagination engine for the entities query.

    Usage:
        paginator = EntityPaginator(client, risk_factors=["DUPLICATE_PASSWORD"])
        result = paginator.fetch_all()
        if not result.complete:
            print("partial data")

    `executor` is any object with an `execute(query, variables) -> dict`
    method, normally a GraphQLClient.
    """

    def __init__(
        self,
        executor,
        risk_factors: Optional[list[str]] = None,
        page_size: int = 1000,
        request_delay: float = 1.0,
        max_pages: Optional[int] = None,
        query: str = ENTITIES_BY_RISK_FACTOR_QUERY,
        sleep: Callable[[float], None] = time.sleep,
        verbose: bool = True,
        progress_callback: Optional[Callable[[str], None]] = None
    ):
        """Initialize the paginator.

        Args:
            executor: Query execution collaborator
            risk_factors: Risk factor types to filter on
            page_size: Entities requested per page
            request_delay: Seconds to wait between consecutive requests
            max_pages: Optional cap on pages fetched (None = unbounded)
            query: GraphQL document to execute
            sleep: Sleep function, replaceable for tests
            verbose: Whether to print progress messages
            progress_callback: Optional callback for progress updates
        """
        if page_size <= 0:
            raise ValueError("page_size must be positive")
        if request_delay < 0:
            raise ValueError("request_delay cannot be negative")
        if max_pages is not None and max_pages <= 0:
            raise ValueError("max_pages must be positive when set")

        self.executor = executor
        self.risk_factors = list(risk_factors or ["DUPLICATE_PASSWORD"])
        self.page_size = page_size
        self.request_delay = request_delay
        self.max_pages = max_pages
        self.query = query
        self._sleep = sleep
        self.verbose = verbose
        self.progress_callback = progress_callback

    def _log(self, message: str) -> None:
        """Log a message to console and/or callback."""
        if self.verbose:
            print(message)
        if self.progress_callback:
            self.progress_callback(message)

    def _variables(self, cursor: Optional[str]) -> dict:
        return {
            "first": self.page_size,
            "after": cursor,
            "riskFactors": self.risk_factors,
        }

    def fetch_page(self, cursor: Optional[str] = None) -> EntityPage:
        """Fetch and parse a single page.

        Raises:
            QueryExecutionError: If the request fails
            ValueError: If the response has no entities block
        """
        response = self.executor.execute(self.query, self._variables(cursor))
        return EntityPage.from_response(response)

    def fetch_all(self) -> FetchResult:
        """Fetch all pages.

        Returns:
            FetchResult with every entity in page order. `complete` is False
            if a page failed or the page cap was reached.
        """
        result = FetchResult()
        cursor: Optional[str] = None
        has_next_page = True

        self._log(f"[*] Querying entities with risk factors: {', '.join(self.risk_factors)}")

        while has_next_page:
            if self.max_pages is not None and result.pages_fetched >= self.max_pages:
                result.complete = False
                result.error = f"Stopped after reaching the page limit ({self.max_pages})"
                self._log(f"[!] Warning: {result.error}; results may be incomplete")
                break

            if result.pages_fetched > 0 and self.request_delay:
                self._sleep(self.request_delay)

            try:
                page = self.fetch_page(cursor)
            except QueryExecutionError as e:
                self._abort(result, str(e), e.permission_related)
                break
            except ValueError as e:
                self._abort(result, f"Malformed response: {e}", False)
                break

            result.entities.extend(page.entities)
            result.pages_fetched += 1
            self._log(
                f"{PAGE_PROGRESS_PREFIX} {result.pages_fetched}: "
                f"{len(page.entities)} entities (total {len(result.entities)})"
            )

            has_next_page = page.page_info.has_next_page
            cursor = page.page_info.end_cursor

        self._log(f"[+] Retrieved {len(result.entities)} entities in {result.pages_fetched} page(s)")
        return result

    def _abort(self, result: FetchResult, error: str, permission_related: bool) -> None:
        """Mark the run as partial and warn."""
        result.complete = False
        result.error = error
        result.permission_related = permission_related

        self._log(f"[!] Error fetching page {result.pages_fetched + 1}: {error}")
        if permission_related:
            self._log("[!] This is likely a permission problem: check that the API client "
                      "has the Identity Protection GraphQL read scope")
        self._log(f"[!] Warning: continuing with {len(result.entities)} entities; "
                  "results may be incomplete")
