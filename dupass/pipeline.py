"""
Analysis Pipeline
=================

High-level entry point that runs one complete batch:
1. Authenticate (fatal on failure)
2. Fetch every entity with the configured risk factors
3. Flatten, group and filter password groups
4. Build the report

Design Decisions:
-----------------
1. Single entry point (run_analysis) returning an AnalysisResult
2. Strictly sequential; pages are fetched one at a time
3. A pagination failure is downgraded to a warning and the partial data
   still flows through grouping and reporting
4. Collaborators can be injected, which is how the tests drive it
"""

from typing import Optional, Callable

from .config import DupassConfig
from .ingestion.auth import Authenticator
from .ingestion.graphql_client import GraphQLClient
from .ingestion.paginator import EntityPaginator
from .analysis.password_groups import PasswordGroupAnalyzer
from .model.schemas import AnalysisResult
from .reporting.report_builder import ReportBuilder


def _build_config(config) -> DupassConfig:
    if config is None:
        return DupassConfig()
    if isinstance(config, dict):
        return DupassConfig.from_dict(config)
    return config


def run_analysis(
    client_id: Optional[str] = None,
    client_secret: Optional[str] = None,
    config=None,
    progress_callback: Optional[Callable[[str], None]] = None,
    authenticator: Optional[Authenticator] = None,
    executor=None,
    sleep: Optional[Callable[[float], None]] = None
) -> AnalysisResult:
    """Run the duplicate password analysis.

    Args:
        client_id: API client ID (falls back to config/environment)
        client_secret: API client secret (falls back to config/environment)
        config: DupassConfig or configuration dictionary
        progress_callback: Optional callback for progress updates
        authenticator: Replacement authenticator (must provide get_token())
        executor: Replacement query executor; skips authentication entirely
        sleep: Replacement sleep function for the inter-request delay

    Returns:
        AnalysisResult with the reportable password groups

    Raises:
        AuthenticationError: If no bearer token could be obtained
    """
    dupass_config = _build_config(config)
    verbose = dupass_config.verbose

    def log(message: str):
        if progress_callback:
            progress_callback(message)
        if verbose:
            print(message)

    if executor is None:
        if authenticator is None:
            authenticator = Authenticator(
                client_id=client_id,
                client_secret=client_secret,
                config=dupass_config.api,
                verbose=verbose,
                progress_callback=progress_callback
            )
        token = authenticator.get_token()
        executor = GraphQLClient(token, dupass_config.api)

    pagination = dupass_config.pagination
    paginator_kwargs = {}
    if sleep is not None:
        paginator_kwargs["sleep"] = sleep
    paginator = EntityPaginator(
        executor,
        risk_factors=pagination.risk_factors,
        page_size=pagination.page_size,
        request_delay=pagination.request_delay,
        max_pages=pagination.max_pages,
        verbose=verbose,
        progress_callback=progress_callback,
        **paginator_kwargs
    )
    fetch_result = paginator.fetch_all()

    if not fetch_result.entities:
        log("[*] No entities found with the requested risk factors")

    log("[*] Grouping entities by shared password...")
    groups, grouped_count = PasswordGroupAnalyzer().analyze(fetch_result.entities)
    log(f"[+] Found {grouped_count} password group(s) shared by more than one entity")

    builder = ReportBuilder(
        output_dir=dupass_config.output.output_dir,
        generate_json=dupass_config.output.generate_json
    )
    result = builder.build_report(fetch_result, groups, risk_factors=pagination.risk_factors)
    if result.report_path:
        log(f"[+] JSON report saved to {result.report_path}")

    return result
