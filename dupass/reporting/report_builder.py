"""
Report Builder Module
=====================

Builds the AnalysisResult from the fetch and grouping output, writes the
optional JSON report, and renders the console report.

The console report contains:
- Run status (complete or partial)
- Number of entities retrieved and reportable groups
- One table per password group

Design Decisions:
-----------------
1. Reports are structured data (JSON-serializable) first, text second
2. Member tables are rendered with pandas so column alignment is automatic
"""

import json
from datetime import datetime
from pathlib import Path
from typing import Optional

import pandas as pd

from ..model.schemas import AnalysisResult, FetchResult
from ..analysis.password_groups import records_to_dataframe


class ReportBuilder:
    """Builds reports from analysis results.

    Usage:
        builder = ReportBuilder(output_dir="output", generate_json=True)
        result = builder.build_report(fetch_result, groups)
        print(generate_text_report(result))
    """

    def __init__(self, output_dir: str = "output", generate_json: bool = False):
        """Initialize the report builder.

        Args:
            output_dir: Directory for output files
            generate_json: Whether to write dupass_results.json
        """
        self.output_dir = Path(output_dir)
        self.generate_json = generate_json

    def build_report(
        self,
        fetch_result: FetchResult,
        groups: list,
        risk_factors: Optional[list[str]] = None
    ) -> AnalysisResult:
        """Build a complete analysis report.

        Args:
            fetch_result: Output of the paginator
            groups: Reportable PasswordGroups
            risk_factors: Risk factor filter used, for metadata

        Returns:
            AnalysisResult object with all report data
        """
        result = AnalysisResult(
            groups=groups,
            grouped_count=len(groups),
            total_entities=len(fetch_result.entities),
            complete=fetch_result.complete,
            error=fetch_result.error,
            permission_related=fetch_result.permission_related,
            metadata={
                "timestamp": datetime.now().isoformat(),
                "pages_fetched": fetch_result.pages_fetched,
                "risk_factors": risk_factors or [],
            }
        )

        if self.generate_json:
            result.report_path = self._save_json_report(result)

        return result

    def _save_json_report(self, result: AnalysisResult) -> str:
        """Save the report as JSON.

        Returns:
            Path to saved JSON file
        """
        self.output_dir.mkdir(parents=True, exist_ok=True)
        json_path = self.output_dir / "dupass_results.json"

        with open(json_path, 'w', encoding='utf-8') as f:
            json.dump(result.to_dict(), f, indent=2, default=str)

        return str(json_path)


def format_group_table(group) -> str:
    """Render one group's members as an aligned table."""
    frame = records_to_dataframe(group.members)
    frame["passwordLastSet"] = frame["passwordLastSet"].map(
        lambda value: "-" if pd.isna(value) else value.isoformat()
    )
    return frame.fillna("-").to_string(index=False)


def generate_text_report(result: AnalysisResult) -> str:
    """Generate a text report.

    Args:
        result: AnalysisResult to render

    Returns:
        Formatted text report
    """
    lines = [
        "=" * 60,
        "dupass - Duplicate Password Report",
        "=" * 60,
        "",
        f"Generated: {result.metadata.get('timestamp', 'Unknown')}",
        f"Entities retrieved: {result.total_entities}",
        f"Pages fetched: {result.metadata.get('pages_fetched', 0)}",
        "",
    ]

    if not result.complete:
        lines.extend([
            "WARNING: retrieval stopped early, results may be incomplete",
            f"  Reason: {result.error}",
        ])
        if result.permission_related:
            lines.append("  Check the API client scopes for Identity Protection GraphQL access")
        lines.append("")

    if result.grouped_count == 0:
        lines.extend([
            "No entities found sharing duplicate passwords",
            "",
            "=" * 60,
        ])
        return "\n".join(lines)

    lines.extend([
        f"Password groups with more than one member: {result.grouped_count}",
        "",
    ])

    for group in result.groups:
        lines.extend([
            "-" * 60,
            f"Group {group.group_id} ({group.size} members)",
            "-" * 60,
            format_group_table(group),
            "",
        ])

    lines.extend([
        "=" * 60,
        "End of Report",
        "=" * 60,
    ])

    return "\n".join(lines)
