"""
Utility functions for report generation and rendering.

This module provides functions to:
- Format sizes and the user-facing listing/summary text
- Save reports in various formats (JSON, table+JSON)
- Generate timestamped report filenames
"""
import json
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

from tabulate import tabulate

from joplin_utils.logging_utils import get_logger
from joplin_utils.models import ResourceSet, RunSummary

logger = get_logger(__name__)


# ============================================================================
# Formatting Utilities
# ============================================================================

def sizeof_fmt(num: float, suffix: str = "B") -> str:
    """Format bytes into human-readable size.

    Args:
        num: Number of bytes
        suffix: Suffix to append (default: "B")

    Returns:
        Formatted string like "1.5GiB", "500.0MiB", etc.
    """
    for unit in ("", "Ki", "Mi", "Gi", "Ti", "Pi", "Ei", "Zi"):
        if abs(num) < 1024.0:
            return f"{num:3.1f}{unit}{suffix}"
        num /= 1024.0
    return f"{num:.1f}Yi{suffix}"


def format_unused_listing(resources: ResourceSet) -> List[str]:
    """Render the listing of unused attachments, one line per entry."""
    if not resources:
        return ["no unused attachments"]

    lines = ["unused attachments:"]
    for resource_id in sorted(resources):
        size = resources[resource_id]
        if size is None:
            lines.append(f"  - {resource_id}")
        else:
            lines.append(f"  - {resource_id} ({sizeof_fmt(size)})")
    lines.append("view these attachments in 'Tools > Note attachments'")
    return lines


def format_run_summary(summary: RunSummary) -> List[str]:
    """Render the deletion summary followed by one line per failed ID."""
    lines = [f"{summary.deleted_count} resource(s) ({summary.total_bytes} bytes) have been deleted."]
    for resource_id in summary.failures:
        lines.append(f"fail to delete: {resource_id}")
    return lines


def format_resource_table(resources: ResourceSet) -> str:
    """Grid table of unused resources for the text report."""
    rows = []
    for resource_id in sorted(resources):
        size = resources[resource_id]
        rows.append([resource_id, size if size is not None else "", sizeof_fmt(size) if size is not None else "unknown"])
    return tabulate(rows, headers=["Resource ID", "Bytes", "Size"], tablefmt="grid")


# ============================================================================
# Timestamp Utilities
# ============================================================================

def get_timestamp_suffix() -> str:
    """
    Generate a timestamp suffix for report filenames.

    Returns:
        String in format: YYYY-MM-DD-HH-MM-SS
    """
    return datetime.now().strftime("%Y-%m-%d-%H-%M-%S")


def add_timestamp_to_path(path: str, timestamp: Optional[str] = None) -> str:
    """
    Add a timestamp to a file path before the extension.

    Args:
        path: Original file path (e.g., 'reports/unused-resources.json')
        timestamp: Optional timestamp string (defaults to current time)

    Returns:
        Path with timestamp inserted (e.g., 'reports/unused-resources-2026-01-15-14-30-00.json')
    """
    if timestamp is None:
        timestamp = get_timestamp_suffix()

    p = Path(path)
    return str(p.parent / f"{p.stem}-{timestamp}{p.suffix}")


# ============================================================================
# Report Saving Functions
# ============================================================================

def save_json(path: str, data: Any, timestamp: bool = False) -> str:
    """
    Write JSON data to a file with indentation.

    Sets are written as sorted lists and datetimes as ISO strings.

    Args:
        path: Path to save the JSON file
        data: Data to save
        timestamp: If True, add timestamp to filename (default: False)

    Returns:
        Path to the saved file
    """
    def _default(value):
        if isinstance(value, (set, frozenset)):
            return sorted(value)
        if isinstance(value, datetime):
            return value.isoformat()
        raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")

    p = Path(path)
    if timestamp:
        p = Path(add_timestamp_to_path(str(p)))

    p.parent.mkdir(parents=True, exist_ok=True)

    with open(p, 'w') as f:
        json.dump(data, f, indent=2, default=_default)
    logger.info(f"Saved JSON to {p}")
    return str(p)


def save_table_and_json(base_path: str, table_str: str, json_obj: Dict[str, Any], timestamp: bool = True) -> str:
    """
    Write a table string to <base>.txt and JSON object to <base>.json.

    Args:
        base_path: Base path for the reports (a trailing .json is dropped)
        table_str: Table content to write
        json_obj: JSON object to write
        timestamp: If True, add timestamp to filenames (default: True)

    Returns:
        Path to the saved JSON file
    """
    base = Path(base_path)
    if base.suffix == ".json":
        base = base.with_suffix("")

    if timestamp:
        base = base.parent / f"{base.name}-{get_timestamp_suffix()}"

    base.parent.mkdir(parents=True, exist_ok=True)

    with open(f"{base}.txt", "w") as f:
        f.write(table_str)

    json_path = save_json(f"{base}.json", json_obj, timestamp=False)

    logger.info(f"Saved reports to {base}.txt and {base}.json")
    return json_path
