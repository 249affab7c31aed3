#!/usr/bin/env python3
"""
Find and optionally delete Joplin resources (attachments) no note refers to.

This script talks to the Joplin Web Clipper REST service, lists every stored
resource, asks the service which notes reference each one and reports the
resources that are no longer used. Can optionally delete them.

Workflow:
- Page through GET /resources (100 per page, ordered by id)
- Query GET /resources/:id/notes for each resource and drop referenced ones
- Print the unused attachments (default: report only)
- With --apply, confirm and DELETE /resources/:id for each unused resource
- Print how many resources were deleted, the bytes reclaimed and any failures

Usage examples:
  # List unused attachments (dry-run)
  python delete_unused_resources.py -t <token>

  # Delete unused attachments after a [Yes/no] prompt
  python delete_unused_resources.py -t <token> --apply

  # Delete without prompting
  python delete_unused_resources.py -t <token> --apply --force
"""

import argparse
import sys
from datetime import datetime
from pathlib import Path
from typing import Callable, Dict, List, Optional

from joplin_utils.config_manager import ConfigValidationError, config_manager
from joplin_utils.deletion_executor import delete_resources
from joplin_utils.error_utils import ActionableError, create_config_error
from joplin_utils.joplin_client import JoplinClient
from joplin_utils.logging_utils import get_logger, log_exception, redact_secret, setup_logging
from joplin_utils.models import ResourceSet, RunSummary
from joplin_utils.reference_filter import filter_referenced_resources
from joplin_utils.report_utils import (
    format_resource_table,
    format_run_summary,
    format_unused_listing,
    save_table_and_json,
)
from joplin_utils.resource_collector import MAX_PAGE_SIZE, collect_all_resources

logger = get_logger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_INVALID_CONFIG = 2

CONFIRM_PROMPT = "delete these resources? [Yes/no]: "
CONFIRM_ANSWERS = ("yes", "Yes")


class UnusedResourceCleaner:
    """Runs the collect -> filter -> delete pipeline against one service"""

    def __init__(self, client: JoplinClient, page_size: int = MAX_PAGE_SIZE):
        self.client = client
        self.page_size = page_size
        self.logger = get_logger(__name__)
        self.referenced: List[str] = []
        self.total_resources = 0

    def find_unused_resources(self) -> ResourceSet:
        """Collect every resource and keep only those no note references"""
        self.logger.info("Collecting resources...")
        resources = collect_all_resources(self.client, self.page_size)
        self.total_resources = len(resources)

        self.logger.info(f"Checking note references for {len(resources)} resource(s)...")
        self.referenced = filter_referenced_resources(self.client, resources)
        return resources

    def delete_unused_resources(self, resources: ResourceSet) -> RunSummary:
        """Delete the given unused resources; failures are recorded, not raised"""
        self.logger.info(f"Deleting {len(resources)} unused resource(s)...")
        return delete_resources(self.client, resources)

    def generate_report(self, unused: ResourceSet, summary: Optional[RunSummary] = None) -> Dict:
        """Build a JSON-serialisable report of the run"""
        known_sizes = [size for size in unused.values() if size is not None]
        report = {
            'summary': {
                'total_resources': self.total_resources,
                'referenced_resources': len(self.referenced),
                'unused_resources': len(unused),
                'unused_bytes': sum(known_sizes),
            },
            'unused': [
                {'id': resource_id, 'size': unused[resource_id]}
                for resource_id in sorted(unused)
            ],
            'metadata': {
                'service_url': self.client.base_url,
                'page_size': self.page_size,
                'analysis_timestamp': datetime.now().isoformat(),
            },
        }

        if summary is not None:
            report['deletion'] = {
                'deleted_count': summary.deleted_count,
                'total_bytes': summary.total_bytes,
                'failures': list(summary.failures),
            }

        return report


def validate_connection_settings(port: int, token: str) -> None:
    """Reject settings that make any request pointless.

    Raises:
        ActionableError: token is empty or port is outside [0, 65535]
    """
    if not token:
        raise create_config_error("token", token, "token is empty")
    if port < 0 or port > 65535:
        raise create_config_error("port", port, "port is invalid")


def resolve_report_path(output: str, output_dir: str) -> str:
    """Place a relative --output base path under the configured reports directory"""
    path = Path(output)
    if path.is_absolute():
        return str(path)
    return str(Path(output_dir) / path)


def confirm_deletion(input_func: Optional[Callable[[str], str]] = None) -> bool:
    """Ask before deleting; only an exact 'yes' or 'Yes' confirms"""
    try:
        answer = (input_func or input)(CONFIRM_PROMPT)
    except EOFError:
        logger.warning("No answer on standard input, nothing deleted")
        return False
    return answer.rstrip("\r\n") in CONFIRM_ANSWERS


def parse_arguments(argv: Optional[List[str]] = None):
    """Parse command line arguments"""
    parser = argparse.ArgumentParser(
        description="Find and optionally delete Joplin attachments that no note references",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # List unused attachments (dry-run)
  python delete_unused_resources.py -t <token>

  # Use a non-default Web Clipper port
  python delete_unused_resources.py -p 41185 -t <token>

  # Save a table + JSON report
  python delete_unused_resources.py -t <token> --output unused-resources

  # Delete unused attachments (requires confirmation)
  python delete_unused_resources.py -t <token> --apply

  # Force deletion without confirmation
  python delete_unused_resources.py -t <token> --apply --force

Environment Variables:
  JOPLIN_TOKEN, JOPLIN_PORT, JOPLIN_HOST override config.yaml
        """
    )

    parser.add_argument(
        '-p', '--port',
        type=int,
        help=f'Joplin Web Clipper service port (default: from config, {config_manager.config["joplin"]["port"]})'
    )

    parser.add_argument(
        '-t', '--token',
        help='Joplin Web Clipper authorization token (default: from config or JOPLIN_TOKEN)'
    )

    parser.add_argument(
        '--host',
        help='Joplin Web Clipper service host (default: from config, localhost)'
    )

    parser.add_argument(
        '--output',
        help='Save a table (.txt) and JSON (.json) report at this base path (relative paths go under reports.output_dir)'
    )

    parser.add_argument(
        '--apply',
        action='store_true',
        help='Actually delete unused attachments (default: list only)'
    )

    parser.add_argument(
        '--force',
        action='store_true',
        help='Skip confirmation prompt when using --apply'
    )

    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    """Main function"""
    setup_logging()
    args = parse_arguments(argv)

    try:
        port = args.port if args.port is not None else config_manager.get_port()
        token = args.token if args.token is not None else config_manager.get_token()
        host = args.host or config_manager.get_host()
        timeout = config_manager.get_timeout()
        page_size = config_manager.get_page_size()
        report_path = resolve_report_path(args.output, config_manager.get_output_dir()) if args.output else None
        validate_connection_settings(port, token)
    except ConfigValidationError as e:
        logger.error(str(e))
        return EXIT_INVALID_CONFIG
    except ActionableError as e:
        logger.error(e.message)
        logger.info(str(e))
        return EXIT_INVALID_CONFIG

    redact_secret(token)
    needs_confirmation = not args.force and config_manager.requires_confirmation()

    with JoplinClient(port=port, token=token, host=host, timeout=timeout) as client:
        cleaner = UnusedResourceCleaner(client, page_size)
        try:
            unused = cleaner.find_unused_resources()

            for line in format_unused_listing(unused):
                print(line)

            if report_path:
                save_table_and_json(
                    report_path, format_resource_table(unused), cleaner.generate_report(unused), timestamp=False
                )

            if not args.apply or not unused:
                return EXIT_OK

            if needs_confirmation and not confirm_deletion():
                logger.info("Operation cancelled by user")
                return EXIT_OK

            candidates = dict(unused)
            summary = cleaner.delete_unused_resources(unused)

            for line in format_run_summary(summary):
                print(line)

            if report_path:
                save_table_and_json(
                    report_path,
                    format_resource_table(candidates),
                    cleaner.generate_report(candidates, summary),
                    timestamp=False,
                )

            return EXIT_FAILURE if summary.failures else EXIT_OK

        except ActionableError as e:
            log_exception(logger, e.message, e)
            return EXIT_FAILURE
        except KeyboardInterrupt:
            logger.warning("\n⚠️  Operation interrupted by user")
            return EXIT_FAILURE


if __name__ == "__main__":
    sys.exit(main())
