import argparse
import logging
import sys

from typing import List, Optional

import delete_unused_resources
from joplin_utils.config_manager import ConfigValidationError, config_manager
from joplin_utils.error_utils import ActionableError
from joplin_utils.health_checks import HealthChecker
from joplin_utils.joplin_client import JoplinClient
from joplin_utils.logging_utils import redact_secret, setup_logging


def get_script_descriptions():
    return {
        "delete_unused_resources": "Find and optionally delete attachments no note refers to (default: dry-run)",
        "health_check": "Check configuration, Web Clipper reachability and the token",
    }


def run_health_check(args: List[str]) -> int:
    """Run all health checks against the configured service"""
    parser = argparse.ArgumentParser(prog="main.py health_check")
    parser.add_argument('-p', '--port', type=int, help="Joplin Web Clipper service port")
    parser.add_argument('-t', '--token', help="Joplin Web Clipper authorization token")
    parser.add_argument('--host', help="Joplin Web Clipper service host")
    parsed = parser.parse_args(args)

    try:
        port = parsed.port if parsed.port is not None else config_manager.get_port()
        token = parsed.token if parsed.token is not None else config_manager.get_token()
        host = parsed.host or config_manager.get_host()
        timeout = config_manager.get_timeout()
        delete_unused_resources.validate_connection_settings(port, token)
    except ConfigValidationError as e:
        logging.error(str(e))
        return delete_unused_resources.EXIT_INVALID_CONFIG
    except ActionableError as e:
        logging.error(e.message)
        logging.info(str(e))
        return delete_unused_resources.EXIT_INVALID_CONFIG

    redact_secret(token)
    with JoplinClient(port=port, token=token, host=host, timeout=timeout) as client:
        checker = HealthChecker(client, config_manager)
        results = checker.run_all_checks()
    return 0 if checker.print_health_report(results) else 1


def main(argv: Optional[List[str]] = None) -> int:
    setup_logging()
    descriptions = get_script_descriptions()

    parser = argparse.ArgumentParser(
        description="Unified entrypoint for the Joplin resource cleaner",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Available scripts:
  delete_unused_resources - Find and optionally delete attachments no note refers to (default: dry-run)
  health_check            - Check configuration, Web Clipper reachability and the token

Configuration:
  The tool uses config.yaml for default settings. You can also use environment variables:
  - CONFIG_FILE: Path to the configuration file
  - JOPLIN_HOST: Web Clipper service host
  - JOPLIN_PORT: Web Clipper service port
  - JOPLIN_TOKEN: Web Clipper authorization token

Examples:
  python main.py health_check -t <token>
  python main.py delete_unused_resources -t <token>
  python main.py delete_unused_resources -t <token> --apply
  python main.py delete_unused_resources -t <token> --apply --force
  python main.py --config
        """
    )

    parser.add_argument(
        'script_keyword',
        nargs='?',
        choices=descriptions.keys(),
        help="Script to run"
    )

    parser.add_argument(
        '--config',
        action='store_true',
        help="Show current configuration and exit"
    )

    parser.add_argument(
        'additional_args',
        nargs=argparse.REMAINDER,
        help="Additional arguments for the script"
    )

    args = parser.parse_args(argv)

    if args.config:
        config_manager.print_config()
        return 0

    if not args.script_keyword:
        parser.print_help()
        return 1

    logging.info(f"Running {args.script_keyword}: {descriptions[args.script_keyword]}")

    if args.script_keyword == "health_check":
        return run_health_check(args.additional_args)

    return delete_unused_resources.main(args.additional_args)


if __name__ == '__main__':
    sys.exit(main())
