"""
AuditScope CLI - Estimate manual audit time for a Solidity contract
"""

import argparse
import logging
import sys
from typing import List, Optional

from auditscope.analyzers import ScoringMode
from auditscope.config import Settings
from auditscope.estimator import AuditEstimator
from auditscope.exceptions import AuditScopeError, CompileDiagnostics
from auditscope.utils.logger import setup_logger
from auditscope.utils.report_generator import generate_report

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_INTERRUPTED = 130


def non_negative_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid integer value: {value!r}")
    if number < 0:
        raise argparse.ArgumentTypeError(f"must be 0 or greater, got {number}")
    return number


def build_parser(settings: Settings) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='auditscope',
        description='Estimate the audit time for a Solidity contract.',
        formatter_class=argparse.ArgumentDefaultsHelpFormatter
    )
    parser.add_argument('contract_path', help='Path to the Solidity source file')
    parser.add_argument('--solc-list-url', default=settings.SOLC_LIST_URL,
                        help='URL to the solc binary list')
    parser.add_argument('-c', '--count-imports', action='store_true',
                        help='Count each import individually for time estimation. '
                             'By default, a flat rate is used for any number of imports.')
    parser.add_argument('-o', '--optimizer-runs', type=non_negative_int, default=0,
                        help='Number of optimizer runs. Set to 0 to disable.')
    parser.add_argument('--config', dest='config_path',
                        help='JSON file overriding the default audit weights')
    parser.add_argument('--aggregate-once', action='store_true',
                        help='Count file-wide signals once instead of once per contract unit')
    parser.add_argument('--format', choices=['text', 'json', 'markdown'], default='text',
                        help='Output format of the report')
    parser.add_argument('--output', help='Write the report to this file instead of stdout')
    parser.add_argument('-v', '--verbose', action='store_true', help='Enable verbose output')
    return parser


def setup_logging(settings: Settings, verbose: bool = False) -> None:
    """Configure logging for the CLI."""
    level = logging.DEBUG if verbose else settings.LOG_LEVEL.value
    setup_logger(
        log_level=level,
        json_format=settings.JSON_LOGS,
        log_format=settings.LOG_FORMAT,
    )
    if verbose:
        logging.getLogger('urllib3').setLevel(logging.INFO)  # Reduce noise from urllib3


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the AuditScope CLI."""
    settings = Settings.from_env()
    parser = build_parser(settings)
    args = parser.parse_args(argv)

    setup_logging(settings, verbose=args.verbose)

    if args.solc_list_url != settings.SOLC_LIST_URL:
        settings = settings.model_copy(update={'SOLC_LIST_URL': args.solc_list_url})
    mode = ScoringMode.AGGREGATE_ONCE if args.aggregate_once else ScoringMode(settings.SCORING_MODE)

    try:
        with AuditEstimator(settings) as estimator:
            result = estimator.get_estimate(
                args.contract_path,
                config_path=args.config_path,
                optimizer_runs=args.optimizer_runs,
                count_imports=args.count_imports,
                mode=mode,
            )
        report = generate_report(result.to_dict(), args.output, args.format)
        if args.output:
            logger.info(f"Report generated: {report}")
        else:
            print(report)
        return EXIT_OK

    except CompileDiagnostics as e:
        print("Compilation errors found:", file=sys.stderr)
        for diagnostic in e.diagnostics:
            print(diagnostic, file=sys.stderr)
        return EXIT_ERROR
    except AuditScopeError as e:
        logger.error(f"Error: {e}")
        if args.verbose:
            logger.exception("Detailed error:")
        return EXIT_ERROR
    except KeyboardInterrupt:
        logger.info("Operation cancelled by user")
        return EXIT_INTERRUPTED


if __name__ == '__main__':
    sys.exit(main())
