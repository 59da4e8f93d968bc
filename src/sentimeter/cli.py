"""Command-line interface for sentimeter."""

import argparse
import logging
import sys
from typing import List, Optional

from .core.config import settings
from .core.constants import ProviderNames, ReportConstants
from .core.context import AnalysisExecutionContext
from .core.models import DataFormat, ExecutionStatus, ProgressEvent
from .services.mturk_client import MechanicalTurkClient, MechanicalTurkSettings
from .services.registry import MACHINE_PROVIDERS, create_executor, credentials_for, requires_secret
from .utils.data_prep import read_report, read_source, write_report

logger = logging.getLogger(__name__)


def setup_logging(debug: bool = False):
    """Setup logging configuration."""
    level = logging.DEBUG if debug else getattr(logging, settings.log_level.upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )


def print_progress(provider: str, event: ProgressEvent) -> bool:
    """Progress observer for command-line runs; never cancels."""
    if event.status is ExecutionStatus.CANCELED:
        reason = f" ({event.reason})" if event.reason else ""
        print(f"{provider}: canceled{reason}")
    elif event.status is ExecutionStatus.SUCCESS:
        print(f"{provider}: done. Processed {event.processed}, failed {event.failed} of {event.total}")
    elif event.status is ExecutionStatus.FAILED and event.reason:
        print(f"{provider}: {event.progress}% (failed: {event.reason})")
    else:
        print(f"{provider}: {event.progress}%")
    return False


def credential_errors(provider: str) -> List[str]:
    key, secret = credentials_for(provider)
    if not key or (requires_secret(provider) and not secret):
        if provider == ProviderNames.BITEXT:
            return ["Bitext Login or Password is missing."]
        if provider == ProviderNames.SEMANTRIA:
            return ["Semantria API Key or Secret is missing."]
        if provider == ProviderNames.MECHANICAL_TURK:
            return ["Mechanical Turk Access Key or Secret Key is missing."]
        return [f"{provider} API Key is missing."]
    return []


def validate_robot(args) -> List[str]:
    """Problems that would stop a robot run, in the order they are reported."""
    errors = []
    if not args.provider:
        errors.append("You need to select at least one service to process your data!")
    if args.cut_by < ReportConstants.MIN_CUT_BY:
        errors.append(f"Text cutting threshold should be at least {ReportConstants.MIN_CUT_BY} characters.")
    if args.benchmark and args.benchmark not in (args.provider or []):
        errors.append(f"Benchmark provider {args.benchmark} has to be one of the selected services.")

    for provider in args.provider or []:
        errors.extend(credential_errors(provider))
        if not create_executor(provider).is_language_supported(args.language):
            errors.append(
                f"{provider} doesn't support {args.language} language. "
                f"Please remove {provider} or select another language."
            )
    return errors


def cmd_robot(args) -> int:
    """Run machine providers over a source file and write the report."""
    errors = validate_robot(args)
    if errors:
        for error in errors:
            print(error)
        return 2

    documents = read_source(args.source, args.cut_by)
    print(f"Loaded {len(documents)} documents from {args.source}")

    data_format = DataFormat[args.format.upper()]
    for provider in args.provider:
        key, secret = credentials_for(provider)
        context = AnalysisExecutionContext(
            documents,
            key=key,
            secret=secret,
            language=args.language,
            format=data_format,
            use_debug_mode=args.debug,
            on_progress=print_progress,
        )
        create_executor(provider).execute(context)

    if args.benchmark:
        for result in documents.values():
            if args.benchmark in result:
                result.add_reference_polarity(result.get_polarity(args.benchmark), exclude=args.benchmark)

    write_report(args.output, documents)
    print(f"All services have finished analysis! Report written to {args.output}")
    return 0


def _mturk_context(documents, args, custom_field=None) -> AnalysisExecutionContext:
    key, secret = credentials_for(ProviderNames.MECHANICAL_TURK)
    return AnalysisExecutionContext(
        documents,
        key=key,
        secret=secret,
        language=getattr(args, "language", settings.default_language),
        use_debug_mode=args.debug,
        custom_field=custom_field,
        on_progress=print_progress,
    )


def cmd_human_submit(args) -> int:
    """Send every document of a source file to Mechanical Turk as a HIT."""
    errors = credential_errors(ProviderNames.MECHANICAL_TURK)
    if args.cut_by < ReportConstants.MIN_CUT_BY:
        errors.append(f"Text cutting threshold should be at least {ReportConstants.MIN_CUT_BY} characters.")
    if errors:
        for error in errors:
            print(error)
        return 2

    hit_settings = MechanicalTurkSettings.from_yaml(args.settings) if args.settings else MechanicalTurkSettings()
    documents = read_source(args.source, args.cut_by)
    summary = MechanicalTurkClient().execute(_mturk_context(documents, args, hit_settings))
    if summary.aborted:
        print(f"HIT type registration failed: {summary.reason}")
        return 1

    write_report(args.output, documents)
    print(f"All documents have been sent for processing. Sent: {summary.processed} Failed: {summary.failed}")
    return 0


def cmd_human_collect(args) -> int:
    """Read worker answers for a submitted report and rewrite it in place."""
    errors = credential_errors(ProviderNames.MECHANICAL_TURK)
    if errors:
        for error in errors:
            print(error)
        return 2

    documents = read_report(args.report)
    summary = MechanicalTurkClient().collect(_mturk_context(documents, args))
    if summary.canceled and summary.total == 0:
        print(f"{args.report} has no Mechanical Turk results to collect")
        return 1

    write_report(args.report, documents)
    print(f"Answers collected. Processed: {summary.processed} Failed: {summary.failed}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="sentimeter - Sentiment analysis service benchmark")
    parser.add_argument('--debug', action='store_true', help='Verbose logging and per-request timing')
    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    # Robot command
    robot_parser = subparsers.add_parser('robot', help='Analyze a corpus with machine providers')
    robot_parser.add_argument('source', help='Source .txt or .csv file')
    robot_parser.add_argument('output', help='Output CSV report')
    robot_parser.add_argument('--provider', action='append', choices=MACHINE_PROVIDERS,
                              help='Provider to run (repeat for several)')
    robot_parser.add_argument('--language', default=settings.default_language, help='Language of the corpus')
    robot_parser.add_argument('--cut-by', type=int, default=settings.default_cut_by,
                              help='Characters kept per line of a text source')
    robot_parser.add_argument('--format', choices=['json', 'xml'], default='json',
                              help='Wire format where the provider offers a choice')
    robot_parser.add_argument('--benchmark', choices=MACHINE_PROVIDERS,
                              help='Provider whose polarity the others are compared against')

    # Human command
    human_parser = subparsers.add_parser('human', help='Crowd-sourced sentiment on Mechanical Turk')
    human_subparsers = human_parser.add_subparsers(dest='phase', help='Phase to run')

    submit_parser = human_subparsers.add_parser('submit', help='Create one HIT per document')
    submit_parser.add_argument('source', help='Source .txt or .csv file')
    submit_parser.add_argument('output', help='Report holding the HIT ids')
    submit_parser.add_argument('--settings', help='YAML file with HIT settings')
    submit_parser.add_argument('--language', default=settings.default_language, help='Language of the corpus')
    submit_parser.add_argument('--cut-by', type=int, default=settings.default_cut_by,
                               help='Characters kept per line of a text source')

    collect_parser = human_subparsers.add_parser('collect', help='Collect worker answers')
    collect_parser.add_argument('report', help='Report written by "human submit"')

    return parser


def main(argv: Optional[List[str]] = None):
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command or (args.command == 'human' and not args.phase):
        parser.print_help()
        return

    setup_logging(args.debug)

    try:
        if args.command == 'robot':
            code = cmd_robot(args)
        elif args.phase == 'submit':
            code = cmd_human_submit(args)
        else:
            code = cmd_human_collect(args)
    except KeyboardInterrupt:
        print("\nOperation cancelled by user")
        return
    except Exception as e:
        logger.error(f"Command failed: {e}")
        sys.exit(1)

    if code:
        sys.exit(code)
