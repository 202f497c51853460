"""
Pulse CLI - Main entry point.

Provides a command-line interface for sending analytics events and
inspecting the enrichment values this machine would report.
"""

import argparse
import dataclasses
import json
import sys
from typing import Any, Dict, List, Optional, Sequence

import yaml

from pulse_analytics import (
    AnalyticsConfig,
    CONCRETE_FIELDS,
    EnrichmentField,
    EnvironmentInfoProvider,
    EventComposer,
    create_environment,
)


def parse_properties(items: Optional[Sequence[str]]) -> Optional[Dict[str, Any]]:
    """
    Parse key=value pairs into a properties dict.

    Values are decoded as JSON when possible (numbers, booleans, lists,
    objects) and kept as plain strings otherwise.

    Raises:
        ValueError: If an item has no '=' or an empty key
    """
    if not items:
        return None

    properties: Dict[str, Any] = {}
    for item in items:
        key, sep, raw = item.partition("=")
        if not sep or not key:
            raise ValueError(f"Expected key=value, got {item!r}")
        try:
            properties[key] = json.loads(raw)
        except json.JSONDecodeError:
            properties[key] = raw
    return properties


def load_config(args: argparse.Namespace) -> AnalyticsConfig:
    """Load config from --config (if given) and apply command-line overrides."""
    config = AnalyticsConfig.from_yaml(args.config) if args.config else AnalyticsConfig()

    overrides: Dict[str, Any] = {}
    if args.api_key is not None:
        overrides['api_key'] = args.api_key
    if args.endpoint is not None:
        overrides['endpoint'] = args.endpoint
    if args.timeout is not None:
        overrides['timeout'] = args.timeout

    return dataclasses.replace(config, **overrides) if overrides else config


def create_composer(config: AnalyticsConfig) -> EventComposer:
    """Build the composer used by CLI commands."""
    return EventComposer.from_config(config)


def create_environment_provider(config: AnalyticsConfig) -> EnvironmentInfoProvider:
    """Build the provider alone; no transport is started."""
    return create_environment(
        app_version=config.app_version,
        overrides=config.environment_overrides
    )


def send_event(args: argparse.Namespace, config: AnalyticsConfig) -> int:
    """
    Compose and send one event, waiting for the result.

    Returns:
        Process exit code (0 on success, 1 on failure)
    """
    with create_composer(config) as composer:
        future = composer.log_event(
            user_id=args.user_id,
            event_type=args.event_type,
            screen=args.screen,
            session_id=args.session_id,
            user_properties=parse_properties(args.user_prop),
            event_properties=parse_properties(args.prop),
            fields=args.field
        )
        result = future.result()

    if result.ok:
        print(f"✅ Event sent: {args.event_type}")
        return 0

    print(f"❌ Failed to send event: {result.error}", file=sys.stderr)
    return 1


def show_environment(config: AnalyticsConfig) -> int:
    """Print every concrete enrichment field and its current value."""
    environment = create_environment_provider(config)
    for field in CONCRETE_FIELDS:
        value = environment.lookup(field)
        print(f"{field.key:<12} {value if value is not None else '-'}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pulse-cli",
        description="Pulse CLI - Send analytics events from the command line",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Send an event with properties and enrichment
  pulse-cli --api-key KEY send u1 purchase --prop sku=A-100 --prop price=9.99 --field all

  # Use a YAML config file
  pulse-cli --config config/analytics.yaml send u1 open_app --screen Home

  # Show the enrichment values this machine reports
  pulse-cli environment
"""
    )

    # Global arguments
    parser.add_argument('--config', help='Path to analytics config YAML')
    parser.add_argument('--api-key', help='API key (overrides config)')
    parser.add_argument('--endpoint', help='Ingestion URL (overrides config)')
    parser.add_argument(
        '--timeout',
        type=float,
        help='HTTP timeout in seconds (overrides config)'
    )

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    # send command
    send = subparsers.add_parser('send', help='Send one event')
    send.add_argument('user_id', help='User ID')
    send.add_argument('event_type', help='Event type')
    send.add_argument('--screen', help='Screen the event occurred on')
    send.add_argument('--session-id', help='Session ID')
    send.add_argument(
        '--prop',
        action='append',
        metavar='KEY=VALUE',
        help='Event property (repeatable)'
    )
    send.add_argument(
        '--user-prop',
        action='append',
        metavar='KEY=VALUE',
        help='User property (repeatable)'
    )
    send.add_argument(
        '--field',
        action='append',
        choices=[f.value for f in EnrichmentField],
        help='Enrichment field (repeatable; "all" for every field)'
    )

    subparsers.add_parser('environment', help='Show enrichment values')

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    try:
        config = load_config(args)

        if args.command == 'send':
            return send_event(args, config)

        if args.command == 'environment':
            return show_environment(config)

    except (OSError, ValueError, yaml.YAMLError) as e:
        print(f"❌ Error: {e}", file=sys.stderr)
        return 1

    return 1


if __name__ == '__main__':
    sys.exit(main())
