#!/usr/bin/env python3
"""
Command line front-end for the link shortener.

CLI usage:
    # Shorten up to 5 URLs at once (one --code per URL, '' for a generated code)
    $ linkshortener create example.com/a https://example.org/b --code docs --code '' --minutes 60

    # Resolve a shortcode (records a click on success)
    $ linkshortener resolve docs --user-agent 'curl/8.5.0' --referrer https://news.example

    # Statistics for all links, or for one link
    $ linkshortener stats
    $ linkshortener stats --code docs

    # Deactivate one link
    $ linkshortener deactivate docs

    # Remove everything (irreversible)
    $ linkshortener clear --yes

Behavior:
    - Configuration comes from config/<APP_ENV>.yaml (see linkshortener.utils.config).
    - Links are kept in Redis; the in-process memory backend is rejected.
    - Results are printed to stdout as JSON; logs go to stderr as JSON lines.

Exit codes:
    0: success (resolve: the link redirects)
    1: rejected input, or a resolve outcome other than "redirecting"
    2: store or configuration failure
"""

from __future__ import annotations

import sys
import json
import argparse
import dataclasses
from datetime import datetime
from typing import Any

from linkshortener.constants import Backend, Defaults, Limits
from linkshortener.exceptions import LinkShortenerError, BadConfigurationError, BatchValidationError, ValidationError
from linkshortener.dao.exceptions import DAOError, ShortLinkNotFoundError
from linkshortener.models import CreationRequest, RequestContext
from linkshortener.services import create_service
from linkshortener.utils.config import load_config
from linkshortener.utils.logging import initialize_logging


EXIT_OK = 0
EXIT_REJECTED = 1
EXIT_FAILURE = 2


def _json_default(value: Any) -> Any:
    if isinstance(value, datetime):
        return value.isoformat()
    raise TypeError(f'Object of type {type(value).__name__} is not JSON serializable')


def _print(payload: Any) -> None:
    if dataclasses.is_dataclass(payload):
        payload = dataclasses.asdict(payload)
    print(json.dumps(payload, indent=2, default=_json_default))


def _positive_int(value: str) -> int:
    try:
        iv = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError('must be an integer') from None
    if iv < 1:
        raise argparse.ArgumentTypeError('must be >= 1')
    return iv


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog='linkshortener', description='Shorten URLs and inspect click statistics')
    commands = parser.add_subparsers(dest='command', required=True)

    create = commands.add_parser('create', help=f'Shorten 1 to {Limits.MAX_BATCH_SIZE} URLs')
    create.add_argument('urls', nargs='+', help='Destination URLs (scheme optional)')
    create.add_argument(
        '--code',
        dest='codes',
        action='append',
        default=[],
        help='Custom shortcode for the URL at the same position (repeatable, empty for a generated code)',
    )
    create.add_argument(
        '--minutes',
        type=_positive_int,
        default=Defaults.VALIDITY_MINUTES,
        help=f'Validity period in minutes for every URL (default: {Defaults.VALIDITY_MINUTES})',
    )

    resolve = commands.add_parser('resolve', help='Resolve a shortcode and record a click')
    resolve.add_argument('shortcode')
    resolve.add_argument('--user-agent', default='', help='User agent recorded with the click')
    resolve.add_argument('--referrer', default=None, help='Referrer recorded with the click (default: Direct)')

    stats = commands.add_parser('stats', help='Show click statistics')
    stats.add_argument('--code', default=None, help='Only show statistics for this shortcode')

    deactivate = commands.add_parser('deactivate', help='Deactivate a short link')
    deactivate.add_argument('shortcode')

    clear = commands.add_parser('clear', help='Remove all links and clicks (irreversible)')
    clear.add_argument('--yes', action='store_true', help='Confirm the irreversible removal')

    return parser


def run(args: argparse.Namespace, service) -> int:
    if args.command == 'create':
        if len(args.codes) > len(args.urls):
            raise ValidationError('More --code values than URLs were given.')
        codes = args.codes + [''] * (len(args.urls) - len(args.codes))
        requests = [
            CreationRequest(url=url, custom_shortcode=code or None, validity_minutes=args.minutes)
            for url, code in zip(args.urls, codes)
        ]
        links = service.create_links(requests)
        _print([{**dataclasses.asdict(link), 'short_url': service.short_url(link.shortcode)} for link in links])
        return EXIT_OK

    if args.command == 'resolve':
        outcome = service.resolve(args.shortcode, RequestContext(user_agent=args.user_agent, referrer=args.referrer))
        _print(outcome)
        return EXIT_OK if outcome.redirecting else EXIT_REJECTED

    if args.command == 'stats':
        _print(service.link_stats(args.code) if args.code else service.list_stats())
        return EXIT_OK

    if args.command == 'deactivate':
        service.deactivate(args.shortcode)
        _print({'shortcode': args.shortcode, 'is_active': False})
        return EXIT_OK

    if args.command == 'clear':
        if not args.yes:
            print('Refusing to clear all data without --yes.', file=sys.stderr)
            return EXIT_REJECTED
        service.clear_all()
        _print({'cleared': True})
        return EXIT_OK

    raise ValueError(f'Unknown command: {args.command}')  # pragma: no cover


def main(argv: list[str] | None = None) -> int:
    """CLI entry point.

    Steps:
        - Parse CLI arguments
        - Load configuration and initialize logging
        - Refuse the memory backend, which would forget links between runs
        - Build the service and run the requested command
        - Map errors to exit codes
    """
    args = build_parser().parse_args(argv)

    try:
        settings = load_config()
        initialize_logging(settings.sink_url)
        if settings.backend == Backend.MEMORY:
            raise BadConfigurationError('The memory backend does not persist between CLI runs; configure backend: redis.')
        service = create_service(settings)
        return run(args, service)
    except BatchValidationError as e:
        entries = {index: {'error': error.error_code, 'message': str(error)} for index, error in e.errors.items()}
        _print({'error': e.error_code, 'entries': entries})
        return EXIT_REJECTED
    except (ValidationError, ShortLinkNotFoundError) as e:
        _print({'error': e.error_code, 'message': str(e)})
        return EXIT_REJECTED
    except (DAOError, LinkShortenerError) as e:
        _print({'error': e.error_code, 'message': str(e)})
        return EXIT_FAILURE


if __name__ == '__main__':
    sys.exit(main())
