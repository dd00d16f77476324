# Copyright 2026 Google LLC
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
#
# SPDX-License-Identifier: Apache-2.0

"""Command-line entry point.

Exit codes:
    0  Every file has an approved license header.
    1  One or more files are unrecognized or unapproved.
    2  Invalid settings or rule documents.

Usage::

    licensekit check src/main.c src/util.h
    licensekit check --rules rules/company.xml --approve ACME src/*.py
    licensekit check --json src/*.py | jq '.[] | select(.approved | not)'
    licensekit licenses
"""

from __future__ import annotations

import argparse
import json
import sys
from collections.abc import Sequence
from dataclasses import replace
from io import StringIO
from pathlib import Path

from rich.console import Console
from rich.table import Table
from rich.text import Text

from licensekit.analysis import HeaderAnalyser, HeaderMatch
from licensekit.config import LicensekitConfig, find_config, load_config
from licensekit.defaults import Engine, build_engine
from licensekit.errors import ConfigurationError
from licensekit.logging import configure_logging, get_logger

__all__ = [
    'format_results_table',
    'main',
    'print_licenses_table',
    'print_results_table',
    'results_to_json',
]

logger = get_logger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='licensekit',
        description='Check source file headers against declared license rules.',
    )
    parser.add_argument('--config', type=Path, help='Settings file (licensekit.toml or pyproject.toml).')
    parser.add_argument(
        '--rules', action='append', default=[], metavar='DOC', help='Extra rule document (repeatable).'
    )
    parser.add_argument('--no-defaults', action='store_true', help='Do not load the bundled default rules.')
    parser.add_argument(
        '--approve', action='append', default=[], metavar='FAMILY', help='Approve a family category (repeatable).'
    )
    parser.add_argument('--header-lines', type=int, help='Leading lines scanned per file.')
    parser.add_argument('-v', '--verbose', action='store_true', help='Debug logging.')
    parser.add_argument('-q', '--quiet', action='store_true', help='Only warnings and errors.')
    parser.add_argument('--json-log', action='store_true', help='Log as JSON lines.')

    sub = parser.add_subparsers(dest='command', required=True)
    check = sub.add_parser('check', help='Check the headers of the given files.')
    check.add_argument('files', nargs='+', type=Path)
    check.add_argument('--json', action='store_true', help='Print results as JSON.')
    licenses = sub.add_parser('licenses', help='List the loaded licenses.')
    licenses.add_argument('--json', action='store_true', help='Print licenses as JSON.')
    return parser


def _resolve_config(args: argparse.Namespace) -> LicensekitConfig:
    path = args.config or find_config(Path.cwd())
    config = load_config(path) if path is not None else LicensekitConfig()
    if args.rules:
        config = replace(config, rules=config.rules + tuple(args.rules))
    if args.no_defaults:
        config = replace(config, use_defaults=False)
    if args.approve:
        config = replace(config, approve=config.approve + tuple(args.approve))
    if args.header_lines is not None:
        if args.header_lines < 1:
            raise ConfigurationError('--header-lines must be positive')
        config = replace(config, header_lines=args.header_lines)
    return config


# ── Output ───────────────────────────────────────────────────────────


def print_results_table(results: Sequence[HeaderMatch], console: Console | None = None) -> None:
    """Print header results as a Rich table followed by a summary line."""
    if console is None:
        console = Console()

    table = Table(show_header=True, header_style='bold', show_edge=False, pad_edge=False)
    table.add_column('File', style='bold')
    table.add_column('Family')
    table.add_column('Approved', justify='center')
    for r in results:
        family = str(r.family) if r.family else '?'
        verdict = Text('✅ yes', style='green') if r.approved else Text('❌ no', style='red')
        table.add_row(r.source, family, verdict)
    console.print(table)

    bad = [r for r in results if not r.approved]
    if bad:
        console.print(f'\n[bold red]{len(bad)}/{len(results)} file(s) not approved.[/]')
    else:
        console.print(f'\n[bold green]{len(results)}/{len(results)} file(s) approved.[/]')


def format_results_table(results: Sequence[HeaderMatch], *, color: bool = False) -> str:
    """Render :func:`print_results_table` to a string."""
    buf = StringIO()
    console = Console(file=buf, force_terminal=color, width=120)
    print_results_table(results, console=console)
    return buf.getvalue().rstrip('\n')


def results_to_json(results: Sequence[HeaderMatch], *, indent: int = 2) -> str:
    """Serialize header results to JSON."""
    records = [
        {
            'file': r.source,
            'family': r.family.category if r.family else None,
            'family_name': r.family.name if r.family else None,
            'matched': [f.category for f in r.families],
            'approved': r.approved,
        }
        for r in results
    ]
    return json.dumps(records, indent=indent)


def print_licenses_table(engine: Engine, console: Console | None = None) -> None:
    """Print the loaded licenses with their approval status."""
    if console is None:
        console = Console()
    table = Table(show_header=True, header_style='bold', show_edge=False, pad_edge=False)
    table.add_column('ID', style='bold')
    table.add_column('Name')
    table.add_column('Derived from', style='dim')
    table.add_column('Approved', justify='center')
    for lic in engine.licenses:
        approved = engine.policy.approve(lic.family)
        table.add_row(
            lic.id,
            lic.name,
            lic.derived_from or '',
            Text('yes', style='green') if approved else Text('no', style='red'),
        )
    console.print(table)


def _licenses_to_json(engine: Engine) -> str:
    records = [
        {
            'id': lic.id,
            'name': lic.name,
            'derived_from': lic.derived_from,
            'notes': lic.notes,
            'approved': engine.policy.approve(lic.family),
        }
        for lic in engine.licenses
    ]
    return json.dumps(records, indent=2)


# ── Commands ─────────────────────────────────────────────────────────


def _check(engine: Engine, files: Sequence[Path], *, as_json: bool) -> int:
    analyser = HeaderAnalyser(engine.licenses, engine.policy, header_lines=engine.header_lines)
    results: list[HeaderMatch] = []
    for path in files:
        if not path.is_file():
            logger.warning('not_a_file', path=path)
            results.append(HeaderMatch(source=str(path), families=(), approved=False))
            continue
        try:
            results.append(analyser.analyse_file(path))
        except OSError as exc:
            logger.warning('file_unreadable', path=path, error=str(exc))
            results.append(HeaderMatch(source=str(path), families=(), approved=False))

    if as_json:
        sys.stdout.write(results_to_json(results) + '\n')
    else:
        print_results_table(results)
    return 0 if all(r.approved for r in results) else 1


def main(argv: Sequence[str] | None = None) -> int:
    """Run the ``licensekit`` command and return its exit code."""
    args = _build_parser().parse_args(argv)
    configure_logging(verbose=args.verbose, quiet=args.quiet, json_log=args.json_log)
    try:
        engine = build_engine(_resolve_config(args))
    except ConfigurationError as exc:
        logger.error('configuration_error', error=str(exc))
        return 2

    if args.command == 'licenses':
        if args.json:
            sys.stdout.write(_licenses_to_json(engine) + '\n')
        else:
            print_licenses_table(engine)
        return 0
    return _check(engine, args.files, as_json=args.json)


if __name__ == '__main__':
    sys.exit(main())
