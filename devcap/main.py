#!/usr/bin/env python3
"""
devcap - Aggregates git commits across local repositories for stand-ups and time tracking.

Scans a directory tree for git repositories, collects the commits of every local
branch in the requested period and prints them as a project -> branch -> commit tree
or as JSON.
"""

import sys
import argparse
import logging
from typing import Optional

from tqdm import tqdm

from .analyzers import MultiRepoAggregator
from .config import DevcapConfig, load_config
from .models import Period
from .utils import (
    DEPTHS,
    GitRepositoryManager,
    PeriodResolver,
    TreeRenderer,
    commit_type_summary,
    export_csv,
    parse_period,
    render_json,
    summary_line,
    supports_color,
)
from .utils.period_resolver import PERIOD_HELP

logger = logging.getLogger('devcap.main')


def _period_argument(value: str) -> Period:
    try:
        return parse_period(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e))


def _positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid integer: {value!r}")
    if number < 1:
        raise argparse.ArgumentTypeError("must be at least 1")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='devcap',
        description='Aggregate git commits across repos for stand-ups and time tracking.'
    )
    parser.add_argument('-p', '--period', type=_period_argument,
                        help=f'Time period: {PERIOD_HELP} (default: today)')
    parser.add_argument('--path', help='Root directory to scan for git repositories (default: .)')
    parser.add_argument('--json', action='store_true', help='Output as JSON')
    parser.add_argument('--csv', metavar='FILE', help='Also export the flat commit table to a CSV file')
    parser.add_argument('--stats', action='store_true', help='Print commit counts per conventional-commit type')
    parser.add_argument('--no-color', action='store_true', help='Disable colored output')
    parser.add_argument('-d', '--depth', choices=DEPTHS,
                        help='Output depth: projects, branches, commits (default: commits)')

    author_group = parser.add_mutually_exclusive_group()
    author_group.add_argument('-a', '--author', help='Filter by author (default: git config user.name)')
    author_group.add_argument('--all-authors', action='store_true', help='Do not filter by author')

    parser.add_argument('-o', '--show-origin', action='store_true',
                        help='Show repository origin (GitHub, GitLab, ...)')
    parser.add_argument('--max-workers', type=_positive_int,
                        help='Maximum number of parallel workers (default: auto-calculated)')
    parser.add_argument('--no-progress', action='store_true', help='Disable the progress bar')
    parser.add_argument('--config', help='Path to the JSON config file (default: ~/.devcap.json)')
    parser.add_argument('-v', '--verbose', action='count', default=0,
                        help='Enable logging (-v info, -vv debug)')
    return parser


def _configure_logging(verbosity: int):
    if verbosity <= 0:
        logging.disable(logging.CRITICAL)
        return
    level = logging.INFO if verbosity == 1 else logging.DEBUG
    logging.basicConfig(level=level, format='%(asctime)s %(levelname)s %(name)s: %(message)s')


def _validate_arguments(parser: argparse.ArgumentParser, args: argparse.Namespace):
    """Valida combinazioni di argomenti che argparse non può esprimere."""
    if args.json and args.depth and args.depth != 'commits':
        parser.error("argument --depth: not allowed with argument --json")


def _resolve_period(args: argparse.Namespace, config: DevcapConfig) -> Period:
    if args.period is not None:
        return args.period
    if config.period:
        try:
            return parse_period(config.period)
        except ValueError as e:
            logger.warning(f"Ignoring period from config file: {e}")
    return Period.today()


def _resolve_author(args: argparse.Namespace, config: DevcapConfig) -> Optional[str]:
    if args.all_authors:
        return None
    return args.author or config.author or GitRepositoryManager.default_author()


def _use_colors(args: argparse.Namespace, config: DevcapConfig) -> bool:
    if args.no_color or args.json:
        return False
    if config.color is False:
        return False
    return supports_color(sys.stdout)


def _make_progress_callback(progress_bar: tqdm):
    def _on_repo_done(repo_name: str, completed: int, total: int):
        if progress_bar.total != total:
            progress_bar.total = total
        progress_bar.set_postfix_str(repo_name, refresh=False)
        progress_bar.update(1)
    return _on_repo_done


def _print_stats(projects):
    summary = commit_type_summary(projects)
    for project_name, counts in summary.items():
        details = ", ".join(f"{commit_type}: {count}" for commit_type, count in sorted(counts.items()))
        print(f"{project_name}: {details}")


def main(argv=None) -> int:
    """Entry point della CLI. Restituisce l'exit code."""
    parser = build_parser()
    args = parser.parse_args(argv)

    _configure_logging(args.verbose)
    _validate_arguments(parser, args)

    config = load_config(args.config)
    period = _resolve_period(args, config)
    root = args.path or config.path or '.'
    author = _resolve_author(args, config)
    show_origin = args.show_origin or bool(config.show_origin)
    max_workers = args.max_workers or config.max_workers
    depth = args.depth or 'commits'

    time_range = PeriodResolver.resolve(period)
    logger.info(f"Period {period}: {time_range.start.isoformat()} -> {time_range.end.isoformat()}, author: {author or 'any'}")

    aggregator = MultiRepoAggregator(max_workers)
    progress_bar = tqdm(
        desc="Scanning repositories",
        unit="repo",
        leave=False,
        disable=args.json or args.no_progress,
    )

    try:
        projects = aggregator.aggregate(
            root,
            time_range,
            author=author,
            show_origin=show_origin,
            progress_callback=_make_progress_callback(progress_bar),
        )
    except (FileNotFoundError, NotADirectoryError) as e:
        print(f"❌ Error: {e}", file=sys.stderr)
        return 1
    finally:
        progress_bar.close()

    if aggregator.analysis_stats['total_repos'] == 0:
        if args.json:
            print("[]")
        else:
            print(f"No git repositories found in: {root}", file=sys.stderr)
        return 0

    if args.csv:
        try:
            rows = export_csv(projects, args.csv)
        except OSError as e:
            print(f"❌ Error writing CSV file {args.csv}: {e}", file=sys.stderr)
            return 1
        print(f"Saved {rows} rows to {args.csv}", file=sys.stderr)

    if args.json:
        print(render_json(projects))
        return 0

    print(f"✓ {summary_line(projects)}", file=sys.stderr)
    renderer = TreeRenderer(depth, show_origin, use_colors=_use_colors(args, config))
    if not projects:
        print(renderer.render(projects), file=sys.stderr)
        return 0

    print()
    print(renderer.render(projects))

    if args.stats:
        print()
        _print_stats(projects)

    return 0


if __name__ == "__main__":
    sys.exit(main())
