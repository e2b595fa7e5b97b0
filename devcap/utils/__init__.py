"""Utilità per devcap: query git, periodi, discovery, classificazione e report."""

from .commit_classifier import CommitClassifier, classify_commit
from .git_utils import GitRepositoryManager
from .origin_resolver import OriginResolver, classify_remote_url
from .period_resolver import PeriodResolver, parse_period, resolve_period
from .repo_discovery import find_repos
from .report_generator import (
    DEPTHS,
    TreeRenderer,
    commit_type_summary,
    export_csv,
    format_relative,
    render_json,
    render_plain,
    summary_line,
    supports_color
)

__all__ = [
    'CommitClassifier',
    'classify_commit',
    'GitRepositoryManager',
    'OriginResolver',
    'classify_remote_url',
    'PeriodResolver',
    'parse_period',
    'resolve_period',
    'find_repos',
    'DEPTHS',
    'TreeRenderer',
    'commit_type_summary',
    'export_csv',
    'format_relative',
    'render_json',
    'render_plain',
    'summary_line',
    'supports_color'
]
