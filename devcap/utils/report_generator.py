"""Generazione dei report: JSON, albero testuale, riepilogo ed export CSV."""

import os
import sys
import json
import datetime
import logging
from typing import Any, Dict, List, Optional

import pandas as pd

from ..models import BranchLog, CommitInfo, ProjectLog
from .commit_classifier import CommitClassifier
from .period_resolver import local_now

logger = logging.getLogger('devcap.report_generator')

DEPTHS = ('projects', 'branches', 'commits')

CSV_COLUMNS = ['project', 'path', 'origin', 'branch', 'hash', 'timestamp', 'author', 'commit_type', 'message']

COLORS = {
    'reset': '\033[0m',
    'bold': '\033[1m',
    'dim': '\033[2m',
    'green': '\033[92m',
    'yellow': '\033[93m',
    'red': '\033[91m',
    'cyan': '\033[96m',
    'blue': '\033[94m',
    'white': '\033[97m',
}

TYPE_COLORS = {
    'feat': 'green',
    'fix': 'red',
    'refactor': 'cyan',
    'docs': 'blue',
    'test': 'yellow',
    'style': 'yellow',
}


def format_relative(now: datetime.datetime, then: datetime.datetime) -> str:
    """
    Formatta la distanza tra due istanti come '3h ago'.

    Args:
        now: Istante di riferimento
        then: Istante del commit

    Returns:
        'just now', '<m>m ago', '<h>h ago' oppure '<d>d ago'
    """
    seconds = (now - then).total_seconds()
    minutes = int(seconds // 60)

    if minutes < 1:
        return "just now"
    if minutes < 60:
        return f"{minutes}m ago"
    if minutes < 1440:
        return f"{minutes // 60}h ago"
    return f"{minutes // 1440}d ago"


def _latest_relative(latest: Optional[datetime.datetime], now: datetime.datetime) -> str:
    return format_relative(now, latest) if latest else "-"


def commit_to_dict(commit: CommitInfo, now: datetime.datetime) -> Dict[str, Any]:
    data = {
        'hash': commit.hash,
        'message': commit.message,
    }
    if commit.commit_type:
        data['commit_type'] = commit.commit_type
    data['timestamp'] = commit.timestamp.isoformat()
    data['relative_time'] = format_relative(now, commit.timestamp)
    return data


def project_to_dict(project: ProjectLog, now: Optional[datetime.datetime] = None) -> Dict[str, Any]:
    """Converte un ProjectLog nella forma JSON documentata."""
    if now is None:
        now = local_now()

    data = {
        'project': project.project,
        'path': project.path,
    }
    if project.origin:
        data['origin'] = project.origin
    data['branches'] = [
        {
            'name': branch.name,
            'commits': [commit_to_dict(commit, now) for commit in branch.commits],
        }
        for branch in project.branches
    ]
    return data


def render_json(projects: List[ProjectLog], now: Optional[datetime.datetime] = None) -> str:
    if now is None:
        now = local_now()
    return json.dumps([project_to_dict(p, now) for p in projects], indent=2, ensure_ascii=False)


def summary_line(projects: List[ProjectLog]) -> str:
    """Riga di riepilogo, es. 'Found 3 commits in 2 projects'."""
    total_commits = sum(p.total_commits() for p in projects)
    total_projects = len(projects)

    if total_commits == 0:
        return "No commits found."

    commit_word = "commit" if total_commits == 1 else "commits"
    project_word = "project" if total_projects == 1 else "projects"
    return f"Found {total_commits} {commit_word} in {total_projects} {project_word}"


class TreeRenderer:
    """Albero progetto -> branch -> commit, con colori ANSI opzionali."""

    def __init__(self, depth: str = 'commits', show_origin: bool = False,
                 use_colors: bool = False, now: Optional[datetime.datetime] = None):
        if depth not in DEPTHS:
            raise ValueError(f"Invalid depth: {depth!r} (expected one of {', '.join(DEPTHS)})")
        self.depth = depth
        self.show_origin = show_origin
        self.use_colors = use_colors
        self.now = now or local_now()

    def _color(self, text: str, *styles: str) -> str:
        if not self.use_colors or not styles:
            return text
        prefix = ''.join(COLORS.get(style, '') for style in styles)
        return f"{prefix}{text}{COLORS['reset']}"

    def _project_header(self, project: ProjectLog) -> str:
        marker = self._color("::", 'bold', 'cyan')
        name = self._color(project.project, 'bold', 'white')
        origin = f" [{project.origin}]" if self.show_origin and project.origin else ""
        return f"{marker} {name}{origin}"

    def _branch_header(self, branch: BranchLog) -> str:
        return f"  {self._color('>>', 'green')} {self._color(branch.name, 'green')}"

    def _commit_line(self, commit: CommitInfo) -> str:
        subject = CommitClassifier.strip_type_prefix(commit.message)
        tag = ""
        if commit.commit_type:
            style = TYPE_COLORS.get(commit.commit_type, 'dim')
            tag = f"{self._color(commit.commit_type, style)} - "
        relative = self._color(format_relative(self.now, commit.timestamp), 'dim')
        return f"    {self._color('*', 'dim')} {self._color(commit.short_hash, 'dim')} {tag}{subject}  {relative}"

    def render_project(self, project: ProjectLog) -> List[str]:
        latest = _latest_relative(project.latest_timestamp(), self.now)

        if self.depth == 'projects':
            summary = f"({project.total_commits()} commits, {len(project.branches)} branches, {latest})"
            return [f"{self._project_header(project)}  {self._color(summary, 'dim')}"]

        if self.depth == 'branches':
            lines = [f"{self._project_header(project)}  {self._color(f'({latest})', 'dim')}"]
            for branch in project.branches:
                branch_latest = _latest_relative(branch.latest_timestamp(), self.now)
                summary = f"({len(branch.commits)} commits, {branch_latest})"
                lines.append(f"{self._branch_header(branch)}  {self._color(summary, 'dim')}")
            return lines

        lines = [self._project_header(project)]
        for branch in project.branches:
            lines.append(self._branch_header(branch))
            lines.extend(self._commit_line(commit) for commit in branch.commits)
        return lines

    def render(self, projects: List[ProjectLog]) -> str:
        if not projects:
            return "No commits found for the given period."

        blocks = ["\n".join(self.render_project(project)) for project in projects]
        separator = "\n" if self.depth == 'projects' else "\n\n"
        return separator.join(blocks)


def render_plain(projects: List[ProjectLog], depth: str = 'commits', show_origin: bool = False,
                 now: Optional[datetime.datetime] = None) -> str:
    """Albero senza codici ANSI."""
    return TreeRenderer(depth, show_origin, use_colors=False, now=now).render(projects)


def supports_color(stream=None) -> bool:
    stream = stream or sys.stdout
    return (
        os.getenv('TERM') != 'dumb' and
        os.getenv('NO_COLOR') is None and
        hasattr(stream, 'isatty') and
        stream.isatty()
    )


def commits_dataframe(projects: List[ProjectLog]) -> pd.DataFrame:
    """Una riga per (progetto, branch, commit)."""
    rows = []
    for project in projects:
        for branch in project.branches:
            for commit in branch.commits:
                rows.append({
                    'project': project.project,
                    'path': project.path,
                    'origin': project.origin or "",
                    'branch': branch.name,
                    'hash': commit.hash,
                    'timestamp': commit.timestamp.isoformat(),
                    'author': commit.author,
                    'commit_type': commit.commit_type or "",
                    'message': commit.message,
                })
    return pd.DataFrame(rows, columns=CSV_COLUMNS)


def commit_type_summary(projects: List[ProjectLog]) -> Dict[str, Dict[str, int]]:
    """
    Conteggio dei commit per tipo e per progetto, senza duplicati tra branch.

    Returns:
        Dizionario {progetto: {tipo: conteggio}}; i commit senza tipo finiscono sotto 'other'
    """
    df = commits_dataframe(projects)
    if df.empty:
        return {}

    unique_commits = df.drop_duplicates(subset=['path', 'hash']).copy()
    unique_commits['commit_type'] = unique_commits['commit_type'].replace('', 'other')
    counts = unique_commits.groupby(['project', 'commit_type']).size()

    summary: Dict[str, Dict[str, int]] = {}
    for (project, commit_type), count in counts.items():
        summary.setdefault(project, {})[commit_type] = int(count)
    return summary


def export_csv(projects: List[ProjectLog], output_file: str) -> int:
    """
    Salva la tabella piatta dei commit in CSV.

    Returns:
        Numero di righe scritte
    """
    df = commits_dataframe(projects)
    df.to_csv(output_file, index=False)
    logger.info(f"Commit table saved to {output_file}")
    return len(df)
