"""Utility per query in sola lettura su repository Git locali."""

import os
import datetime
import logging
from typing import List, Optional, Union

from git import Git, Repo, GitCommandError
from git.exc import GitCommandNotFound, GitError

from ..models import CommitInfo, TimeRange
from .commit_classifier import CommitClassifier

logger = logging.getLogger('devcap.git_utils')

# Errori che un singolo repository può sollevare durante le query
GIT_QUERY_ERRORS = (GitError, OSError, ValueError)

FIELD_SEPARATOR = '\x00'
# Hash|Autore|CommitterDate (ISO 8601 strict)|Oggetto, separati da NUL
LOG_FORMAT = '%H%x00%an%x00%cI%x00%s'

PathLike = Union[str, os.PathLike]


def _git_date(moment: datetime.datetime, round_up: bool = False) -> str:
    """Formatta un datetime per --since/--until, senza frazioni di secondo."""
    truncated = moment.replace(microsecond=0)
    if round_up and truncated < moment:
        truncated += datetime.timedelta(seconds=1)
    return truncated.isoformat()


def _parse_iso_timestamp(value: str) -> datetime.datetime:
    # git >= 2.45 stampa 'Z' per UTC in modalità ISO strict
    if value.endswith('Z'):
        value = value[:-1] + '+00:00'
    return datetime.datetime.fromisoformat(value).astimezone()


def parse_log_line(line: str) -> Optional[CommitInfo]:
    """
    Interpreta una riga prodotta da git log con LOG_FORMAT.

    Args:
        line: Riga di output grezza

    Returns:
        CommitInfo, oppure None se la riga è malformata
    """
    parts = line.split(FIELD_SEPARATOR, 3)
    if len(parts) != 4:
        return None

    commit_hash, author, date_str, subject = parts
    commit_hash = commit_hash.strip()
    if not commit_hash:
        return None

    try:
        timestamp = _parse_iso_timestamp(date_str.strip())
    except ValueError:
        return None

    return CommitInfo(
        hash=commit_hash,
        message=subject,
        timestamp=timestamp,
        author=author,
        commit_type=CommitClassifier.classify(subject),
    )


class GitRepositoryManager:
    """Query Git in sola lettura usate dai collector. Ogni chiamata apre il proprio Repo."""

    @staticmethod
    def open_repository(repo_path: PathLike) -> Repo:
        """
        Apre un repository esistente.

        Raises:
            InvalidGitRepositoryError: Se il percorso non è un repository git
            NoSuchPathError: Se il percorso non esiste
        """
        return Repo(os.fspath(repo_path))

    @staticmethod
    def list_branches(repo_path: PathLike) -> List[str]:
        """Nomi brevi di tutti i branch locali (lista vuota per un repository senza commit)."""
        repo = GitRepositoryManager.open_repository(repo_path)
        try:
            return [head.name for head in repo.heads]
        finally:
            repo.close()

    @staticmethod
    def list_commits(repo_path: PathLike, branch: str, time_range: TimeRange,
                     author: Optional[str] = None) -> List[CommitInfo]:
        """
        Elenca i commit non-merge di un branch locale con committer date in time_range.

        Args:
            repo_path: Percorso del repository
            branch: Nome del branch locale
            time_range: Intervallo semi-aperto da mantenere
            author: Sottostringa opzionale, case-insensitive, confrontata da git con l'autore

        Returns:
            Lista di CommitInfo nell'ordine di git log

        Raises:
            GitCommandError: Se git log fallisce
        """
        args = [
            '--no-merges',
            f'--format={LOG_FORMAT}',
            f'--since={_git_date(time_range.start)}',
            f'--until={_git_date(time_range.end, round_up=True)}',
        ]
        if author:
            args.extend(['--regexp-ignore-case', '--fixed-strings', f'--author={author}'])
        args.extend([f'refs/heads/{branch}', '--'])

        repo = GitRepositoryManager.open_repository(repo_path)
        try:
            output = repo.git.log(*args)
        finally:
            repo.close()

        commits = []
        for line in output.splitlines():
            if not line.strip():
                continue
            commit = parse_log_line(line)
            if commit is None:
                logger.warning(f"Error parsing commit line '{line}' in {repo_path}")
                continue
            # --since/--until sono arrotondati al secondo
            if time_range.contains(commit.timestamp):
                commits.append(commit)

        return commits

    @staticmethod
    def get_remote_url(repo_path: PathLike) -> Optional[str]:
        """
        URL del remote principale: 'origin' se presente, altrimenti il primo configurato.

        Returns:
            L'URL, oppure None se il repository non ha remote
        """
        repo = GitRepositoryManager.open_repository(repo_path)
        try:
            remotes = list(repo.remotes)
            if not remotes:
                return None

            remote = next((r for r in remotes if r.name == 'origin'), remotes[0])
            try:
                urls = list(remote.urls)
            except GitCommandError as e:
                logger.debug(f"Could not read URL of remote {remote.name} in {repo_path}: {e}")
                return None
        finally:
            repo.close()

        url = urls[0].strip() if urls else ""
        return url or None

    @staticmethod
    def default_author() -> Optional[str]:
        """user.name dalla configurazione git globale, se impostato."""
        try:
            name = Git().config('--global', 'user.name')
        except (GitCommandError, GitCommandNotFound) as e:
            logger.debug(f"No global git user.name: {e}")
            return None
        return name.strip() or None
