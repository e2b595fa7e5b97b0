"""Raccolta dei commit di tutti i branch locali di un repository."""

import os
import logging
from pathlib import Path
from typing import List, Optional

from ..models import BranchLog, CommitInfo, ProjectLog, TimeRange
from ..utils.git_utils import GIT_QUERY_ERRORS, GitRepositoryManager

logger = logging.getLogger('devcap.repo_collector')


def order_commits(commits: List[CommitInfo]) -> tuple:
    """Newest-first, a parità di timestamp ordina per hash."""
    return tuple(sorted(commits, key=CommitInfo.sort_key))


def order_branches(branches: List[BranchLog]) -> tuple:
    """main/master prima, poi gli altri branch in ordine alfabetico."""
    return tuple(sorted(branches, key=lambda b: (not b.is_primary, b.name)))


class RepoCommitCollector:
    """Collector per singolo repository, senza stato condiviso tra chiamate."""

    def __init__(self, git_manager=None):
        """
        Args:
            git_manager: Oggetto con list_branches/list_commits; default GitRepositoryManager
        """
        self.git_manager = git_manager or GitRepositoryManager

    def collect(self, repo_path, time_range: TimeRange,
                author: Optional[str] = None) -> Optional[ProjectLog]:
        """
        Raccoglie i commit qualificanti di ogni branch locale.

        Le liste per branch non sono deduplicate tra loro: un commit compare
        sotto ogni branch da cui è raggiungibile.

        Args:
            repo_path: Percorso della root del repository
            time_range: Intervallo [start, end) richiesto
            author: Filtro autore opzionale, delegato alla query git

        Returns:
            ProjectLog senza origin, oppure None se il repository non ha commit
            qualificanti o non può essere letto
        """
        repo_path = Path(os.path.abspath(os.fspath(repo_path)))

        try:
            branch_names = self.git_manager.list_branches(repo_path)
        except GIT_QUERY_ERRORS as e:
            logger.warning(f"Skipping {repo_path}: cannot list branches ({e})")
            return None

        if not branch_names:
            logger.warning(f"Skipping {repo_path}: no local branches")
            return None

        branch_logs = []
        failed_branches = 0
        for branch_name in branch_names:
            try:
                commits = self.git_manager.list_commits(repo_path, branch_name, time_range, author)
            except GIT_QUERY_ERRORS as e:
                logger.warning(f"Error reading branch {branch_name} of {repo_path}: {e}")
                failed_branches += 1
                continue

            if commits:
                branch_logs.append(BranchLog(name=branch_name, commits=order_commits(commits)))

        if failed_branches == len(branch_names):
            logger.warning(f"Skipping {repo_path}: every branch query failed")
            return None

        if not branch_logs:
            logger.info(f"No qualifying commits in {repo_path.name}")
            return None

        project_log = ProjectLog(
            project=repo_path.name,
            path=str(repo_path),
            branches=order_branches(branch_logs),
        )
        logger.info(f"{project_log.project}: {project_log.total_commits()} commits on {len(branch_logs)} branches")
        return project_log


def collect_project_log(repo_path, time_range: TimeRange, author: Optional[str] = None,
                        git_manager=None) -> Optional[ProjectLog]:
    return RepoCommitCollector(git_manager).collect(repo_path, time_range, author)
