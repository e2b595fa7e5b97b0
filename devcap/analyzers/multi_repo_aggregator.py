"""Aggregazione parallela dei log di commit di tutti i repository sotto una directory."""

import os
import time
import logging
import dataclasses
import concurrent.futures
import multiprocessing
from pathlib import Path
from typing import Callable, List, Optional, Tuple

from ..models import ProjectLog, TimeRange
from ..utils.git_utils import GitRepositoryManager
from ..utils.origin_resolver import OriginResolver
from ..utils.repo_discovery import find_repos
from .repo_collector import RepoCommitCollector

logger = logging.getLogger('devcap.multi_repo_aggregator')

ProgressCallback = Callable[[str, int, int], None]


def calculate_default_workers() -> int:
    """Dimensione di default del pool, in base al numero di CPU."""
    cpu_count = multiprocessing.cpu_count()
    return max(2, min(8, cpu_count))


def validate_root(root) -> Path:
    """
    Verifica che la root della scansione esista e sia una directory.

    Raises:
        FileNotFoundError: Se root non esiste
        NotADirectoryError: Se root non è una directory
    """
    root_path = Path(os.path.abspath(os.fspath(root)))
    if not root_path.exists():
        raise FileNotFoundError(f"Path does not exist: {root_path}")
    if not root_path.is_dir():
        raise NotADirectoryError(f"Path is not a directory: {root_path}")
    return root_path


def sort_projects(projects: List[ProjectLog]) -> List[ProjectLog]:
    """Ordina per nome progetto senza distinguere maiuscole, a parità per percorso."""
    return sorted(projects, key=ProjectLog.sort_key)


class MultiRepoAggregator:
    """Raccoglie i log di commit di molti repository, un task del thread pool per repository."""

    def __init__(self, max_workers: Optional[int] = None, git_manager=None):
        """
        Inizializza l'aggregatore.

        Args:
            max_workers: Numero massimo di worker paralleli (default: calcolato automaticamente)
            git_manager: Query git condivise da collector e ricerca dell'origin
        """
        self.max_workers = max_workers
        self.git_manager = git_manager or GitRepositoryManager
        self.collector = RepoCommitCollector(self.git_manager)
        self.origin_resolver = OriginResolver(self.git_manager)

        # Diagnostica dell'ultima esecuzione
        self.failed_repos: List[Tuple[str, str]] = []
        self.analysis_stats = {
            'total_repos': 0,
            'repos_with_commits': 0,
            'failed_repos': 0,
            'start_time': None,
            'end_time': None
        }

    def _reset_stats(self):
        self.failed_repos = []
        self.analysis_stats = {
            'total_repos': 0,
            'repos_with_commits': 0,
            'failed_repos': 0,
            'start_time': time.time(),
            'end_time': None
        }

    def _collect_single_repo(self, repo_path: Path, time_range: TimeRange,
                             author: Optional[str], show_origin: bool) -> Optional[ProjectLog]:
        """Task del worker: raccoglie un repository e, se richiesto, aggiunge l'origin."""
        project_log = self.collector.collect(repo_path, time_range, author)
        if project_log is None or not show_origin:
            return project_log

        origin = self.origin_resolver.resolve(repo_path)
        return dataclasses.replace(project_log, origin=origin)

    def aggregate(self, root, time_range: TimeRange, author: Optional[str] = None,
                  show_origin: bool = False,
                  progress_callback: Optional[ProgressCallback] = None) -> List[ProjectLog]:
        """
        Trova i repository sotto root e ne raccoglie i log in parallelo.

        Args:
            root: Directory da scansionare
            time_range: Intervallo semi-aperto dei commit qualificanti
            author: Filtro autore opzionale
            show_origin: Se risolvere la piattaforma di hosting di ogni repository
            progress_callback: Chiamata come (repo_name, completed, total) dopo ogni repository

        Returns:
            Lista di ProjectLog ordinata per nome progetto, senza i repository privi di commit

        Raises:
            FileNotFoundError, NotADirectoryError: Se root non è una directory utilizzabile
        """
        root_path = validate_root(root)
        self._reset_stats()

        repo_paths = find_repos(root_path)
        self.analysis_stats['total_repos'] = len(repo_paths)

        if not repo_paths:
            logger.info(f"No git repositories found in {root_path}")
            self.analysis_stats['end_time'] = time.time()
            return []

        effective_workers = min(len(repo_paths), self.max_workers or calculate_default_workers())
        logger.info(f"Scanning {len(repo_paths)} repositories with {effective_workers} workers")

        projects = []
        with concurrent.futures.ThreadPoolExecutor(max_workers=effective_workers) as executor:
            future_to_repo = {
                executor.submit(self._collect_single_repo, repo_path, time_range, author, show_origin): repo_path
                for repo_path in repo_paths
            }

            # I risultati vengono aggiunti solo qui, sul thread chiamante
            for completed, future in enumerate(concurrent.futures.as_completed(future_to_repo), 1):
                repo_path = future_to_repo[future]
                try:
                    result = future.result()
                    if result is not None:
                        projects.append(result)
                        self.analysis_stats['repos_with_commits'] += 1
                except Exception as e:
                    self.failed_repos.append((repo_path.name, str(repo_path)))
                    self.analysis_stats['failed_repos'] += 1
                    logger.error(f"Error collecting repository {repo_path.name}: {e}")

                if progress_callback:
                    progress_callback(repo_path.name, completed, len(repo_paths))

        self.analysis_stats['end_time'] = time.time()
        elapsed = self.analysis_stats['end_time'] - self.analysis_stats['start_time']
        logger.info(f"Collected {len(projects)}/{len(repo_paths)} repositories with commits in {elapsed:.2f}s")

        return sort_projects(projects)


def aggregate_projects(root, time_range: TimeRange, author: Optional[str] = None,
                       show_origin: bool = False, max_workers: Optional[int] = None) -> List[ProjectLog]:
    return MultiRepoAggregator(max_workers).aggregate(root, time_range, author, show_origin)
