"""Collector e aggregatore per la raccolta parallela dei commit."""

from .repo_collector import RepoCommitCollector, collect_project_log
from .multi_repo_aggregator import MultiRepoAggregator, aggregate_projects

__all__ = [
    'RepoCommitCollector',
    'collect_project_log',
    'MultiRepoAggregator',
    'aggregate_projects'
]
