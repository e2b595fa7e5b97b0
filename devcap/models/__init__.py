"""Modelli di dati per devcap."""

from .commit_info import CommitInfo
from .project_log import BranchLog, ProjectLog
from .time_range import Period, PeriodKind, TimeRange

__all__ = ['CommitInfo', 'BranchLog', 'ProjectLog', 'Period', 'PeriodKind', 'TimeRange']
