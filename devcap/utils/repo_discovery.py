"""Ricerca dei repository git sotto un albero di directory."""

import os
import logging
from pathlib import Path
from typing import List, Union

logger = logging.getLogger('devcap.repo_discovery')

SKIP_DIRS = frozenset({
    'node_modules',
    'vendor',
    'target',
    '.bundle',
    'Pods',
    '.build',
    'dist',
    'build',
    '.next',
    '.cache',
    '.git',
    '__pycache__',
    '.venv',
    'venv',
    '.tox',
    '.gradle',
})

GIT_DIR_NAME = '.git'


def is_repo_root(path: Union[str, Path]) -> bool:
    """True se la directory contiene metadati git al primo livello (cartella .git, o file .git per i worktree)."""
    git_path = os.path.join(str(path), GIT_DIR_NAME)
    return os.path.isdir(git_path) or os.path.isfile(git_path)


def _log_walk_error(error: OSError):
    logger.debug(f"Skipping unreadable directory {error.filename}: {error.strerror}")


def find_repos(root: Union[str, Path]) -> List[Path]:
    """
    Visita l'albero sotto root e restituisce ogni root di repository trovata.

    Dentro un repository non si cercano repository annidati; le directory in
    SKIP_DIRS non vengono mai visitate e i link simbolici non vengono seguiti.

    Args:
        root: Directory da scansionare

    Returns:
        Lista dei percorsi delle root dei repository
    """
    repos = []

    for dirpath, dirnames, _ in os.walk(str(root), topdown=True, onerror=_log_walk_error, followlinks=False):
        if is_repo_root(dirpath):
            repos.append(Path(dirpath))
            dirnames[:] = []  # niente repository annidati
            continue

        dirnames[:] = sorted(d for d in dirnames if d not in SKIP_DIRS)

    logger.info(f"Found {len(repos)} repositories under {root}")
    return repos
