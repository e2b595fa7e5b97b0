"""Associazione tra l'URL del remote di un repository e la piattaforma di hosting."""

import re
import logging
from typing import Callable, List, Optional, Tuple
from urllib.parse import urlsplit

from .git_utils import GIT_QUERY_ERRORS, GitRepositoryManager

logger = logging.getLogger('devcap.origin_resolver')

GITHUB = 'GitHub'
GITLAB = 'GitLab'
BITBUCKET = 'Bitbucket'
GITHUB_ENTERPRISE = 'GitHub Enterprise'
GITLAB_SELF_HOSTED = 'GitLab Self-Hosted'
BITBUCKET_SERVER = 'Bitbucket Server'

URL_SCHEMES = ('ssh', 'git', 'http', 'https', 'git+ssh', 'ssh+git')

# sintassi scp: [user@]host:path
_SCP_PATTERN = re.compile(r'^(?:[^@/\s]+@)?(?P<host>[A-Za-z0-9][A-Za-z0-9.\-]*):(?P<path>[^\s]+)$')


def _is_host(host: str, domain: str) -> bool:
    return host == domain or host.endswith('.' + domain)


# Valutate in ordine: host pubblici, poi euristiche self-hosted. Senza corrispondenze resta l'hostname.
ORIGIN_RULES: List[Tuple[Callable[[str, str], bool], str]] = [
    (lambda host, path: _is_host(host, 'github.com'), GITHUB),
    (lambda host, path: _is_host(host, 'gitlab.com'), GITLAB),
    (lambda host, path: _is_host(host, 'bitbucket.org'), BITBUCKET),
    (lambda host, path: 'gitlab' in host, GITLAB_SELF_HOSTED),
    (lambda host, path: 'github' in host, GITHUB_ENTERPRISE),
    (lambda host, path: 'bitbucket' in host or path.lstrip('/').startswith('scm/'), BITBUCKET_SERVER),
]


def split_remote_url(url: str) -> Optional[Tuple[str, str]]:
    """
    Estrae (host, path) da un URL remoto SSH, scp-like o HTTP(S).

    Args:
        url: URL del remote come configurato in git

    Returns:
        Host in minuscolo e percorso, oppure None se l'URL non è interpretabile
    """
    url = (url or "").strip()
    if not url:
        return None

    if '://' in url:
        try:
            parts = urlsplit(url)
            host = parts.hostname
        except ValueError:
            return None
        if parts.scheme.lower() not in URL_SCHEMES or not host:
            return None
        return host.lower(), parts.path

    match = _SCP_PATTERN.match(url)
    if not match:
        return None
    return match.group('host').lower(), match.group('path')


def classify_remote_url(url: str) -> Optional[str]:
    """Etichetta della piattaforma per un URL remoto, oppure None se malformato."""
    split = split_remote_url(url)
    if split is None:
        return None

    host, path = split
    if host.startswith('www.'):
        host = host[4:]

    for predicate, label in ORIGIN_RULES:
        if predicate(host, path):
            return label
    return host


class OriginResolver:
    """Ricerca best-effort della piattaforma di hosting di un repository locale."""

    def __init__(self, git_manager=None):
        self.git_manager = git_manager or GitRepositoryManager

    def resolve(self, repo_path) -> Optional[str]:
        try:
            url = self.git_manager.get_remote_url(repo_path)
        except GIT_QUERY_ERRORS as e:
            logger.warning(f"Could not read remote of {repo_path}: {e}")
            return None

        if not url:
            return None

        label = classify_remote_url(url)
        if label is None:
            logger.debug(f"Unrecognised remote URL for {repo_path}: {url}")
        return label
