"""Classificazione dei commit secondo le convenzioni conventional-commit."""

import re
from typing import Optional

COMMIT_TYPES = (
    'feat', 'fix', 'chore', 'docs', 'refactor', 'test',
    'perf', 'build', 'ci', 'style', 'revert',
)

# type(scope)!: subject
_CONVENTIONAL_PATTERN = re.compile(
    r'^\s*(?P<type>' + '|'.join(COMMIT_TYPES) + r')'
    r'(?:\((?P<scope>[^()\r\n]*)\))?'
    r'!?'
    r':\s*(?P<subject>.*)$',
    re.IGNORECASE,
)


class CommitClassifier:
    """Ricava il tipo conventional-commit dal messaggio. Metadato solo informativo."""

    @staticmethod
    def _first_line(message: str) -> str:
        lines = (message or "").splitlines()
        return lines[0] if lines else ""

    @staticmethod
    def classify(message: str) -> Optional[str]:
        """
        Restituisce il tipo del commit (feat, fix, ...) o None.

        Args:
            message: Messaggio del commit; conta solo la prima riga

        Returns:
            Tag minuscolo oppure None se il prefisso non è riconosciuto
        """
        match = _CONVENTIONAL_PATTERN.match(CommitClassifier._first_line(message))
        if not match:
            return None
        return match.group('type').lower()

    @staticmethod
    def strip_type_prefix(message: str) -> str:
        """Rimuove il prefisso 'type(scope):' per la visualizzazione."""
        first_line = CommitClassifier._first_line(message)
        match = _CONVENTIONAL_PATTERN.match(first_line)
        if not match:
            return first_line
        return match.group('subject')


def classify_commit(message: str) -> Optional[str]:
    return CommitClassifier.classify(message)
