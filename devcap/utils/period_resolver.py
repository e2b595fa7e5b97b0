"""Parsing dei periodi e conversione in intervalli temporali concreti."""

import datetime
import re
from typing import Optional

from ..models import Period, PeriodKind, TimeRange

PERIOD_HELP = "today, yesterday, 24h, 3d, 7d, week"

_NAMED_PERIODS = {
    'today': Period.today(),
    'yesterday': Period.yesterday(),
    'week': Period.week(),
}

_AMOUNT_PATTERN = re.compile(r'^(?P<amount>\d+)(?P<unit>[hd])$')


def parse_period(token: str) -> Period:
    """
    Converte un token testuale in un Period.

    Args:
        token: Stringa come 'today', 'yesterday', 'week', '24h' o '7d'

    Returns:
        Il Period corrispondente

    Raises:
        ValueError: Se il token non è riconosciuto o il numero non è positivo
    """
    value = (token or "").strip().lower()

    if value in _NAMED_PERIODS:
        return _NAMED_PERIODS[value]

    match = _AMOUNT_PATTERN.match(value)
    if not match:
        raise ValueError(f"Unknown period: {token!r}. Use: {PERIOD_HELP}")

    amount = int(match.group('amount'))
    if amount < 1:
        raise ValueError(f"Invalid period: {token!r}, the amount must be at least 1")

    if match.group('unit') == 'h':
        return Period.hours(amount)
    return Period.days(amount)


def local_now() -> datetime.datetime:
    """Istante corrente come datetime timezone-aware nel fuso locale."""
    return datetime.datetime.now().astimezone()


def start_of_day(moment: datetime.datetime, days_back: int = 0) -> datetime.datetime:
    """
    Mezzanotte locale del giorno di moment, eventualmente days_back giorni prima.

    L'offset è quello in vigore a mezzanotte, non quello di moment (ora legale).
    """
    midnight = moment.astimezone().replace(hour=0, minute=0, second=0, microsecond=0, tzinfo=None)
    return (midnight - datetime.timedelta(days=days_back)).astimezone()


class PeriodResolver:
    """Risolve un Period in un TimeRange ancorato a 'now'."""

    @staticmethod
    def resolve(period: Period, now: Optional[datetime.datetime] = None) -> TimeRange:
        """
        Calcola l'intervallo [start, end) per il periodo.

        Args:
            period: Periodo valido (quantità positive già verificate da parse_period)
            now: Istante di riferimento; default l'ora locale corrente

        Returns:
            TimeRange semi-aperto
        """
        if now is None:
            now = local_now()

        if period.kind is PeriodKind.TODAY:
            return TimeRange(start_of_day(now), now)

        if period.kind is PeriodKind.YESTERDAY:
            return TimeRange(start_of_day(now, days_back=1), start_of_day(now))

        if period.kind is PeriodKind.HOURS:
            return TimeRange(now - datetime.timedelta(hours=period.amount), now)

        if period.kind is PeriodKind.DAYS:
            return TimeRange(now - datetime.timedelta(days=period.amount), now)

        # Settimana ISO: parte dal lunedì
        return TimeRange(start_of_day(now, days_back=now.weekday()), now)


def resolve_period(period: Period, now: Optional[datetime.datetime] = None) -> TimeRange:
    return PeriodResolver.resolve(period, now)
