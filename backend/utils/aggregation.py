"""Monthly aggregation of freebet records."""
from datetime import date, datetime, timezone
from typing import Iterable, List, Optional, Tuple, Union

from backend.config import Config
from backend.models.freebet import Freebet, FreebetOverview, FreebetStatus
from backend.models.stats import MonthlySummary
from backend.utils.calculator import round2


def month_key(year: int, month: int) -> str:
    """Format a month as 'YYYY-MM'."""
    return f"{year:04d}-{month:02d}"


def shift_month(year: int, month: int, offset: int) -> Tuple[int, int]:
    """Move a (year, month) pair by offset months, wrapping across years."""
    index = year * 12 + (month - 1) + offset
    return index // 12, index % 12 + 1


def _empty_summary(year: int, month: int) -> MonthlySummary:
    return MonthlySummary(
        month_key=month_key(year, month),
        year=year,
        month=month,
        label=date(year, month, 1).strftime("%B %Y"),
    )


def _attribution_date(freebet: Freebet) -> Union[date, datetime]:
    # created_at wins even when the freebet resolves in a later month
    return freebet.created_at if freebet.created_at is not None else freebet.expiry


def aggregate_by_month(
    freebets: Iterable[Freebet],
    reference_date: Optional[Union[date, datetime]] = None,
    months: int = Config.MONTHS_WINDOW,
) -> List[MonthlySummary]:
    """
    Summarise freebet activity for the trailing months up to reference_date.

    Each freebet is attributed to the month of its created_at timestamp,
    falling back to its expiry date. Freebets outside the window are
    ignored. Summaries are returned most recent month first.
    """
    reference = reference_date or datetime.now(timezone.utc)

    summaries = {}
    for i in range(months):
        year, month = shift_month(reference.year, reference.month, -i)
        summaries[month_key(year, month)] = _empty_summary(year, month)

    for freebet in freebets:
        attributed = _attribution_date(freebet)
        summary = summaries.get(month_key(attributed.year, attributed.month))
        if summary is None:
            continue

        summary.total_freebets += 1

        if freebet.status == FreebetStatus.ACTIVE:
            summary.active_freebets += 1
            summary.total_value += freebet.value
        elif freebet.status == FreebetStatus.EXTRACTED:
            summary.extracted_freebets += 1
            summary.extracted_value += freebet.value
            summary.profit += freebet.extracted_value or 0
        elif freebet.status == FreebetStatus.EXPIRED:
            summary.expired_freebets += 1

    for summary in summaries.values():
        if summary.extracted_value > 0:
            summary.extraction_rate = (summary.profit / summary.extracted_value) * 100
        else:
            summary.extraction_rate = 0.0

    return sorted(summaries.values(), key=lambda s: s.month_key, reverse=True)


def find_month(summaries: List[MonthlySummary], year: int, month: int) -> MonthlySummary:
    """Pick one month from aggregated summaries, zeroed if it is outside the window."""
    key = month_key(year, month)
    for summary in summaries:
        if summary.month_key == key:
            return summary
    return _empty_summary(year, month)


def summarize_freebets(freebets: Iterable[Freebet]) -> FreebetOverview:
    """Dashboard counters: freebets per status, active face value and realised profit."""
    overview = FreebetOverview()
    for freebet in freebets:
        if freebet.status == FreebetStatus.ACTIVE:
            overview.active_freebets += 1
            overview.total_active_value += freebet.value
        elif freebet.status == FreebetStatus.EXPIRED:
            overview.expired_freebets += 1
        elif freebet.status == FreebetStatus.EXTRACTED:
            overview.extracted_freebets += 1
            overview.total_profit += freebet.extracted_value or 0

    overview.total_active_value = round2(overview.total_active_value)
    overview.total_profit = round2(overview.total_profit)
    return overview
