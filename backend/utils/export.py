"""Export utilities for freebet records."""
from typing import Iterable

import pandas as pd

from backend.models.freebet import Freebet


CSV_COLUMNS = ["Name", "Value", "Min Odds", "Expiry", "Status", "Extracted Value"]


def export_freebets_to_csv(freebets: Iterable[Freebet]) -> str:
    """Serialise freebets to CSV text with a fixed header.

    Args:
        freebets: Freebet records to export

    Returns:
        CSV content, one row per freebet
    """
    data = []
    for freebet in freebets:
        data.append({
            "Name": freebet.name,
            "Value": freebet.value,
            "Min Odds": freebet.min_odds,
            "Expiry": freebet.expiry.isoformat(),
            "Status": freebet.status.value,
            "Extracted Value": freebet.extracted_value if freebet.extracted_value is not None else 0,
        })

    df = pd.DataFrame(data, columns=CSV_COLUMNS, dtype=object)
    return df.to_csv(index=False, lineterminator="\n")
