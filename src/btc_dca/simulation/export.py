# src/btc_dca/simulation/export.py
"""CSV export of a simulation timeline (date, invested, units, value, price)."""

import io
from pathlib import Path
from typing import Optional, Union, TextIO

import pandas as pd

from btc_dca.simulation.dca_simulator import SimulationResult
from btc_dca.utils.logger import get_logger

logger = get_logger("timeline_export")

CSV_COLUMNS = ["date", "invested", "units", "value", "price"]


def timeline_to_frame(result: SimulationResult) -> pd.DataFrame:
    """Tabulate the timeline with the export column names."""
    rows = [
        {
            "date": p.date,
            "invested": p.invested_cumulative,
            "units": p.btc_cumulative,
            "value": p.value,
            "price": p.price,
        }
        for p in result.timeline
    ]
    return pd.DataFrame(rows, columns=CSV_COLUMNS)


def export_timeline_csv(
    result: SimulationResult,
    destination: Optional[Union[str, Path, TextIO]] = None,
) -> str:
    """
    Render the timeline as CSV.

    Args:
        result: Simulation output.
        destination: Optional file path or text buffer to also write to.

    Returns:
        str: The CSV text.
    """
    buffer = io.StringIO()
    timeline_to_frame(result).to_csv(buffer, index=False)
    csv_text = buffer.getvalue()

    if destination is not None:
        if isinstance(destination, (str, Path)):
            path = Path(destination)
            if path.parent and not path.parent.exists():
                path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(csv_text)
            logger.info(f"Exported {len(result.timeline)} timeline rows to {path}")
        else:
            destination.write(csv_text)

    return csv_text
