from __future__ import annotations

import csv
import io
import logging
from typing import Mapping, Optional, Sequence

logger = logging.getLogger(__name__)


def to_csv(rows: Sequence[Mapping[str, object]], *, fieldnames: Optional[Sequence[str]] = None) -> str:
    """Render rows as CSV text.

    The header comes from the first row's keys unless ``fieldnames`` is given.
    Values with commas, quotes or newlines are quoted and escaped; ``None``
    becomes an empty cell. Lines end with CRLF.
    """
    if not rows:
        logger.warning("No data to export.")
        return ""

    headers = list(fieldnames or rows[0].keys())
    out = io.StringIO()
    writer = csv.DictWriter(out, fieldnames=headers, extrasaction="ignore", lineterminator="\r\n")
    writer.writeheader()
    for row in rows:
        writer.writerow({k: ("" if row.get(k) is None else row.get(k)) for k in headers})
    return out.getvalue()
