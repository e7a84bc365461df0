"""
CSV export of normalization results.

One header row, one row per result in input order, CRLF between lines and
minimal RFC-4180 quoting (fields with a comma, quote or line break).
"""

from __future__ import annotations

import csv
import io
from typing import Sequence

from .models import NormalizationResult

CSV_HEADER = ("original", "normalized", "size", "color", "warnings")
CSV_LINE_TERMINATOR = "\r\n"
CSV_MEDIA_TYPE = "text/csv; charset=utf-8"


def result_to_row(r: NormalizationResult) -> list[str]:
    return [r.original, r.normalized, r.size, r.color, " ".join(r.warnings)]


def results_to_csv(results: Sequence[NormalizationResult]) -> str:
    outp = io.StringIO(newline="")
    writer = csv.writer(
        outp,
        delimiter=",",
        quotechar='"',
        quoting=csv.QUOTE_MINIMAL,
        lineterminator=CSV_LINE_TERMINATOR,
    )

    writer.writerow(CSV_HEADER)
    for r in results:
        writer.writerow(result_to_row(r))

    # No terminator after the last row.
    return outp.getvalue()[: -len(CSV_LINE_TERMINATOR)]
