"""HTML rendering of normalization results."""

from __future__ import annotations

import html
from typing import Sequence

from .models import NormalizationResult

NO_ISSUES = "No issues detected."
PLACEHOLDER = "<span style='color:#9ca3af'>—</span>"

_HEADERS = ("Original", "Normalized", "Size", "Color", "Warnings")


def escape_html(value: str) -> str:
    # Only &, < and >; attribute quoting is never needed for cell text.
    return html.escape(str(value), quote=False)


def render_empty_state() -> str:
    return '<p class="empty-state">No results yet. Normalize some SKUs to see output.</p>'


def _render_row(r: NormalizationResult) -> str:
    warnings_text = " ".join(r.warnings) if r.warnings else NO_ISSUES
    badge_class, badge_label = ("badge ok", "OK") if r.status == "ok" else ("badge warn", "Check")
    size = escape_html(r.size) if r.size else PLACEHOLDER
    color = escape_html(r.color) if r.color else PLACEHOLDER

    return (
        "<tr>"
        f"<td><code>{escape_html(r.original)}</code></td>"
        f"<td><code>{escape_html(r.normalized)}</code></td>"
        f"<td>{size}</td>"
        f"<td>{color}</td>"
        "<td>"
        f'<span class="{badge_class}">{badge_label}</span>'
        '<span style="margin-left:0.4rem;font-size:0.7rem;color:#6b7280;">'
        f"{escape_html(warnings_text)}"
        "</span>"
        "</td>"
        "</tr>"
    )


def render_results_table(results: Sequence[NormalizationResult]) -> str:
    if not results:
        return render_empty_state()

    head = "".join(f"<th>{h}</th>" for h in _HEADERS)
    rows = "\n".join(_render_row(r) for r in results)
    return (
        '<table class="results-table">\n'
        f"<thead><tr>{head}</tr></thead>\n"
        f"<tbody>\n{rows}\n</tbody>\n"
        "</table>"
    )
