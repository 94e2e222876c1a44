"""CSV export of an account's subscribers."""

from __future__ import annotations

import csv
import io
from datetime import datetime
from typing import Any, Iterable, Iterator, Sequence

from waitlist.db.models import Form, Subscriber


CSV_DANGEROUS_PREFIXES = ("=", "+", "-", "@")
SUBSCRIBER_CSV_HEADERS = ("Email", "Name", "Form", "Date Joined", "Referrer")


def _csv_safe(value: str) -> str:
    if value and value.startswith(CSV_DANGEROUS_PREFIXES):
        return f"'{value}"
    return value


def _serialize_csv_value(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, datetime):
        return value.date().isoformat()
    return str(value)


def _write_csv_row(values: Sequence[Any]) -> str:
    output = io.StringIO()
    writer = csv.writer(output)
    writer.writerow([_csv_safe(_serialize_csv_value(value)) for value in values])
    return output.getvalue()


def stream_subscribers_csv(
    subscribers: Iterable[Subscriber],
    forms: Iterable[Form],
) -> Iterator[str]:
    """Yield the header row, then one row per subscriber."""
    form_names = {form.id: form.name for form in forms}
    yield _write_csv_row(SUBSCRIBER_CSV_HEADERS)
    for subscriber in subscribers:
        yield _write_csv_row([
            subscriber.email,
            subscriber.name,
            form_names.get(subscriber.form_id, ""),
            subscriber.created_at,
            subscriber.referrer,
        ])
