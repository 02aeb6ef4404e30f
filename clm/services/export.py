import csv
import io
from collections.abc import Iterable, Iterator

from clm.db.models.contract import Contract as ContractModel

CSV_COLUMNS = (
    "id",
    "contract_number",
    "title",
    "description",
    "counterparty_name",
    "counterparty_email",
    "counterparty_address",
    "owner_user_id",
    "owner_department",
    "status",
    "type",
    "category",
    "effective_date",
    "expiration_date",
    "contract_value",
    "currency",
    "payment_terms",
    "tags",
    "created_at",
    "updated_at",
)


def contract_csv_row(contract: ContractModel) -> list:
    row = []
    for column in CSV_COLUMNS:
        value = getattr(contract, column)
        if column == "tags":
            value = ";".join(value or [])
        elif hasattr(value, "isoformat"):
            value = value.isoformat()
        row.append("" if value is None else value)
    return row


def iter_csv(rows: Iterable[list]) -> Iterator[str]:
    """Yield a header line, then one CSV line per row."""
    buffer = io.StringIO()
    writer = csv.writer(buffer)

    writer.writerow(CSV_COLUMNS)
    yield _drain(buffer)
    for row in rows:
        writer.writerow(row)
        yield _drain(buffer)


def _drain(buffer: io.StringIO) -> str:
    text = buffer.getvalue()
    buffer.seek(0)
    buffer.truncate(0)
    return text
