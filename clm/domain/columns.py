from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class ColumnAllowList:
    """The set of column names a dynamic query may touch.

    Update and filter builders go through here so that only known columns
    ever become part of a statement; values are always bound parameters.
    """

    columns: frozenset[str]

    def pick(self, data: Mapping[str, Any]) -> dict[str, Any]:
        """Keep only allowed keys. The primary key is never allowed."""
        return {
            key: value
            for key, value in data.items()
            if key in self.columns and key != "id"
        }

    def sqlalchemy_equals_predicates(self, model, criteria: Mapping[str, Any]) -> list:
        """Build `column == value` predicates for every allowed, non-None criterion."""
        return [
            getattr(model, key) == value
            for key, value in self.pick(criteria).items()
            if value is not None
        ]


UPDATABLE_CONTRACT_COLUMNS = ColumnAllowList(
    frozenset(
        {
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
        }
    )
)

FILTERABLE_CONTRACT_COLUMNS = ColumnAllowList(
    frozenset({"status", "type", "owner_user_id"})
)
