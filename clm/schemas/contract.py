from datetime import date, datetime
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator, model_validator

REQUIRED_TEXT_FIELDS = ("title", "counterparty_name", "owner_user_id")
NON_NULLABLE_FIELDS = REQUIRED_TEXT_FIELDS + ("status", "type", "currency", "tags")


class Milestone(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    contract_id: str
    milestone_type: str
    name: str
    due_date: date
    assignee_email: str | None = None
    notes: str | None = None


class AuditLogEntry(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    contract_id: str
    action: str
    user_id: str
    details: dict[str, Any]
    created_at: datetime


class Contract(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    contract_number: str | None = None
    title: str
    description: str | None = None
    counterparty_name: str
    counterparty_email: str | None = None
    counterparty_address: str | None = None
    owner_user_id: str
    owner_department: str | None = None
    status: str
    type: str
    category: str | None = None
    effective_date: date | None = None
    expiration_date: date | None = None
    contract_value: Decimal | None = None
    currency: str
    payment_terms: str | None = None
    tags: list[str] = []
    created_at: datetime
    updated_at: datetime
    days_until_expiry: int | None = None


class ContractDetail(Contract):
    milestones: list[Milestone] = []
    audit_logs: list[AuditLogEntry] = []


class ContractCreate(BaseModel):
    contract_number: str | None = Field(None, max_length=100)
    title: str = Field(..., max_length=500)
    description: str | None = None
    counterparty_name: str = Field(..., max_length=255)
    counterparty_email: EmailStr | None = None
    counterparty_address: str | None = None
    owner_user_id: str = Field(..., max_length=100)
    owner_department: str | None = Field(None, max_length=100)
    status: str = Field("draft", max_length=50)
    type: str = Field("Other", max_length=100)
    category: str | None = Field(None, max_length=100)
    effective_date: date | None = None
    expiration_date: date | None = None
    contract_value: Decimal | None = Field(None, ge=0, max_digits=15, decimal_places=2)
    currency: str = Field("USD", min_length=3, max_length=3)
    payment_terms: str | None = None
    tags: list[str] = []

    @field_validator(*REQUIRED_TEXT_FIELDS)
    @classmethod
    def validate_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("must not be blank")
        return v

    @field_validator("contract_number")
    @classmethod
    def empty_contract_number_to_none(cls, v: str | None) -> str | None:
        """A blank contract number means "generate one"."""
        if v is not None and not v.strip():
            return None
        return v


class ContractUpdate(BaseModel):
    """Partial update. Unknown keys (including `id`) are ignored."""

    contract_number: str | None = Field(None, max_length=100)
    title: str | None = Field(None, max_length=500)
    description: str | None = None
    counterparty_name: str | None = Field(None, max_length=255)
    counterparty_email: EmailStr | None = None
    counterparty_address: str | None = None
    owner_user_id: str | None = Field(None, max_length=100)
    owner_department: str | None = Field(None, max_length=100)
    status: str | None = Field(None, max_length=50)
    type: str | None = Field(None, max_length=100)
    category: str | None = Field(None, max_length=100)
    effective_date: date | None = None
    expiration_date: date | None = None
    contract_value: Decimal | None = Field(None, ge=0, max_digits=15, decimal_places=2)
    currency: str | None = Field(None, min_length=3, max_length=3)
    payment_terms: str | None = None
    tags: list[str] | None = None

    @field_validator(*REQUIRED_TEXT_FIELDS, "contract_number")
    @classmethod
    def validate_not_blank(cls, v: str | None) -> str | None:
        if v is not None and not v.strip():
            raise ValueError("must not be blank")
        return v

    @model_validator(mode="after")
    def validate_required_columns_not_cleared(self):
        """Columns that are NOT NULL in the database cannot be set to null."""
        cleared = [
            name
            for name in NON_NULLABLE_FIELDS
            if name in self.model_fields_set and getattr(self, name) is None
        ]
        if cleared:
            raise ValueError(f"Fields cannot be null: {', '.join(cleared)}")
        return self


class UpcomingReview(BaseModel):
    milestone_id: str
    contract_id: str
    contract_number: str | None = None
    title: str
    counterparty_name: str
    status: str
    name: str
    due_date: date
    assignee_email: str | None = None


class TypeCount(BaseModel):
    type: str
    count: int


class StatusCount(BaseModel):
    status: str
    count: int


class DashboardStats(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    total: int
    active: int
    expiring_soon: int = Field(alias="expiringSoon")
    by_type: list[TypeCount] = Field(alias="byType")
    by_status: list[StatusCount] = Field(alias="byStatus")
