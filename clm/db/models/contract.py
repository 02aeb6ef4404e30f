import uuid
from datetime import date, datetime, timezone

from sqlalchemy import JSON, Column, Date, DateTime, Numeric, String, Text
from sqlalchemy.orm import relationship

from clm.db.base import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Contract(Base):
    __tablename__ = "contracts"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    contract_number = Column(String(100), unique=True, nullable=True)
    title = Column(String(500), nullable=False)
    description = Column(Text, nullable=True)
    counterparty_name = Column(String(255), nullable=False)
    counterparty_email = Column(String(255), nullable=True)
    counterparty_address = Column(Text, nullable=True)
    owner_user_id = Column(String(100), nullable=False, index=True)
    owner_department = Column(String(100), nullable=True)
    status = Column(String(50), nullable=False, default="draft", index=True)
    type = Column(String(100), nullable=False, default="Other")
    category = Column(String(100), nullable=True)
    effective_date = Column(Date, nullable=True)
    expiration_date = Column(Date, nullable=True, index=True)
    contract_value = Column(Numeric(15, 2), nullable=True)
    currency = Column(String(3), nullable=False, default="USD")
    payment_terms = Column(Text, nullable=True)
    tags = Column(JSON, nullable=False, default=list)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)

    # Relationships
    milestones = relationship(
        "ContractMilestone",
        back_populates="contract",
        order_by="ContractMilestone.due_date",
    )

    @property
    def days_until_expiry(self) -> int | None:
        if self.expiration_date is None:
            return None
        return (self.expiration_date - date.today()).days
