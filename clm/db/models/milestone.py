import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, Date, DateTime, ForeignKey, String, Text
from sqlalchemy.orm import relationship

from clm.db.base import Base


class ContractMilestone(Base):
    __tablename__ = "contract_milestones"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    contract_id = Column(String(36), ForeignKey("contracts.id"), nullable=False, index=True)
    milestone_type = Column(String(50), nullable=False)
    name = Column(String(255), nullable=False)
    due_date = Column(Date, nullable=False)
    assignee_email = Column(String(255), nullable=True)
    notes = Column(Text, nullable=True)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    # Relationships
    contract = relationship("Contract", back_populates="milestones")
