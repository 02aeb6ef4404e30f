from datetime import date, timedelta

from sqlalchemy.orm import Session

from clm.db.models.contract import Contract as ContractModel
from clm.db.models.milestone import ContractMilestone as MilestoneModel
from clm.domain.contract_status import TERMINATED
from clm.domain.milestones import REVIEW


def create_milestone(
    db: Session,
    contract_id: str,
    milestone_type: str,
    name: str,
    due_date: date,
    assignee_email: str | None = None,
    notes: str | None = None,
) -> MilestoneModel:
    """Create a milestone in its own commit. Pure data access - no business logic."""
    db_milestone = MilestoneModel(
        contract_id=contract_id,
        milestone_type=milestone_type,
        name=name,
        due_date=due_date,
        assignee_email=assignee_email,
        notes=notes,
    )
    db.add(db_milestone)
    db.commit()
    db.refresh(db_milestone)
    return db_milestone


def get_milestones_for_contract(db: Session, contract_id: str) -> list[MilestoneModel]:
    """Get a contract's milestones, earliest due date first."""
    return (
        db.query(MilestoneModel)
        .filter(MilestoneModel.contract_id == contract_id)
        .order_by(MilestoneModel.due_date.asc())
        .all()
    )


def get_upcoming_reviews(
    db: Session, days: int = 30, as_of: date | None = None
) -> list[tuple[MilestoneModel, ContractModel]]:
    """Review milestones due between today and today + days for non-terminated contracts."""
    as_of = as_of or date.today()
    return (
        db.query(MilestoneModel, ContractModel)
        .join(ContractModel, ContractModel.id == MilestoneModel.contract_id)
        .filter(
            MilestoneModel.milestone_type == REVIEW,
            MilestoneModel.due_date.between(as_of, as_of + timedelta(days=days)),
            ContractModel.status != TERMINATED,
        )
        .order_by(MilestoneModel.due_date.asc())
        .all()
    )
