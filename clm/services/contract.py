import logging

from pydantic_core import to_jsonable_python
from sqlalchemy.orm import Session

import clm.repositories.audit_log as audit_repo
import clm.repositories.contract as contract_repo
import clm.repositories.milestone as milestone_repo
from clm.db.models.audit_log import AuditLog as AuditLogModel
from clm.db.models.contract import Contract as ContractModel
from clm.domain.columns import UPDATABLE_CONTRACT_COLUMNS
from clm.domain.contract_number import generate_contract_number
from clm.domain.milestones import plan_default_milestones
from clm.errors import DomainValidationError, DuplicateResourceError, NotFoundError

logger = logging.getLogger(__name__)

SYSTEM_USER = "system"

# Attempts at drawing an unused contract number before giving up.
CONTRACT_NUMBER_ATTEMPTS = 5


def _assign_contract_number(db: Session, requested: str | None) -> str:
    if requested:
        if contract_repo.get_contract_by_number(db, requested):
            raise DuplicateResourceError(
                f"Contract number {requested} already exists"
            )
        return requested

    for _ in range(CONTRACT_NUMBER_ATTEMPTS):
        candidate = generate_contract_number()
        if not contract_repo.get_contract_by_number(db, candidate):
            return candidate
    raise DuplicateResourceError("Could not allocate a free contract number")


def create_contract(
    db: Session,
    contract_data: dict,
    user_id: str | None = None,
) -> ContractModel:
    """
    Create a new contract together with its side effects.

    - Assigns a generated contract number (CON-<year>-<NNNN>) if none is supplied
    - Creates the review/renewal/expiration milestones when an expiration date is set
    - Writes a CREATE audit entry holding the full input payload

    The contract, each milestone and the audit entry are committed separately.
    """
    fields = dict(contract_data)
    fields["contract_number"] = _assign_contract_number(db, fields.get("contract_number"))

    contract = contract_repo.create_contract(db, **fields)

    for milestone in plan_default_milestones(contract.expiration_date):
        milestone_repo.create_milestone(
            db,
            contract_id=contract.id,
            milestone_type=milestone.milestone_type,
            name=milestone.name,
            due_date=milestone.due_date,
        )

    audit_repo.create_audit_log(
        db,
        contract_id=contract.id,
        action=audit_repo.CREATE,
        user_id=user_id or SYSTEM_USER,
        details={
            "action": "contract_created",
            "details": to_jsonable_python(contract_data),
        },
    )

    logger.info("Created contract %s (%s)", contract.id, contract.contract_number)
    db.refresh(contract)
    return contract


def get_contract_detail(
    db: Session, contract_id: str
) -> tuple[ContractModel, list[AuditLogModel]]:
    """Get a contract plus its 10 most recent audit entries. Milestones load through the relationship."""
    contract = contract_repo.get_contract_by_id(db, contract_id)
    if not contract:
        raise NotFoundError("Contract not found")
    return contract, audit_repo.get_recent_audit_logs(db, contract_id, limit=10)


def update_contract(
    db: Session,
    contract_id: str,
    changes: dict,
    user_id: str | None = None,
) -> ContractModel:
    """
    Update a contract with only the fields that were provided.

    Raises DomainValidationError before touching the database when nothing
    updatable was supplied; no audit entry is written in that case.
    """
    changes = UPDATABLE_CONTRACT_COLUMNS.pick(changes)
    if not changes:
        raise DomainValidationError("No fields to update")

    if not contract_repo.get_contract_by_id(db, contract_id):
        raise NotFoundError("Contract not found")

    new_number = changes.get("contract_number")
    if new_number:
        existing = contract_repo.get_contract_by_number(db, new_number)
        if existing and existing.id != contract_id:
            raise DuplicateResourceError(f"Contract number {new_number} already exists")

    contract = contract_repo.update_contract(db, contract_id, changes)

    audit_repo.create_audit_log(
        db,
        contract_id=contract.id,
        action=audit_repo.UPDATE,
        user_id=user_id or SYSTEM_USER,
        details={
            "action": "contract_updated",
            "changes": to_jsonable_python(changes),
        },
    )

    logger.info("Updated contract %s fields=%s", contract.id, sorted(changes))
    return contract


def terminate_contract(
    db: Session, contract_id: str, user_id: str | None = None
) -> ContractModel:
    """Soft delete a contract and record a DELETE audit entry."""
    contract = contract_repo.terminate_contract(db, contract_id)

    audit_repo.create_audit_log(
        db,
        contract_id=contract.id,
        action=audit_repo.DELETE,
        user_id=user_id or SYSTEM_USER,
        details={"action": "contract_terminated"},
    )

    logger.info("Terminated contract %s", contract.id)
    return contract
