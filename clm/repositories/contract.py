from datetime import date, datetime, timedelta, timezone
from decimal import Decimal

from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from clm.db.models.contract import Contract as ContractModel
from clm.domain.columns import FILTERABLE_CONTRACT_COLUMNS, UPDATABLE_CONTRACT_COLUMNS
from clm.domain.contract_status import ACTIVE, TERMINATED
from clm.errors import NotFoundError


def get_contract_by_id(db: Session, contract_id: str) -> ContractModel | None:
    """Get a contract by ID."""
    return db.query(ContractModel).filter(ContractModel.id == contract_id).first()


def get_contract_by_number(db: Session, contract_number: str) -> ContractModel | None:
    """Get a contract by its human-readable number. Used to check for duplicates."""
    return (
        db.query(ContractModel)
        .filter(ContractModel.contract_number == contract_number)
        .first()
    )


def get_all_contracts(db: Session) -> list[ContractModel]:
    """Get all contracts, newest first."""
    return db.query(ContractModel).order_by(ContractModel.created_at.desc()).all()


def create_contract(db: Session, **fields) -> ContractModel:
    """Create a new contract in the database. Pure data access - no business logic."""
    db_contract = ContractModel(**UPDATABLE_CONTRACT_COLUMNS.pick(fields))
    db.add(db_contract)
    db.commit()
    db.refresh(db_contract)
    return db_contract


def update_contract(db: Session, contract_id: str, changes: dict) -> ContractModel:
    """
    Update a contract. Only allowed columns present in `changes` are written;
    updated_at is always refreshed.
    """
    contract = get_contract_by_id(db, contract_id)
    if not contract:
        raise NotFoundError("Contract not found")

    for column, value in UPDATABLE_CONTRACT_COLUMNS.pick(changes).items():
        setattr(contract, column, value)
    contract.updated_at = datetime.now(timezone.utc)

    db.commit()
    db.refresh(contract)
    return contract


def terminate_contract(db: Session, contract_id: str) -> ContractModel:
    """Soft delete: mark the contract terminated. The row is kept."""
    contract = get_contract_by_id(db, contract_id)
    if not contract:
        raise NotFoundError("Contract not found")

    contract.status = TERMINATED
    contract.updated_at = datetime.now(timezone.utc)

    db.commit()
    db.refresh(contract)
    return contract


LIKE_ESCAPE = "\\"


def _contains_pattern(term: str) -> str:
    """LIKE pattern matching `term` literally, wildcards included."""
    escaped = (
        term.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )
    return f"%{escaped}%"


def full_text_predicate(dialect_name: str, term: str):
    """Match `term` against title, description and counterparty name.

    PostgreSQL uses its full-text search; other dialects (SQLite in tests)
    fall back to a case-insensitive substring match.
    """
    if dialect_name == "postgresql":
        document = (
            func.coalesce(ContractModel.title, "")
            + " "
            + func.coalesce(ContractModel.description, "")
            + " "
            + func.coalesce(ContractModel.counterparty_name, "")
        )
        return func.to_tsvector("english", document).op("@@")(
            func.plainto_tsquery("english", term)
        )

    pattern = _contains_pattern(term)
    return or_(
        ContractModel.title.ilike(pattern, escape=LIKE_ESCAPE),
        ContractModel.description.ilike(pattern, escape=LIKE_ESCAPE),
        ContractModel.counterparty_name.ilike(pattern, escape=LIKE_ESCAPE),
    )


def get_contracts_paginated(
    db: Session,
    page: int = 1,
    limit: int = 20,
    status: str | None = None,
    type: str | None = None,
    search: str | None = None,
) -> tuple[list[ContractModel], int]:
    """
    Get contracts with pagination and optional filters.

    Args:
        page: Page number (1-indexed)
        limit: Number of items per page
        status: Optional exact match on status
        type: Optional exact match on type
        search: Optional full-text search term

    Returns:
        Tuple of (list of contracts, total count)
    """
    query = db.query(ContractModel).filter(
        *FILTERABLE_CONTRACT_COLUMNS.sqlalchemy_equals_predicates(
            ContractModel, {"status": status, "type": type}
        )
    )

    if search:
        query = query.filter(full_text_predicate(db.get_bind().dialect.name, search))

    total = query.count()
    skip = (page - 1) * limit
    contracts = (
        query.order_by(ContractModel.created_at.desc())
        .offset(skip)
        .limit(limit)
        .all()
    )
    return contracts, total


def search_contracts(db: Session, term: str) -> list[ContractModel]:
    """Case-insensitive keyword search over the descriptive and counterparty fields."""
    pattern = _contains_pattern(term)
    return (
        db.query(ContractModel)
        .filter(
            or_(
                ContractModel.title.ilike(pattern, escape=LIKE_ESCAPE),
                ContractModel.description.ilike(pattern, escape=LIKE_ESCAPE),
                ContractModel.counterparty_name.ilike(pattern, escape=LIKE_ESCAPE),
                ContractModel.counterparty_email.ilike(pattern, escape=LIKE_ESCAPE),
            )
        )
        .order_by(ContractModel.created_at.desc())
        .all()
    )


def filter_contracts(
    db: Session,
    status: str | None = None,
    type: str | None = None,
    owner_user_id: str | None = None,
    min_value: Decimal | None = None,
    max_value: Decimal | None = None,
) -> list[ContractModel]:
    """Filter contracts by any combination of criteria. Value bounds are inclusive."""
    query = db.query(ContractModel).filter(
        *FILTERABLE_CONTRACT_COLUMNS.sqlalchemy_equals_predicates(
            ContractModel,
            {"status": status, "type": type, "owner_user_id": owner_user_id},
        )
    )

    if min_value is not None:
        query = query.filter(ContractModel.contract_value >= min_value)
    if max_value is not None:
        query = query.filter(ContractModel.contract_value <= max_value)

    return query.order_by(ContractModel.created_at.desc()).all()


def _expiring_within(days: int, as_of: date):
    return (
        ContractModel.status == ACTIVE,
        ContractModel.expiration_date.between(as_of, as_of + timedelta(days=days)),
    )


def get_expiring_soon(
    db: Session, days: int = 30, as_of: date | None = None
) -> list[ContractModel]:
    """Active contracts expiring between today and today + days, soonest first."""
    as_of = as_of or date.today()
    return (
        db.query(ContractModel)
        .filter(*_expiring_within(days, as_of))
        .order_by(ContractModel.expiration_date.asc())
        .all()
    )


def get_dashboard_stats(db: Session, as_of: date | None = None) -> dict:
    """Aggregate counts for the dashboard. The expiring-soon window is fixed at 30 days."""
    as_of = as_of or date.today()

    total = db.query(func.count(ContractModel.id)).scalar()
    active = (
        db.query(func.count(ContractModel.id))
        .filter(ContractModel.status == ACTIVE)
        .scalar()
    )
    expiring_soon = (
        db.query(func.count(ContractModel.id))
        .filter(*_expiring_within(30, as_of))
        .scalar()
    )
    by_type = (
        db.query(ContractModel.type, func.count(ContractModel.id))
        .group_by(ContractModel.type)
        .order_by(ContractModel.type)
        .all()
    )
    by_status = (
        db.query(ContractModel.status, func.count(ContractModel.id))
        .group_by(ContractModel.status)
        .order_by(ContractModel.status)
        .all()
    )

    return {
        "total": total,
        "active": active,
        "expiring_soon": expiring_soon,
        "by_type": [{"type": t, "count": c} for t, c in by_type],
        "by_status": [{"status": s, "count": c} for s, c in by_status],
    }
