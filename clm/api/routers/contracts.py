from decimal import Decimal
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import StreamingResponse
from sqlalchemy.orm import Session

import clm.repositories.contract as contract_repo
import clm.repositories.milestone as milestone_repo
from clm.api.deps import get_db, get_user_id
from clm.errors import DomainValidationError, NotFoundError
from clm.schemas.contract import (
    AuditLogEntry,
    Contract,
    ContractCreate,
    ContractDetail,
    ContractUpdate,
    DashboardStats,
    UpcomingReview,
)
from clm.schemas.pagination import (
    ApiResponse,
    FilterResponse,
    PaginatedResponse,
    Pagination,
    SearchResponse,
    WindowedResponse,
)
from clm.services.contract import (
    create_contract,
    get_contract_detail,
    terminate_contract,
    update_contract,
)
from clm.services.export import contract_csv_row, iter_csv

router = APIRouter(prefix="/contracts", tags=["contracts"])

EXPORT_FILENAME = "contracts_export.csv"


def _contracts(rows) -> list[Contract]:
    return [Contract.model_validate(row) for row in rows]


@router.get("", response_model=PaginatedResponse[Contract])
def get_all_contracts(
    page: int = Query(1, ge=1, description="Page number (1-indexed)"),
    limit: int = Query(20, ge=1, le=100, description="Number of items per page"),
    status_filter: str | None = Query(None, alias="status"),
    contract_type: str | None = Query(None, alias="type"),
    search: str | None = Query(None, description="Full-text search term"),
    db: Session = Depends(get_db),
):
    """
    Get all contracts with pagination and optional filters.

    Filters that are omitted do not restrict the result.
    """
    contracts, total = contract_repo.get_contracts_paginated(
        db,
        page=page,
        limit=limit,
        status=status_filter,
        type=contract_type,
        search=search,
    )
    return PaginatedResponse[Contract](
        data=_contracts(contracts),
        pagination=Pagination.build(page=page, limit=limit, total=total),
    )


@router.post("", response_model=ApiResponse[Contract], status_code=status.HTTP_201_CREATED)
def create_new_contract(
    contract_data: ContractCreate,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_user_id),
):
    """
    Create a new contract. Milestones are generated when an expiration date is given.
    """
    contract = create_contract(db, contract_data.model_dump(), user_id=user_id)
    return ApiResponse[Contract](
        data=Contract.model_validate(contract),
        message="Contract created successfully",
    )


@router.get("/stats", response_model=ApiResponse[DashboardStats])
def get_stats(db: Session = Depends(get_db)):
    """Dashboard statistics."""
    stats = contract_repo.get_dashboard_stats(db)
    return ApiResponse[DashboardStats](data=DashboardStats(**stats))


@router.get("/search", response_model=SearchResponse[Contract])
def search(
    q: str | None = Query(None, description="Keyword to look for"),
    db: Session = Depends(get_db),
):
    """Search contracts by keyword."""
    if not q or not q.strip():
        raise DomainValidationError('Search query parameter "q" is required')

    contracts = contract_repo.search_contracts(db, q.strip())
    return SearchResponse[Contract](
        data=_contracts(contracts), count=len(contracts), query=q
    )


@router.get("/filter", response_model=FilterResponse[Contract])
def filter_contracts(
    status_filter: str | None = Query(None, alias="status"),
    contract_type: str | None = Query(None, alias="type"),
    owner_user_id: str | None = Query(None),
    min_value: Decimal | None = Query(None, ge=0),
    max_value: Decimal | None = Query(None, ge=0),
    db: Session = Depends(get_db),
):
    """Filter contracts by criteria."""
    if min_value is not None and max_value is not None and min_value > max_value:
        raise DomainValidationError("min_value cannot be greater than max_value")

    contracts = contract_repo.filter_contracts(
        db,
        status=status_filter,
        type=contract_type,
        owner_user_id=owner_user_id,
        min_value=min_value,
        max_value=max_value,
    )
    filters = {
        "status": status_filter,
        "type": contract_type,
        "owner_user_id": owner_user_id,
        "min_value": min_value,
        "max_value": max_value,
    }
    return FilterResponse[Contract](
        data=_contracts(contracts),
        count=len(contracts),
        filters={key: value for key, value in filters.items() if value is not None},
    )


@router.get("/expiring-soon", response_model=ApiResponse[list[Contract]])
def get_expiring_soon(
    days: int = Query(30, ge=0, le=3650, description="Look-ahead window in days"),
    db: Session = Depends(get_db),
):
    """Active contracts expiring soon."""
    contracts = contract_repo.get_expiring_soon(db, days=days)
    return ApiResponse[list[Contract]](data=_contracts(contracts), count=len(contracts))


@router.get("/upcoming-reviews", response_model=WindowedResponse[UpcomingReview])
def get_upcoming_reviews(
    days: int = Query(30, ge=0, le=3650, description="Look-ahead window in days"),
    db: Session = Depends(get_db),
):
    """Upcoming review dates."""
    reviews = [
        UpcomingReview(
            milestone_id=milestone.id,
            contract_id=contract.id,
            contract_number=contract.contract_number,
            title=contract.title,
            counterparty_name=contract.counterparty_name,
            status=contract.status,
            name=milestone.name,
            due_date=milestone.due_date,
            assignee_email=milestone.assignee_email,
        )
        for milestone, contract in milestone_repo.get_upcoming_reviews(db, days=days)
    ]
    return WindowedResponse[UpcomingReview](data=reviews, count=len(reviews), days=days)


@router.get("/export/csv", response_class=StreamingResponse)
def export_csv(db: Session = Depends(get_db)):
    """Export to CSV."""
    contracts = contract_repo.get_all_contracts(db)
    if not contracts:
        raise NotFoundError("No contracts to export")

    # Rows are materialized before the session is released.
    rows = [contract_csv_row(contract) for contract in contracts]
    return StreamingResponse(
        iter_csv(rows),
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{EXPORT_FILENAME}"'},
    )


@router.get("/{contract_id}", response_model=ApiResponse[ContractDetail])
def get_contract_by_id(contract_id: UUID, db: Session = Depends(get_db)):
    """
    Get a contract by ID, with its milestones and its 10 most recent audit entries.
    """
    contract, audit_logs = get_contract_detail(db, str(contract_id))
    detail = ContractDetail.model_validate(contract).model_copy(
        update={"audit_logs": [AuditLogEntry.model_validate(entry) for entry in audit_logs]}
    )
    return ApiResponse[ContractDetail](data=detail)


@router.put("/{contract_id}", response_model=ApiResponse[Contract])
def update_contract_by_id(
    contract_id: UUID,
    contract_data: ContractUpdate,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_user_id),
):
    """
    Update a contract.

    Fields not included in the request are not updated.
    To clear an optional field (set to null), explicitly include it with null value.
    """
    changes = contract_data.model_dump(exclude_unset=True)
    contract = update_contract(db, str(contract_id), changes, user_id=user_id)
    return ApiResponse[Contract](
        data=Contract.model_validate(contract),
        message="Contract updated successfully",
    )


@router.delete("/{contract_id}", response_model=ApiResponse[Contract])
def delete_contract_by_id(
    contract_id: UUID,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_user_id),
):
    """
    Delete (terminate) a contract. The record is kept with status "terminated".
    """
    contract = terminate_contract(db, str(contract_id), user_id=user_id)
    return ApiResponse[Contract](
        data=Contract.model_validate(contract),
        message="Contract terminated successfully",
    )
