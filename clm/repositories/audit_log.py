from sqlalchemy.orm import Session

from clm.db.models.audit_log import AuditLog as AuditLogModel

CREATE = "CREATE"
UPDATE = "UPDATE"
DELETE = "DELETE"


def create_audit_log(
    db: Session,
    contract_id: str,
    action: str,
    user_id: str,
    details: dict | None = None,
) -> AuditLogModel:
    """Append an audit entry in its own commit. Entries are never updated or deleted."""
    entry = AuditLogModel(
        contract_id=contract_id,
        action=action,
        user_id=user_id,
        details=details or {},
    )
    db.add(entry)
    db.commit()
    db.refresh(entry)
    return entry


def get_recent_audit_logs(
    db: Session, contract_id: str, limit: int = 10
) -> list[AuditLogModel]:
    """Get the most recent audit entries for a contract, newest first."""
    return (
        db.query(AuditLogModel)
        .filter(AuditLogModel.contract_id == contract_id)
        .order_by(AuditLogModel.created_at.desc(), AuditLogModel.id.desc())
        .limit(limit)
        .all()
    )


def get_audit_logs_for_contract(db: Session, contract_id: str) -> list[AuditLogModel]:
    """Full audit history for a contract, oldest first."""
    return (
        db.query(AuditLogModel)
        .filter(AuditLogModel.contract_id == contract_id)
        .order_by(AuditLogModel.id.asc())
        .all()
    )
