from clm.db.models.contract import Contract
from clm.db.models.milestone import ContractMilestone
from clm.db.models.audit_log import AuditLog

__all__ = ["Contract", "ContractMilestone", "AuditLog"]
