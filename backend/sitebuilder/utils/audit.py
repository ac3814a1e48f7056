from typing import Optional
from sitebuilder.models.audit_log import AuditLog

def log_action(
    session,
    *,
    tenant_id: str,
    actor_id: Optional[str],
    action: str,
    entity_type: str,
    entity_id: Optional[str],
    payload: dict | None = None
):
    if not actor_id or not tenant_id:
        return  # Skip logging if user or tenant context is missing
    log = AuditLog()

    log.actor_id = actor_id
    log.tenant_id = tenant_id
    log.action = action
    log.entity_type = entity_type
    log.entity_id = entity_id
    log.payload = payload or {}

    session.add(log)
