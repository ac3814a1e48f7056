from sitebuilder.extensions import db

class TenantMixin:
    tenant_id = db.Column(
        db.String(36),
        db.ForeignKey('tenants.id'),
        nullable=False,
        index=True
    )
