from sitebuilder.extensions import db
from .base import BaseModel
from .tenant_mixin import TenantMixin
from .soft_delete_mixin import SoftDeleteMixin

class Page(BaseModel, TenantMixin, SoftDeleteMixin):
    __tablename__ = 'pages'

    title = db.Column(db.String(200), nullable=False)
    slug = db.Column(db.String(200), nullable=False, index=True)
    published = db.Column(db.Boolean, nullable=False, default=False, index=True)

    __table_args__ = (
        db.UniqueConstraint("tenant_id", "slug", name="uq_page_slug_per_tenant"),
    )

    # Includes soft-deleted rows; read paths filter on deleted_at
    blocks = db.relationship(
        "Block",
        back_populates="page",
        order_by="Block.order",
    )
