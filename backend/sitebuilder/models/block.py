from sitebuilder.extensions import db
from .base import BaseModel
from .tenant_mixin import TenantMixin
from .soft_delete_mixin import SoftDeleteMixin

class Block(BaseModel, TenantMixin, SoftDeleteMixin):
    __tablename__ = "blocks"

    page_id = db.Column(db.String(36), db.ForeignKey("pages.id"), nullable=False)
    type = db.Column(db.String(32), nullable=False)  # text, heading, image, quote, button, video, spacer, contact, columns
    order = db.Column(db.Integer, nullable=False, default=0)
    payload = db.Column(db.JSON, nullable=False, default=dict)

    # Relationship to parent Page
    page = db.relationship("Page", back_populates="blocks")

    # No unique constraint on (page_id, order): soft-deleted rows keep their
    # order value and an adjacent swap passes through an intermediate state.
    __table_args__ = (
        db.Index("idx_block_page_order", "page_id", "order"),
    )
