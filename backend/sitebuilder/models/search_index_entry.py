from sitebuilder.extensions import db
from .base import BaseModel
from .tenant_mixin import TenantMixin

class SearchIndexEntry(BaseModel, TenantMixin):
    """Derived plain-text copy of a page; regenerated, never edited."""

    __tablename__ = "search_index_entries"

    page_id = db.Column(db.String(36), db.ForeignKey("pages.id"), nullable=False, unique=True)
    title = db.Column(db.String(200), nullable=False)
    content = db.Column(db.Text, nullable=False, default="")

    page = db.relationship("Page")
