from sitebuilder.extensions import db
from .base import BaseModel
from .tenant_mixin import TenantMixin

class MediaItem(BaseModel, TenantMixin):
    __tablename__ = "media_items"

    filename = db.Column(db.String(255), nullable=False)
    original_name = db.Column(db.String(255), nullable=False)
    url = db.Column(db.String(512), nullable=False, index=True)
    file_size = db.Column(db.Integer, nullable=False, default=0)
    mime_type = db.Column(db.String(100), nullable=True)
    uploaded_by = db.Column(db.String(36), nullable=True)

    def to_dict(self):
        return {
            "id": self.id,
            "filename": self.filename,
            "original_name": self.original_name,
            "url": self.url,
            "file_size": self.file_size,
            "mime_type": self.mime_type,
            "uploaded_by": self.uploaded_by,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
