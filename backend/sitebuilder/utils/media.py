# sitebuilder/utils/media.py
import logging
import os
import uuid
from dataclasses import dataclass

from PIL import Image, ImageOps
from werkzeug.utils import secure_filename

logger = logging.getLogger(__name__)

ALLOWED_EXTENSIONS = {'png', 'jpg', 'jpeg', 'gif', 'webp'}

THUMBNAIL_SIZE = (200, 200)
THUMBNAIL_DIR = "thumbs"

def allowed_file(filename):
    return '.' in filename and filename.rsplit('.', 1)[1].lower() in ALLOWED_EXTENSIONS


@dataclass
class StoredFile:
    url: str
    path: str
    filename: str
    original_name: str
    file_size: int
    mime_type: str | None


class MediaStorage:
    """
    Local-disk storage for uploaded images, one directory per tenant.
    """

    def __init__(self, upload_folder: str, url_prefix: str = "/uploads"):
        self.upload_folder = upload_folder
        self.url_prefix = url_prefix.rstrip("/")

    def save(self, file, tenant_id: str) -> StoredFile:
        if not file or not file.filename or not allowed_file(file.filename):
            raise ValueError("File type not allowed")

        filename = secure_filename(file.filename)
        ext = filename.rsplit('.', 1)[1].lower()
        unique_filename = f"{uuid.uuid4().hex}.{ext}"

        tenant_folder = os.path.join(self.upload_folder, tenant_id)
        os.makedirs(tenant_folder, exist_ok=True)
        file_path = os.path.join(tenant_folder, unique_filename)

        file.save(file_path)

        return StoredFile(
            url=f"{self.url_prefix}/{tenant_id}/{unique_filename}",
            path=file_path,
            filename=unique_filename,
            original_name=file.filename,
            file_size=os.path.getsize(file_path),
            mime_type=file.mimetype,
        )

    def delete(self, file_url):
        """
        Deletes a stored file given the URL returned by ``save``.
        """
        if not file_url or not file_url.startswith(self.url_prefix + "/"):
            return False

        relative = file_url[len(self.url_prefix) + 1:]
        file_path = os.path.join(self.upload_folder, *relative.split("/"))

        if os.path.exists(file_path):
            try:
                os.remove(file_path)
                return True
            except OSError as e:
                logger.error(f"Failed to delete file {file_path}: {e}")
                return False
        return False

    def thumbnail_path(self, stored: StoredFile) -> str:
        return os.path.join(os.path.dirname(stored.path), THUMBNAIL_DIR, stored.filename)

    def make_thumbnail(self, stored: StoredFile):
        """
        Center-cropped 200x200 copy under <tenant>/thumbs/.

        Returns the thumbnail path, or None when the upload cannot be
        decoded; the upload itself stays usable either way.
        """
        thumb_path = self.thumbnail_path(stored)
        os.makedirs(os.path.dirname(thumb_path), exist_ok=True)

        try:
            with Image.open(stored.path) as img:
                thumb = ImageOps.fit(img, THUMBNAIL_SIZE)
                if thumb.mode not in ("RGB", "L") and stored.filename.endswith((".jpg", ".jpeg")):
                    thumb = thumb.convert("RGB")
                thumb.save(thumb_path)
        except (OSError, ValueError) as e:
            logger.warning(f"Failed to generate thumbnail for {stored.path}: {e}")
            return None

        return thumb_path

    def delete_thumbnail(self, thumb_path):
        if thumb_path and os.path.exists(thumb_path):
            os.remove(thumb_path)
            return True
        return False
