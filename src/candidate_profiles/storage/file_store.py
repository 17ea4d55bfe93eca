"""Local disk storage for uploaded resumes and certificates."""

import logging
import os
import time
from pathlib import Path

from werkzeug.datastructures import FileStorage
from werkzeug.utils import secure_filename

from candidate_profiles.exceptions import StorageError, ValidationError

logger = logging.getLogger(__name__)

ALLOWED_EXTENSIONS = {"pdf", "doc", "docx", "txt", "png", "jpg", "jpeg"}

URL_PREFIX = "/uploads"


def allowed_file(filename: str) -> bool:
    return "." in filename and filename.rsplit(".", 1)[1].lower() in ALLOWED_EXTENSIONS


class LocalFileStore:
    """
    Saves uploads under `upload_folder` as `<millis>-<secure name>`.

    References returned to callers are URL paths (`/uploads/<name>`), which
    the HTTP layer serves back from the same folder.
    """

    def __init__(self, upload_folder: str = "uploads"):
        self.upload_folder = Path(upload_folder)
        self.upload_folder.mkdir(parents=True, exist_ok=True)

    def save(self, upload: FileStorage) -> str:
        """
        Save an uploaded file.

        Args:
            upload: File from the multipart request

        Returns:
            Reference to the stored file, e.g. "/uploads/1700000000000-resume.pdf"

        Raises:
            ValidationError: Missing file name or disallowed extension.
            StorageError: File could not be written.
        """
        original = secure_filename(upload.filename or "")
        if not original:
            raise ValidationError("Uploaded file has no name")
        if not allowed_file(original):
            raise ValidationError(
                f"File type not allowed: {original}. Allowed: {', '.join(sorted(ALLOWED_EXTENSIONS))}"
            )

        filename = f"{int(time.time() * 1000)}-{original}"
        try:
            upload.save(os.fspath(self.upload_folder / filename))
        except OSError as e:
            logger.error(f"Error saving upload {original}: {e}", exc_info=True)
            raise StorageError(f"Failed to save upload {original}") from e

        logger.info(f"Saved upload {filename}")
        return f"{URL_PREFIX}/{filename}"

    def path_for(self, reference: str) -> Path:
        """Resolve a reference produced by `save` to its path on disk."""
        name = reference.rsplit("/", 1)[-1]
        return self.upload_folder / name

    def delete(self, reference: str) -> None:
        """Remove a saved upload. Missing files are ignored."""
        path = self.path_for(reference)
        try:
            path.unlink()
            logger.info(f"Removed upload {path.name}")
        except FileNotFoundError:
            logger.debug(f"Upload already removed: {path.name}")
        except OSError as e:
            logger.error(f"Error removing upload {path.name}: {e}", exc_info=True)
            raise StorageError(f"Failed to remove upload {path.name}") from e
