"""Content-addressable storage for item photos.

Every blob is named after the SHA-256 digest of its bytes, so uploading the
same photo twice always yields the same name and a single file on disk.
Blobs are never overwritten or deleted once written.
"""

import hashlib
import logging
import os
import tempfile
from pathlib import Path
from typing import Optional

from PIL import Image, UnidentifiedImageError

from ..errors import ImageNotFound, InvalidImageName, StorageError
from ..log import get_logger
from .models import StoredImage

DEFAULT_IMAGE_NAME = "default.jpg"


class ImageStore:
    """Stores image blobs by content hash and resolves requested names safely."""

    IMAGE_SUFFIXES = (".jpg", ".jpeg")
    STORED_SUFFIX = ".jpg"

    def __init__(self, image_dir: str | Path = "images", logger: Optional[logging.Logger] = None):
        self.image_dir = Path(image_dir).resolve()
        self.logger = get_logger(__name__, logger)
        try:
            self.image_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageError(f"failed to create image directory {self.image_dir}: {e}") from e

    @staticmethod
    def compute_hash(data: bytes) -> str:
        """Compute the SHA-256 hash of the given bytes as lowercase hex."""
        return hashlib.sha256(data).hexdigest()

    @classmethod
    def stable_name(cls, data: bytes) -> str:
        """Return the file name under which ``data`` is stored."""
        return f"{cls.compute_hash(data)}{cls.STORED_SUFFIX}"

    @property
    def default_path(self) -> Path:
        return self.image_dir / DEFAULT_IMAGE_NAME

    def put(self, data: bytes) -> str:
        """Store image bytes and return their stable name.

        Storing content that already exists is a no-op returning the same name.
        """
        name = self.stable_name(data)
        path = self.image_dir / name

        try:
            path.stat()
        except FileNotFoundError:
            pass
        except OSError as e:
            raise StorageError(f"error checking image existence: {e}") from e
        else:
            self.logger.debug("image already stored: %s", name)
            return name

        self._write(path, data)
        self.logger.info("stored image %s (%d bytes)", name, len(data))
        return name

    def _write(self, path: Path, data: bytes) -> None:
        """Write ``data`` to ``path`` via a temporary file in the same directory."""
        tmp_name = None
        try:
            with tempfile.NamedTemporaryFile(
                dir=self.image_dir, prefix=".upload-", suffix=".tmp", delete=False
            ) as tmp:
                tmp_name = tmp.name
                tmp.write(data)
            os.chmod(tmp_name, 0o644)
            os.replace(tmp_name, path)
        except OSError as e:
            if tmp_name is not None and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise StorageError(f"failed to write image file: {e}") from e

    def resolve(self, name: str) -> Path:
        """Resolve an untrusted file name to an existing blob path.

        Raises:
            InvalidImageName: If the name is empty, escapes the image
                directory, or is not a .jpg/.jpeg name
            ImageNotFound: If the name is valid but no such blob exists
        """
        if not name:
            raise InvalidImageName("filename is required")
        if "\x00" in name:
            raise InvalidImageName("filename contains a NUL byte")
        if os.path.isabs(name):
            raise InvalidImageName(f"invalid image path: {name}")

        candidate = os.path.normpath(os.path.join(self.image_dir, name))

        # directory traversal
        rel = os.path.relpath(candidate, self.image_dir)
        if rel == os.pardir or rel.startswith(os.pardir + os.sep):
            raise InvalidImageName(f"invalid image path: {name}")

        if not candidate.endswith(self.IMAGE_SUFFIXES):
            raise InvalidImageName(f"image path does not end with .jpg or .jpeg: {name}")

        path = Path(candidate)
        if not path.is_file():
            raise ImageNotFound(path)
        return path

    def resolve_or_default(self, name: str) -> Path:
        """Resolve ``name``, substituting the default image when it is absent.

        Invalid names still raise ``InvalidImageName``.
        """
        try:
            return self.resolve(name)
        except ImageNotFound as e:
            self.logger.debug("image not found, using default: %s", e.path)
            return self.default_path

    def read(self, name: str) -> bytes:
        """Return the bytes of a stored blob."""
        path = self.resolve(name)
        try:
            return path.read_bytes()
        except OSError as e:
            raise StorageError(f"failed to read image {name}: {e}") from e

    def ensure_default_image(self, size: tuple[int, int] = (64, 64)) -> Path:
        """Create a grey placeholder ``default.jpg`` if none exists yet."""
        path = self.default_path
        if path.exists():
            return path
        try:
            Image.new("RGB", size, color=(200, 200, 200)).save(path, format="JPEG")
        except OSError as e:
            raise StorageError(f"failed to write default image: {e}") from e
        self.logger.info("created placeholder default image at %s", path)
        return path

    def list_images(self) -> list[StoredImage]:
        """List stored blobs with their size and pixel dimensions.

        The default image is excluded. Dimensions are None for blobs that
        Pillow cannot decode.
        """
        images = []
        for path in sorted(self.image_dir.glob(f"*{self.STORED_SUFFIX}")):
            if path.name == DEFAULT_IMAGE_NAME or not path.is_file():
                continue
            width = height = None
            try:
                with Image.open(path) as img:
                    width, height = img.size
            except (UnidentifiedImageError, OSError):
                self.logger.debug("could not decode %s", path.name)
            images.append(
                StoredImage(
                    name=path.name,
                    size=path.stat().st_size,
                    width=width,
                    height=height,
                )
            )
        return images
