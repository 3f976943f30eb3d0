# 📄 File: plant_health/shared/infrastructure/storage/supabase_storage.py

# 🧭 Purpose (Layman Explanation):
# Puts plant photos into cloud storage, in a folder per user, and hands back a web address
# anyone (including the AI that looks at the photo) can open.

# 🧪 Purpose (Technical Summary):
# Supabase Storage wrapper: validates image bytes with Pillow (size, real image, allowed
# format), builds an owner-namespaced timestamped object path, performs a single upload
# attempt and resolves the public URL. Supabase's sync client runs in a worker thread.

# 🔗 Dependencies:
# - supabase: Storage client
# - PIL (Pillow): Image verification and format detection
# - asyncio: Offloading blocking storage calls

# 🔄 Connected Modules / Calls From:
# Called by: plant_diagnosis SupabasePlantImageStore (upload stage of the pipeline)
# Connects to: Supabase cloud storage bucket 'plant-images'

import asyncio
import io
import time
from dataclasses import dataclass
from typing import List, Optional

from PIL import Image, UnidentifiedImageError
from supabase import Client

from plant_health.shared.core.exceptions import (
    FileTooLargeError,
    InvalidFileTypeError,
    StorageWriteError,
    ValidationError,
)
from plant_health.shared.utils.logging import get_logger

logger = get_logger(__name__)

# Pillow format name -> (mime type, file extension)
IMAGE_FORMATS = {
    "JPEG": ("image/jpeg", "jpg"),
    "PNG": ("image/png", "png"),
    "WEBP": ("image/webp", "webp"),
    "GIF": ("image/gif", "gif"),
    "HEIF": ("image/heif", "heic"),
    "BMP": ("image/bmp", "bmp"),
}


@dataclass(frozen=True)
class StoredImage:
    """Result of a successful upload."""
    path: str
    public_url: str
    mime_type: str
    size_bytes: int


class SupabaseStorageClient:
    """
    Supabase Storage client for plant photos.

    Handles:
    - Image validation (size, decodable image, allowed format)
    - Owner-namespaced object paths (``<owner_id>/<epoch millis>.<ext>``)
    - Single-attempt uploads with no overwrite
    - Public URL resolution
    """

    def __init__(
        self,
        client: Client,
        bucket_name: str = "plant-images",
        max_file_size: int = 10 * 1024 * 1024,
        allowed_formats: Optional[List[str]] = None,
    ):
        self.client = client
        self.bucket_name = bucket_name
        self.max_file_size = max_file_size
        self.allowed_formats = [fmt.upper() for fmt in (allowed_formats or ["JPEG", "PNG", "WEBP", "GIF"])]

    def _inspect_image(self, image_data: bytes, filename: Optional[str]) -> str:
        """
        Validate the image and return its Pillow format name.

        Raises:
            ValidationError: If no bytes were supplied
            FileTooLargeError: If the image exceeds the size limit
            InvalidFileTypeError: If the bytes are not an allowed image
        """
        if not image_data:
            raise ValidationError("An image is required", field="image")

        if len(image_data) > self.max_file_size:
            raise FileTooLargeError(
                f"Image size {len(image_data)} exceeds maximum {self.max_file_size} bytes",
                max_size_mb=round(self.max_file_size / (1024 * 1024), 2),
                actual_size_mb=round(len(image_data) / (1024 * 1024), 2),
                filename=filename,
            )

        try:
            with Image.open(io.BytesIO(image_data)) as img:
                image_format = img.format
                img.verify()
        except (UnidentifiedImageError, OSError, SyntaxError) as e:
            raise InvalidFileTypeError(
                f"Invalid image file: {e}",
                filename=filename,
                expected_types=self.allowed_formats,
            ) from e

        # Multi-picture JPEGs from phone cameras open as MPO
        if image_format == "MPO":
            image_format = "JPEG"

        if image_format not in self.allowed_formats or image_format not in IMAGE_FORMATS:
            raise InvalidFileTypeError(
                f"Image format {image_format} not allowed",
                filename=filename,
                expected_types=self.allowed_formats,
                actual_type=image_format,
            )

        return image_format

    def _generate_file_path(self, owner_id: str, extension: str) -> str:
        """Owner folder plus a millisecond timestamp, e.g. ``<uuid>/1718000000000.jpg``."""
        return f"{owner_id}/{int(time.time() * 1000)}.{extension}"

    async def upload_image(
        self,
        owner_id: str,
        image_data: bytes,
        filename: Optional[str] = None,
    ) -> StoredImage:
        """
        Upload a plant photo and return its public location.

        Args:
            owner_id: Owning user's id, used as the top-level folder
            image_data: Raw image bytes
            filename: Original filename, for error details only

        Returns:
            StoredImage with the object path and public URL

        Raises:
            ValidationError / FileTooLargeError / InvalidFileTypeError: bad input
            StorageWriteError: quota, network or permission failure
        """
        image_format = self._inspect_image(image_data, filename)
        mime_type, extension = IMAGE_FORMATS[image_format]
        storage_path = self._generate_file_path(owner_id, extension)
        bucket = self.client.storage.from_(self.bucket_name)

        started = time.perf_counter()
        try:
            await asyncio.to_thread(
                bucket.upload,
                path=storage_path,
                file=image_data,
                file_options={
                    "content-type": mime_type,
                    "cache-control": "3600",
                    "upsert": "false",
                },
            )
            public_url = await asyncio.to_thread(bucket.get_public_url, storage_path)
        except Exception as e:
            logger.log_external_call(
                "supabase_storage", "upload", (time.perf_counter() - started) * 1000, status="error",
                extra={"path": storage_path, "error": str(e)},
            )
            raise StorageWriteError(
                f"Failed to upload image: {e}",
                bucket=self.bucket_name,
                path=storage_path,
                reason=type(e).__name__,
            ) from e

        logger.log_external_call(
            "supabase_storage", "upload", (time.perf_counter() - started) * 1000,
            extra={"path": storage_path, "size_bytes": len(image_data)},
        )

        if not public_url:
            raise StorageWriteError(
                "Storage did not return a public URL",
                bucket=self.bucket_name,
                path=storage_path,
            )

        return StoredImage(
            path=storage_path,
            public_url=public_url.rstrip("?"),
            mime_type=mime_type,
            size_bytes=len(image_data),
        )
