"""Load receipt images from URLs, data URLs or local paths."""

from __future__ import annotations

import base64
import binascii
import io
import logging
from pathlib import Path
from typing import List, Optional

import httpx
from pdf2image import convert_from_bytes
from PIL import Image, UnidentifiedImageError

logger = logging.getLogger(__name__)

PDF_CONTENT_TYPE = "application/pdf"
MAX_IMAGE_BYTES = 10 * 1024 * 1024  # 10 MiB


class UnsupportedReceiptError(RuntimeError):
    """Raised when a receipt reference cannot be turned into OCR-ready images."""


class ReceiptImageLoader:
    """Resolve an image reference into decoded pages ready for OCR."""

    def __init__(
        self,
        *,
        timeout: float = 20.0,
        max_bytes: int = MAX_IMAGE_BYTES,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._timeout = timeout
        self._max_bytes = max_bytes
        self._transport = transport

    def load(self, image_ref: str) -> List[Image.Image]:
        reference = (image_ref or "").strip()
        if not reference:
            raise UnsupportedReceiptError("Image URL is required.")

        if reference.startswith(("http://", "https://")):
            blob, content_type = self._download(reference)
        elif reference.startswith("data:"):
            blob, content_type = self._decode_data_url(reference)
        else:
            blob, content_type = self._read_file(Path(reference))

        if len(blob) > self._max_bytes:
            raise self._too_large()
        return self._decode(blob, content_type)

    def _download(self, url: str) -> tuple[bytes, Optional[str]]:
        logger.debug("Downloading receipt image url=%s", url)
        with httpx.Client(
            timeout=self._timeout, follow_redirects=True, transport=self._transport
        ) as client:
            with client.stream("GET", url) as response:
                response.raise_for_status()
                declared = response.headers.get("content-length", "")
                if declared.isdigit() and int(declared) > self._max_bytes:
                    raise self._too_large()
                chunks: List[bytes] = []
                received = 0
                for chunk in response.iter_bytes():
                    received += len(chunk)
                    if received > self._max_bytes:
                        raise self._too_large()
                    chunks.append(chunk)
                content_type = response.headers.get("content-type", "").split(";")[0].strip()
        return b"".join(chunks), content_type or None

    def _too_large(self) -> UnsupportedReceiptError:
        return UnsupportedReceiptError(
            f"Receipt exceeds {self._max_bytes // (1024 * 1024)} MiB limit."
        )

    @staticmethod
    def _decode_data_url(reference: str) -> tuple[bytes, Optional[str]]:
        header, _, data = reference.partition(",")
        if not data or ";base64" not in header:
            raise UnsupportedReceiptError("Only base64 encoded data URLs are supported.")
        content_type = header[len("data:") :].split(";")[0] or None
        try:
            return base64.b64decode(data, validate=True), content_type
        except (binascii.Error, ValueError) as exc:
            raise UnsupportedReceiptError("Data URL payload is not valid base64.") from exc

    @staticmethod
    def _read_file(path: Path) -> tuple[bytes, Optional[str]]:
        if not path.is_file():
            raise UnsupportedReceiptError(f"Receipt image {path} does not exist.")
        content_type = PDF_CONTENT_TYPE if path.suffix.lower() == ".pdf" else None
        return path.read_bytes(), content_type

    @staticmethod
    def _decode(blob: bytes, content_type: Optional[str]) -> List[Image.Image]:
        if not blob:
            raise UnsupportedReceiptError("Receipt image is empty.")

        if (content_type or "").lower() == PDF_CONTENT_TYPE or blob.startswith(b"%PDF"):
            try:
                pages = convert_from_bytes(blob, fmt="png")
            except Exception as exc:
                raise UnsupportedReceiptError(
                    "Unable to convert PDF for OCR. Ensure poppler utilities are installed."
                ) from exc
            if not pages:
                raise UnsupportedReceiptError("Receipt PDF does not contain any pages.")
            return pages

        try:
            image = Image.open(io.BytesIO(blob))
            image.load()
        except (UnidentifiedImageError, OSError) as exc:
            raise UnsupportedReceiptError(
                f"Unable to decode receipt image (content type {content_type or 'unknown'})."
            ) from exc
        return [image]


__all__ = ["ReceiptImageLoader", "UnsupportedReceiptError"]
