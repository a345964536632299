"""Image sources for the HTML front end: local paths, http(s) URLs and data: URIs."""

import base64
import binascii
import io
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional
from urllib.parse import unquote_to_bytes, urlparse

import requests
from PIL import Image

from .media import ext_for_mime, image_ext_from_path, sniff_image
from .units import SlidewrightError

logger = logging.getLogger("slidewright.html")

USER_AGENT = ("Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
              "(KHTML, like Gecko) Chrome/91.0.4472.124 Safari/537.36")
DEFAULT_TIMEOUT = 30.0


class ImageSourceError(SlidewrightError):
    """An <img> source could not be read, downloaded or decoded."""


@dataclass
class ResolvedImage:
    data: bytes
    ext: str
    width_px: int = 0               # intrinsic size, 0 when Pillow can't read it
    height_px: int = 0

    @property
    def has_size(self) -> bool:
        return self.width_px > 0 and self.height_px > 0


def intrinsic_size(data: bytes) -> tuple:
    """(width, height) in pixels, or (0, 0)."""
    try:
        with Image.open(io.BytesIO(data)) as img:
            return img.size
    except (OSError, ValueError):
        return 0, 0


def _b64_variants(payload: str):
    yield payload
    standard = payload.translate(str.maketrans("-_", "+/"))
    yield standard
    yield standard + "=" * (-len(standard) % 4)


def decode_data_uri(uri: str) -> tuple:
    """'data:image/png;base64,...' -> (bytes, ext).

    Base64 payloads are tried as standard, URL-safe, then URL-safe with padding restored.
    """
    content = uri[len("data:"):] if uri.startswith("data:") else uri
    header, sep, payload = content.partition(",")
    if not sep:
        raise ImageSourceError("data URI has no ',' separator")

    params = header.split(";")
    ext = ext_for_mime(params[0] or "image/png")
    if "base64" not in (p.strip().lower() for p in params[1:]):
        return unquote_to_bytes(payload), ext

    payload = "".join(payload.split())
    for candidate in _b64_variants(payload):
        try:
            return base64.b64decode(candidate, validate=True), ext
        except binascii.Error:
            continue
    raise ImageSourceError("undecodable base64 payload in data URI")


class ImageResolver:
    """Turns an <img src> into bytes; one instance per conversion.

    A session created here is closed by ``close()`` or on leaving a ``with``
    block; a session passed in belongs to the caller.
    """

    def __init__(self, base_dir=None, timeout: float = DEFAULT_TIMEOUT,
                 session: Optional[requests.Session] = None):
        self.base_dir = Path(base_dir) if base_dir else None
        self.timeout = timeout
        self._owns_session = session is None
        self.session = session or requests.Session()

    def __enter__(self) -> "ImageResolver":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def close(self) -> None:
        if self._owns_session:
            self.session.close()

    def resolve(self, src: str) -> ResolvedImage:
        if src.startswith("data:"):
            data, ext = decode_data_uri(src)
        elif src.startswith(("http://", "https://")):
            data, ext = self._download(src)
        else:
            data, ext = self._read_local(src)
        if not data:
            raise ImageSourceError(f"empty image: {src[:80]}")
        ext = ext or sniff_image(data) or "png"
        width, height = intrinsic_size(data)
        return ResolvedImage(data=data, ext=ext, width_px=width, height_px=height)

    def _read_local(self, src: str) -> tuple:
        path = Path(src)
        if not path.is_absolute() and self.base_dir is not None:
            path = self.base_dir / path
        try:
            return path.read_bytes(), image_ext_from_path(path)
        except OSError as e:
            raise ImageSourceError(f"cannot read {path}: {e}") from e

    def _download(self, url: str) -> tuple:
        logger.debug("downloading image %s", url)
        try:
            resp = self.session.get(url, headers={"User-Agent": USER_AGENT}, timeout=self.timeout)
        except requests.RequestException as e:
            raise ImageSourceError(f"download failed for {url}: {e}") from e
        if resp.status_code != 200:
            raise ImageSourceError(f"HTTP {resp.status_code} for {url}")

        ext = image_ext_from_path(urlparse(url).path)
        if not ext:
            ext = ext_for_mime(resp.headers.get("Content-Type", ""), default="")
        logger.debug("downloaded %d bytes (%s)", len(resp.content), ext or "?")
        return resp.content, ext
