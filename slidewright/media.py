"""Media type detection by magic bytes, and extension <-> MIME tables."""

from pathlib import Path

IMAGE_EXTENSIONS = {"png", "jpg", "jpeg", "gif", "bmp", "webp", "svg", "tif", "tiff"}
AUDIO_EXTENSIONS = {"mp3", "wav", "wma", "m4a", "aac", "ogg", "flac"}
VIDEO_EXTENSIONS = {"mp4", "m4v", "mov", "avi", "wmv", "mpg", "mpeg", "webm"}

MIME_TYPES = {
    # images
    "png": "image/png",
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "gif": "image/gif",
    "bmp": "image/bmp",
    "webp": "image/webp",
    "svg": "image/svg+xml",
    "tif": "image/tiff",
    "tiff": "image/tiff",
    # video
    "mp4": "video/mp4",
    "m4v": "video/mp4",
    "mov": "video/quicktime",
    "avi": "video/x-msvideo",
    "wmv": "video/x-ms-wmv",
    "mpg": "video/mpeg",
    "mpeg": "video/mpeg",
    "webm": "video/webm",
    # audio
    "mp3": "audio/mpeg",
    "wav": "audio/wav",
    "wma": "audio/x-ms-wma",
    "m4a": "audio/mp4",
    "aac": "audio/mp4",
    "ogg": "audio/ogg",
    "flac": "audio/flac",
}

# Reverse lookup used for data: URIs and HTTP content types
EXT_FOR_MIME = {
    "image/png": "png",
    "image/jpeg": "jpg",
    "image/jpg": "jpg",
    "image/gif": "gif",
    "image/bmp": "bmp",
    "image/webp": "webp",
    "image/svg+xml": "svg",
    "image/tiff": "tiff",
}


def sniff_image(data: bytes) -> str:
    """Image extension from leading bytes, '' when too short or unknown."""
    if len(data) < 8:
        return ""
    if data[:4] == b"\x89PNG":
        return "png"
    if data[:3] == b"\xff\xd8\xff":
        return "jpeg"
    if data[:3] == b"GIF":
        return "gif"
    if data[:2] == b"BM":
        return "bmp"
    if len(data) >= 12 and data[:4] == b"RIFF" and data[8:12] == b"WEBP":
        return "webp"
    if data[:4] in (b"II*\x00", b"MM\x00*"):
        return "tiff"
    return ""


def sniff_audio(data: bytes) -> str:
    if len(data) < 12:
        return ""
    if data[:3] == b"ID3":
        return "mp3"
    if data[0] == 0xFF and (data[1] & 0xE0) == 0xE0:
        return "mp3"
    if data[:4] == b"RIFF" and data[8:12] == b"WAVE":
        return "wav"
    if data[:4] == b"OggS":
        return "ogg"
    if data[:4] == b"fLaC":
        return "flac"
    if data[4:8] == b"ftyp":
        return "m4a"
    return "mp3"


def sniff_video(data: bytes) -> str:
    if len(data) < 12:
        return ""
    if data[4:8] == b"ftyp":
        return "mp4"
    if data[:4] == b"\x1a\x45\xdf\xa3":
        return "webm"
    if data[:4] == b"RIFF" and data[8:12] == b"AVI ":
        return "avi"
    return "mp4"


def _suffix(path) -> str:
    return Path(str(path)).suffix.lower().lstrip(".")


def image_ext_from_path(path) -> str:
    """Suffix when it names a known image type, else '' so callers sniff the bytes."""
    ext = _suffix(path) if path else ""
    return ext if ext in IMAGE_EXTENSIONS else ""


def audio_ext_from_path(path) -> str:
    ext = _suffix(path)
    if not ext:
        return ""
    return ext if ext in AUDIO_EXTENSIONS else "mp3"


def video_ext_from_path(path) -> str:
    ext = _suffix(path)
    if not ext:
        return ""
    return ext if ext in VIDEO_EXTENSIONS else "mp4"


def mime_for_ext(ext: str) -> str:
    """MIME type for a media extension; unknown extensions map to image/png."""
    return MIME_TYPES.get(ext.lower(), "image/png")


def ext_for_mime(mime: str, default: str = "png") -> str:
    mime = mime.split(";", 1)[0].strip().lower()
    return EXT_FOR_MIME.get(mime, default)
