"""Content category classification for reporting."""

import mimetypes
from enum import Enum
from pathlib import Path

NO_EXTENSION = "noext"

# Media families are matched against fixed tables first; the mimetypes
# lookup only covers extensions missing from them.
_MIME_TYPES = mimetypes.MimeTypes()

IMAGE_EXTENSIONS: frozenset[str] = frozenset(
    {
        # Common formats
        "jpg",
        "jpeg",
        "png",
        "gif",
        "bmp",
        "tiff",
        "tif",
        "webp",
        "svg",
        "ico",
        "avif",
        # RAW formats
        "arw",
        "nef",
        "cr2",
        "cr3",
        "dng",
        "orf",
        "raf",
        "rw2",
        "srw",
        "pef",
        # Apple formats
        "heic",
        "heif",
        # Others
        "psd",
        "psb",
    }
)

VIDEO_EXTENSIONS: frozenset[str] = frozenset(
    {
        "mp4",
        "m4v",
        "mov",
        "mkv",
        "avi",
        "wmv",
        "webm",
        "flv",
        "mpg",
        "mpeg",
        "3gp",
        "3g2",
        "mts",
        "m2ts",
        "ogv",
    }
)

AUDIO_EXTENSIONS: frozenset[str] = frozenset(
    {
        "mp3",
        "m4a",
        "aac",
        "flac",
        "wav",
        "ogg",
        "oga",
        "opus",
        "wma",
        "aif",
        "aiff",
        "mid",
        "midi",
    }
)

DOCUMENT_EXTENSIONS: frozenset[str] = frozenset(
    {
        "pdf",
        "doc",
        "docx",
        "ppt",
        "pptx",
        "xls",
        "xlsx",
        "txt",
        "md",
        "rtf",
        "csv",
        "json",
    }
)

ARCHIVE_EXTENSIONS: frozenset[str] = frozenset({"zip", "7z", "rar", "tar", "gz", "bz2"})

CODE_EXTENSIONS: frozenset[str] = frozenset(
    {
        # Scripting and web
        "js",
        "ts",
        "tsx",
        "jsx",
        "py",
        "rb",
        "php",
        "sh",
        # Compiled
        "go",
        "java",
        "kt",
        "rs",
        "c",
        "cpp",
        "h",
        "hpp",
        "cs",
        # Config
        "yaml",
        "yml",
        "toml",
    }
)


class Category(str, Enum):
    """Human-facing content category of a file."""

    IMAGES = "Images"
    VIDEOS = "Videos"
    AUDIO = "Audio"
    DOCUMENTS = "Documents"
    ARCHIVES = "Archives"
    CODE = "Code"
    OTHER = "Other"


_MIME_FAMILIES = {
    "image": Category.IMAGES,
    "video": Category.VIDEOS,
    "audio": Category.AUDIO,
}


def normalize_extension(path: str | Path) -> str:
    """Return the lower-cased last extension of a path without the dot, or ''."""
    return Path(path).suffix[1:].lower()


def classify(path: str | Path) -> tuple[Category, str]:
    """Classify a path by its extension.

    Only the extension is considered; file contents are never read.

    Args:
        path: Path of the file to classify.

    Returns:
        Tuple of (category, normalized extension). Files without an
        extension report the extension as ``noext``.
    """
    ext = normalize_extension(path)
    return _category_for_extension(ext), ext or NO_EXTENSION


def _category_for_extension(ext: str) -> Category:
    if not ext:
        return Category.OTHER

    media = _media_category(ext)
    if media is not None:
        return media

    if ext in DOCUMENT_EXTENSIONS:
        return Category.DOCUMENTS
    if ext in ARCHIVE_EXTENSIONS:
        return Category.ARCHIVES
    if ext in CODE_EXTENSIONS:
        return Category.CODE
    return Category.OTHER


def _media_category(ext: str) -> Category | None:
    if ext in IMAGE_EXTENSIONS:
        return Category.IMAGES
    if ext in VIDEO_EXTENSIONS:
        return Category.VIDEOS
    if ext in AUDIO_EXTENSIONS:
        return Category.AUDIO

    # Fallback for media extensions missing from the tables, e.g. "jp2".
    # "ts" is TypeScript here, never an MPEG transport stream.
    if ext in CODE_EXTENSIONS:
        return None
    mime_type, _ = _MIME_TYPES.guess_type(f"file.{ext}", strict=False)
    if mime_type:
        return _MIME_FAMILIES.get(mime_type.split("/", 1)[0])
    return None
