import asyncio
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, FrozenSet, List, Optional

from content_gallery.api.schemas import ContentCreate

logger = logging.getLogger("contentgallery.scan")

IMAGE_EXTENSIONS: FrozenSet[str] = frozenset({".jpg", ".jpeg", ".png", ".gif", ".webp", ".bmp"})
VIDEO_EXTENSIONS: FrozenSet[str] = frozenset({".mp4", ".mov", ".avi", ".mkv", ".webm", ".m4v"})

DEFAULT_MIME_TYPE = "application/octet-stream"
MIME_TYPES: Dict[str, str] = {
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".png": "image/png",
    ".gif": "image/gif",
    ".webp": "image/webp",
    ".bmp": "image/bmp",
    ".mp4": "video/mp4",
    ".mov": "video/quicktime",
    ".avi": "video/x-msvideo",
    ".mkv": "video/x-matroska",
    ".webm": "video/webm",
    ".m4v": "video/x-m4v",
}


def mime_type_for(extension: str) -> str:
    return MIME_TYPES.get(extension.lower(), DEFAULT_MIME_TYPE)


@dataclass
class FileDescriptor:
    title: str
    media_kind: str
    local_file_path: str
    mime_type: str
    file_size: int
    duration: Optional[float] = None

    def to_content_create(self) -> ContentCreate:
        return ContentCreate(
            title=self.title,
            type=self.media_kind,
            local_file_path=self.local_file_path,
            mime_type=self.mime_type,
            file_size=self.file_size,
            duration=self.duration,
            remote_id=None,
            remote_url=None,
        )


@dataclass
class ScanReport:
    files: List[FileDescriptor] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class MediaDirectory:
    path: Path
    kind: str
    extensions: FrozenSet[str]


def _file_size(path: Path) -> int:
    return os.stat(path).st_size


class MediaScanner:
    """Lists the image and video directories and describes every allow-listed file in them."""

    def __init__(self, images_dir: Path, videos_dir: Path):
        self.directories = (
            MediaDirectory(Path(images_dir).absolute(), "image", IMAGE_EXTENSIONS),
            MediaDirectory(Path(videos_dir).absolute(), "video", VIDEO_EXTENSIONS),
        )

    @classmethod
    def for_root(cls, media_root: Path) -> "MediaScanner":
        root = Path(media_root)
        return cls(root / "images", root / "videos")

    def kind_for_extension(self, extension: str) -> Optional[str]:
        ext = extension.lower()
        for directory in self.directories:
            if ext in directory.extensions:
                return directory.kind
        return None

    def directory_for(self, kind: str) -> Path:
        for directory in self.directories:
            if directory.kind == kind:
                return directory.path
        raise ValueError(f"Unknown media kind: {kind}")

    def describe(self, path: Path, kind: str) -> FileDescriptor:
        """Stat a single media file; OSError propagates to the caller."""
        path = Path(path)
        return FileDescriptor(
            title=path.stem,
            media_kind=kind,
            local_file_path=str(path),
            mime_type=mime_type_for(path.suffix),
            file_size=_file_size(path),
        )

    def _scan_directory(self, directory: MediaDirectory) -> ScanReport:
        report = ScanReport()
        if not directory.path.is_dir():
            logger.info("Directory %s does not exist, creating it...", directory.path)
            directory.path.mkdir(parents=True, exist_ok=True)
            return report

        with os.scandir(directory.path) as entries:
            for entry in entries:
                suffix = Path(entry.name).suffix.lower()
                if suffix not in directory.extensions:
                    continue
                try:
                    if not entry.is_file():
                        continue
                    report.files.append(self.describe(Path(entry.path), directory.kind))
                except OSError as exc:
                    message = f"Error processing {entry.name}: {exc}"
                    logger.error(message)
                    report.errors.append(message)
        return report

    async def scan(self) -> ScanReport:
        logger.info("Scanning local media files...")
        reports = await asyncio.gather(
            *(asyncio.to_thread(self._scan_directory, directory) for directory in self.directories)
        )
        combined = ScanReport()
        for report in reports:
            combined.files.extend(report.files)
            combined.errors.extend(report.errors)
        images, videos = (len(r.files) for r in reports)
        logger.info("Found %s images and %s videos", images, videos)
        return combined
