import asyncio
import logging
import os
from pathlib import Path
from typing import BinaryIO, Iterable, Optional, Tuple
from uuid import uuid4

from content_gallery.api.schemas import ContentOut, UploadError, UploadResult
from content_gallery.services.content_store import ContentStore, DuplicateLocalPathError
from content_gallery.services.scanner import MediaScanner

logger = logging.getLogger("contentgallery.upload")

_CHUNK = 1024 * 1024


class UploadRejected(Exception):
    pass


def _safe_name(filename: Optional[str]) -> str:
    name = Path((filename or "").replace("\\", "/")).name.strip()
    if not name or name in {".", ".."}:
        raise UploadRejected("Missing filename")
    return name


def _candidates(directory: Path, name: str):
    stem, suffix = Path(name).stem, Path(name).suffix
    yield directory / name
    counter = 1
    while True:
        yield directory / f"{stem}-{counter}{suffix}"
        counter += 1


def _write_stream(source: BinaryIO, target: Path, max_bytes: int) -> int:
    written = 0
    target.parent.mkdir(parents=True, exist_ok=True)
    with target.open("xb") as fh:
        try:
            while True:
                chunk = source.read(_CHUNK)
                if not chunk:
                    break
                written += len(chunk)
                if written > max_bytes:
                    raise UploadRejected(f"File exceeds the {max_bytes} byte upload limit")
                fh.write(chunk)
        except BaseException:
            fh.close()
            target.unlink(missing_ok=True)
            raise
    return written


def _place(partial: Path, directory: Path, name: str) -> Path:
    """Hard-link the finished upload to the first free name, then drop the partial file."""
    try:
        for candidate in _candidates(directory, name):
            try:
                # link never replaces an existing file, unlike rename
                os.link(partial, candidate)
                return candidate
            except FileExistsError:
                continue
    finally:
        partial.unlink(missing_ok=True)


async def store_upload(
    filename: Optional[str],
    stream: BinaryIO,
    scanner: MediaScanner,
    store: ContentStore,
    max_bytes: int,
) -> ContentOut:
    """Write one uploaded file into its media directory and create its content record."""
    name = _safe_name(filename)
    kind = scanner.kind_for_extension(Path(name).suffix)
    if kind is None:
        raise UploadRejected(f"Unsupported file type: {Path(name).suffix or '(none)'}")

    directory = scanner.directory_for(kind)
    # streamed under a name outside the allow-list so a sync never sees a partial file
    partial = directory / f".{uuid4().hex}.part"
    await asyncio.to_thread(_write_stream, stream, partial, max_bytes)
    target = await asyncio.to_thread(_place, partial, directory, name)
    try:
        descriptor = scanner.describe(target, kind)
        record = await store.create_content(descriptor.to_content_create())
    except DuplicateLocalPathError:
        # a sync picked the finished file up first; its record is the upload's record
        record = await store.get_content_by_local_path(str(target))
        if record is None:
            raise
    except Exception:
        target.unlink(missing_ok=True)
        raise
    logger.info("Uploaded %s -> %s", name, target)
    return ContentOut.model_validate(record)


async def save_uploads(
    files: Iterable[Tuple[Optional[str], BinaryIO]],
    scanner: MediaScanner,
    store: ContentStore,
    max_bytes: int,
) -> UploadResult:
    """Store each (filename, stream) pair; one bad file never stops the rest."""
    result = UploadResult()
    for filename, stream in files:
        try:
            result.content.append(await store_upload(filename, stream, scanner, store, max_bytes))
            result.success_count += 1
        except Exception as exc:
            logger.warning("Upload failed for %s: %s", filename, exc)
            result.errors.append(UploadError(filename=filename or "", error=str(exc)))
            result.error_count += 1
    return result
