from content_gallery.services.content_store import SqlContentStore
from content_gallery.services.scanner import MediaScanner
from content_gallery.services.sync_service import default_scanner, default_store


def get_content_store() -> SqlContentStore:
    return default_store()


def get_media_scanner() -> MediaScanner:
    return default_scanner()
