import asyncio
import tempfile
from pathlib import Path
from unittest import TestCase, mock

from fastapi.testclient import TestClient

from content_gallery.api import routes_sync
from content_gallery.api.deps import get_content_store, get_media_scanner
from content_gallery.api.schemas import SyncResult
from content_gallery.core.db import get_session
from content_gallery.main import app
from content_gallery.services.scanner import MediaScanner

from support import sql_store


class ContentRoutesTests(TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        root = Path(self._tmp.name).absolute()
        self.media_root = root / "media"
        self.store, self.engine, factory = asyncio.run(sql_store(root))
        scanner = MediaScanner.for_root(self.media_root)

        async def _session():
            async with factory() as session:
                yield session

        app.dependency_overrides[get_content_store] = lambda: self.store
        app.dependency_overrides[get_media_scanner] = lambda: scanner
        app.dependency_overrides[get_session] = _session
        self.client = TestClient(app)

    def tearDown(self):
        app.dependency_overrides.clear()
        asyncio.run(self.engine.dispose())
        self._tmp.cleanup()

    def _upload(self, *files):
        return self.client.post(
            "/api/content/upload-local",
            files=[("files", (name, data, "application/octet-stream")) for name, data in files],
        )

    def test_upload_reports_counts_and_errors(self):
        resp = self._upload(("a.jpg", b"jpg"), ("b.mp4", b"mp4"), ("notes.txt", b"txt"))

        self.assertEqual(resp.status_code, 200)
        body = resp.json()
        self.assertEqual(body["successCount"], 2)
        self.assertEqual(body["errorCount"], 1)
        self.assertEqual(body["errors"][0]["filename"], "notes.txt")
        self.assertTrue((self.media_root / "images" / "a.jpg").exists())
        self.assertTrue((self.media_root / "videos" / "b.mp4").exists())

    def test_list_get_and_delete_content(self):
        self._upload(("a.jpg", b"jpg"), ("b.mp4", b"mp4"))

        listing = self.client.get("/api/content").json()
        self.assertEqual(len(listing), 2)
        videos = self.client.get("/api/content", params={"type": "video"}).json()
        self.assertEqual([c["title"] for c in videos], ["b"])
        self.assertEqual(videos[0]["mime_type"], "video/mp4")

        content_id = videos[0]["id"]
        self.assertEqual(self.client.get(f"/api/content/{content_id}").json()["title"], "b")
        self.assertEqual(self.client.delete(f"/api/content/{content_id}").status_code, 200)
        self.assertEqual(self.client.get(f"/api/content/{content_id}").status_code, 404)
        self.assertEqual(self.client.delete(f"/api/content/{content_id}").status_code, 404)

    def test_sync_endpoint_reports_skip(self):
        with mock.patch.object(routes_sync, "run_sync", mock.AsyncMock(return_value=None)):
            body = self.client.post("/api/sync").json()
        self.assertEqual(body, {"status": "skipped", "result": None})

    def test_sync_endpoint_returns_result(self):
        result = SyncResult(added=2, removed=1, unchanged=3)
        with mock.patch.object(routes_sync, "run_sync", mock.AsyncMock(return_value=result)) as run:
            body = self.client.post("/api/sync").json()
        self.assertEqual(body["status"], "completed")
        self.assertEqual(body["result"], {"added": 2, "removed": 1, "unchanged": 3, "errors": []})
        self.assertEqual(run.await_args.args, ("api",))

    def test_health(self):
        self.assertEqual(self.client.get("/api/health").json()["status"], "ok")
