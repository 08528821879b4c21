import tempfile
from pathlib import Path
from unittest import IsolatedAsyncioTestCase

from content_gallery.api.schemas import ContentCreate
from content_gallery.services.content_store import DuplicateLocalPathError

from support import sql_store


class SqlContentStoreTests(IsolatedAsyncioTestCase):
    async def asyncSetUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.store, self.engine, _ = await sql_store(Path(self._tmp.name))

    async def asyncTearDown(self):
        await self.engine.dispose()
        self._tmp.cleanup()

    async def test_create_and_lookup_by_path(self):
        created = await self.store.create_content(
            ContentCreate(title="a", type="image", local_file_path="/media/images/a.jpg", mime_type="image/jpeg", file_size=12)
        )
        self.assertIsNotNone(created.id)

        found = await self.store.get_content_by_local_path("/media/images/a.jpg")
        self.assertEqual(found.id, created.id)
        self.assertEqual(found.file_size, 12)
        self.assertIsNone(found.remote_id)
        self.assertIsNone(await self.store.get_content_by_local_path("/media/images/b.jpg"))

    async def test_duplicate_local_path_is_rejected(self):
        payload = ContentCreate(title="a", type="image", local_file_path="/media/images/a.jpg")
        await self.store.create_content(payload)
        with self.assertRaises(DuplicateLocalPathError):
            await self.store.create_content(payload)
        self.assertEqual(len(await self.store.get_all_content()), 1)

    async def test_remote_records_may_share_null_path(self):
        await self.store.create_content(ContentCreate(title="r1", type="video", remote_id="x1", remote_url="https://cdn/x1"))
        await self.store.create_content(ContentCreate(title="r2", type="video", remote_id="x2", remote_url="https://cdn/x2"))
        self.assertEqual(len(await self.store.get_all_content()), 2)

    async def test_delete_by_local_path(self):
        await self.store.create_content(ContentCreate(title="a", type="image", local_file_path="/m/a.jpg"))
        await self.store.create_content(ContentCreate(title="b", type="image", local_file_path="/m/b.jpg"))

        await self.store.delete_content_by_local_path("/m/a.jpg")
        await self.store.delete_content_by_local_path("/m/missing.jpg")

        remaining = [c.local_file_path for c in await self.store.get_all_content()]
        self.assertEqual(remaining, ["/m/b.jpg"])

    async def test_list_filter_and_delete_by_id(self):
        image = await self.store.create_content(ContentCreate(title="a", type="image", local_file_path="/m/a.jpg"))
        await self.store.create_content(ContentCreate(title="v", type="video", local_file_path="/m/v.mp4"))

        videos = await self.store.list_content("video")
        self.assertEqual([c.title for c in videos], ["v"])
        self.assertEqual(len(await self.store.list_content()), 2)

        self.assertTrue(await self.store.delete_content(image.id))
        self.assertFalse(await self.store.delete_content(image.id))
        self.assertIsNone(await self.store.get_content(image.id))
