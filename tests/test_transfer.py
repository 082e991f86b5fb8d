import io
import unittest as ut
from blobfs.backend import CopyStatus
from blobfs.content_types import ContentTypeProvider
from blobfs.entries import FileEntry
from blobfs.exceptions import (
    AlreadyExistsError, CopyFailedError, CopyTimeoutError, InvalidArgumentError, NotFoundError
)
from blobfs.paths import PathTranslator
from blobfs.transfer import TransferEngine, CopyPollPolicy
from blobfs.util import HaltInterrupt
from tests.memory_backend import MemoryBackend, ManualClock, CountingHaltFlag


class _NoTypes(ContentTypeProvider):

    def get_content_type(self, path: str):
        return None


class TransferTestCase(ut.IsolatedAsyncioTestCase):

    def setUp(self):
        self.backend = MemoryBackend()
        self.clock = ManualClock()
        self.engine = self.build_engine()

    def build_engine(self, policy: CopyPollPolicy = None, content_types=None):
        return TransferEngine(
            PathTranslator("base"),
            self.backend,
            self.clock,
            content_types or ContentTypeProvider(),
            policy
        )


class TestFiles(TransferTestCase):

    async def test_get_file_info(self):
        self.backend.put("base/a/b.txt", b"12345")
        entry = await self.engine.get_file_info("a/b.txt")
        self.assertEqual(entry.path, "a/b.txt")
        self.assertEqual(entry.length, 5)
        self.assertEqual(entry.name, "b.txt")
        self.assertEqual(entry.directory_path, "a")
        self.assertFalse(entry.is_directory)
        self.assertEqual(self.backend.call_names(), ["exists", "get_properties"])

    async def test_get_missing_file_info(self):
        self.assertIsNone(await self.engine.get_file_info("a/b.txt"))
        self.assertEqual(self.backend.call_names(), ["exists"])

    async def test_open_read_stream(self):
        self.backend.put("base/a.bin", b"0123456789")
        stream = await self.engine.open_read_stream("a.bin")
        chunks = [c async for c in stream.chunks()]
        self.assertEqual(b"".join(chunks), b"0123456789")
        self.assertEqual(self.backend.call_names(), ["download"])

    async def test_open_read_stream_from_entry(self):
        self.backend.put("base/a.bin", b"abc")
        self.assertEqual(await self.engine.read_bytes(FileEntry("a.bin", 3)), b"abc")

    async def test_open_missing_stream(self):
        with self.assertRaises(NotFoundError):
            await self.engine.open_read_stream("missing.bin")

    async def test_create_file(self):
        self.assertEqual(await self.engine.create_file("docs/a.txt", b"hello"), "docs/a.txt")
        self.assertEqual(self.backend.blobs["base/docs/a.txt"].data, b"hello")
        self.assertEqual(self.backend.blobs["base/docs/a.txt"].content_type, "text/plain")

    async def test_create_file_from_readable(self):
        await self.engine.create_file("a.json", io.BytesIO(b"{}"))
        self.assertEqual(self.backend.blobs["base/a.json"].data, b"{}")
        self.assertEqual(self.backend.blobs["base/a.json"].content_type, "application/json")

    async def test_create_file_default_content_type(self):
        engine = self.build_engine(content_types=_NoTypes())
        await engine.create_file("a.weird", b"x")
        self.assertEqual(self.backend.blobs["base/a.weird"].content_type, "application/octet-stream")

    async def test_create_existing_file(self):
        self.backend.put("base/a.txt", b"old")
        with self.assertRaises(AlreadyExistsError):
            await self.engine.create_file("a.txt", b"new")
        self.assertEqual(self.backend.blobs["base/a.txt"].data, b"old")

    async def test_overwrite_existing_file(self):
        self.backend.put("base/a.txt", b"old")
        await self.engine.create_file("a.txt", b"new", overwrite=True)
        self.assertEqual(self.backend.blobs["base/a.txt"].data, b"new")

    async def test_delete_file(self):
        self.backend.put("base/a.txt")
        self.assertTrue(await self.engine.delete_file("a.txt"))
        self.assertNotIn("base/a.txt", self.backend.blobs)

    async def test_delete_missing_file(self):
        self.assertFalse(await self.engine.delete_file("a.txt"))


class TestCopy(TransferTestCase):

    async def test_copy_same_path(self):
        with self.assertRaises(InvalidArgumentError):
            await self.engine.copy_file("a.txt", "a.txt")
        self.assertEqual(self.backend.calls, [])

    async def test_copy_same_path_is_value_error(self):
        with self.assertRaises(ValueError):
            await self.engine.copy_file("a.txt", "a.txt")

    async def test_copy_missing_source(self):
        with self.assertRaises(NotFoundError):
            await self.engine.copy_file("a.txt", "b.txt")
        self.assertNotIn("start_copy", self.backend.call_names())

    async def test_copy_existing_target(self):
        self.backend.put("base/a.txt", b"source")
        self.backend.put("base/b.txt", b"target")
        with self.assertRaises(AlreadyExistsError):
            await self.engine.copy_file("a.txt", "b.txt")
        self.assertEqual(self.backend.blobs["base/b.txt"].data, b"target")
        self.assertNotIn("start_copy", self.backend.call_names())

    async def test_copy(self):
        self.backend.put("base/a.txt", b"source")
        await self.engine.copy_file("a.txt", "d/b.txt")
        self.assertEqual(self.backend.blobs["base/d/b.txt"].data, b"source")
        self.assertEqual(self.backend.blobs["base/a.txt"].data, b"source")
        self.assertEqual(self.clock.sleeps, [0.25])

    async def test_copy_polls_until_complete(self):
        self.backend.copy_pending_reads = 3
        self.backend.put("base/a.txt", b"source")
        await self.engine.copy_file("a.txt", "b.txt")
        self.assertEqual(self.clock.sleeps, [0.25] * 4)
        self.assertEqual(self.backend.call_names().count("get_properties"), 4)

    async def test_copy_failed(self):
        self.backend.copy_pending_reads = 1
        self.backend.copy_final_status = CopyStatus.FAILED
        self.backend.copy_final_description = "source modified"
        self.backend.put("base/a.txt", b"source")
        with self.assertRaises(CopyFailedError) as h:
            await self.engine.copy_file("a.txt", "b.txt")
        self.assertEqual(h.exception.status, "failed")
        self.assertEqual(h.exception.status_description, "source modified")

    async def test_copy_aborted(self):
        self.backend.copy_final_status = CopyStatus.ABORTED
        self.backend.put("base/a.txt", b"source")
        with self.assertRaises(CopyFailedError) as h:
            await self.engine.copy_file("a.txt", "b.txt")
        self.assertEqual(h.exception.status, "aborted")

    async def test_copy_timeout(self):
        engine = self.build_engine(CopyPollPolicy(interval=1.5, max_polls=5))
        self.backend.copy_pending_reads = 100
        self.backend.put("base/a.txt", b"source")
        with self.assertRaises(CopyTimeoutError) as h:
            await engine.copy_file("a.txt", "b.txt")
        self.assertEqual(h.exception.attempts, 5)
        self.assertEqual(h.exception.status, "pending")
        self.assertTrue(h.exception.is_recoverable)
        self.assertEqual(self.clock.sleeps, [1.5] * 5)

    async def test_copy_halted(self):
        self.backend.copy_pending_reads = 100
        self.backend.put("base/a.txt", b"source")
        with self.assertRaises(HaltInterrupt):
            await self.engine.copy_file("a.txt", "b.txt", CountingHaltFlag(2))
        self.assertEqual(len(self.clock.sleeps), 2)

    async def test_bad_policy(self):
        with self.assertRaises(InvalidArgumentError):
            CopyPollPolicy(interval=-1)
        with self.assertRaises(InvalidArgumentError):
            CopyPollPolicy(max_polls=0)


class TestMove(TransferTestCase):

    async def test_move(self):
        self.backend.put("base/a.txt", b"content")
        await self.engine.move_file("a.txt", "b/a.txt")
        self.assertIsNone(await self.engine.get_file_info("a.txt"))
        self.assertEqual(await self.engine.read_bytes("b/a.txt"), b"content")
        names = self.backend.call_names()
        self.assertLess(names.index("start_copy"), names.index("delete_if_exists"))

    async def test_move_failed_copy_keeps_source(self):
        self.backend.copy_final_status = CopyStatus.FAILED
        self.backend.put("base/a.txt", b"content")
        with self.assertRaises(CopyFailedError):
            await self.engine.move_file("a.txt", "b.txt")
        self.assertIn("base/a.txt", self.backend.blobs)

    async def test_move_onto_existing(self):
        self.backend.put("base/a.txt", b"a")
        self.backend.put("base/b.txt", b"b")
        with self.assertRaises(AlreadyExistsError):
            await self.engine.move_file("a.txt", "b.txt")
        self.assertEqual(self.backend.blobs["base/a.txt"].data, b"a")
        self.assertEqual(self.backend.blobs["base/b.txt"].data, b"b")


class TestRootPath(TransferTestCase):
    """The root is a directory; file operations never touch the blob named like the base path."""

    def setUp(self):
        super().setUp()
        self.backend.put("base", b"outside")

    async def test_root_is_not_a_file(self):
        for root in ("", "/"):
            self.assertIsNone(await self.engine.get_file_info(root))
        self.assertEqual(self.backend.calls, [])

    async def test_delete_root_file(self):
        self.assertFalse(await self.engine.delete_file(""))
        self.assertIn("base", self.backend.blobs)

    async def test_open_root_stream(self):
        with self.assertRaises(NotFoundError):
            await self.engine.open_read_stream("")
        self.assertEqual(self.backend.calls, [])

    async def test_create_root_file(self):
        with self.assertRaises(InvalidArgumentError):
            await self.engine.create_file("", b"new", overwrite=True)
        self.assertEqual(self.backend.blobs["base"].data, b"outside")

    async def test_copy_from_root(self):
        with self.assertRaises(NotFoundError):
            await self.engine.copy_file("", "b.txt")
        with self.assertRaises(NotFoundError):
            await self.engine.move_file("", "b.txt")
        self.assertIn("base", self.backend.blobs)
        self.assertNotIn("base/b.txt", self.backend.blobs)

    async def test_copy_to_root(self):
        self.backend.put("base/a.txt", b"a")
        with self.assertRaises(InvalidArgumentError):
            await self.engine.copy_file("a.txt", "")
        self.assertEqual(self.backend.blobs["base"].data, b"outside")

    async def test_root_without_base_path(self):
        engine = TransferEngine(PathTranslator(), self.backend, self.clock, ContentTypeProvider())
        self.assertIsNone(await engine.get_file_info(""))
        self.assertFalse(await engine.delete_file(""))
        self.assertEqual(self.backend.calls, [])


class TestLeadingSeparator(TransferTestCase):

    async def test_same_key_with_and_without_base(self):
        await self.engine.create_file("/a.txt", b"x")
        self.assertIn("base/a.txt", self.backend.blobs)
        engine = TransferEngine(PathTranslator(), self.backend, self.clock, ContentTypeProvider())
        await engine.create_file("/b.txt", b"y")
        self.assertIn("b.txt", self.backend.blobs)
        self.assertNotIn("/b.txt", self.backend.blobs)


class TestContentTypeFallbackLogging(TransferTestCase):

    async def test_fallback_is_warned(self):
        engine = self.build_engine(content_types=_NoTypes())
        with self.assertLogs("blobfs.transfer", level="WARNING") as logs:
            await engine.create_file("a.weird", b"x")
        self.assertTrue(any("application/octet-stream" in line for line in logs.output))
