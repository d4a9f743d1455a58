import errno
import os
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from tagmv.core.models import Action, SourceFile, TagRecord
from tagmv.core.orchestrator import BatchOrchestrator, count_folders, run

TAGS = {
    "one.mp3": TagRecord("Artist", "Album", 1, "First"),
    "two.mp3": TagRecord("Artist", "Album", 2, "Second"),
    "dup.mp3": TagRecord("Artist", "Album", 2, "Second"),
    "other.flac": TagRecord("Someone", "Else", None, "Track"),
    "loose.m4a": None,
}


class BatchOrchestratorTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.root = Path(self._tmp.name)
        for name in TAGS:
            (self.root / name).write_bytes(name.encode("utf-8"))

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def tag_reader(self, path: Path):
        return TAGS.get(path.name)

    def sources(self):
        orchestrator = BatchOrchestrator(self.root, tag_reader=self.tag_reader)
        paths = sorted(p for p in self.root.rglob("*") if p.is_file())
        return orchestrator, orchestrator.load_sources(paths)

    def snapshot(self):
        return sorted(str(p.relative_to(self.root)) for p in self.root.rglob("*"))

    def test_dry_run_reports_without_moving(self) -> None:
        orchestrator, sources = self.sources()
        before = self.snapshot()
        report = orchestrator.run(sources, dry_run=True)
        self.assertEqual(self.snapshot(), before)
        self.assertEqual(report.total_files, 5)
        self.assertEqual(report.folder_count, 2)
        self.assertEqual(report.unsorted_count, 1)
        self.assertEqual(len(report.outcomes), 5)
        self.assertTrue(all(o.succeeded for o in report.outcomes))
        self.assertFalse(report.has_failures)

    def test_execute_moves_everything(self) -> None:
        orchestrator, sources = self.sources()
        report = orchestrator.run(sources, dry_run=False)
        self.assertFalse(report.has_failures)
        self.assertEqual(report.moved_count, 5)
        self.assertEqual(self.snapshot(), [
            "Artist - Album",
            "Artist - Album/01 - First.mp3",
            "Artist - Album/02 - Second (1).mp3",
            "Artist - Album/02 - Second.mp3",
            "Someone - Else",
            "Someone - Else/Track.flac",
            "_Unsorted",
            "_Unsorted/loose.m4a",
        ])
        # "dup.mp3" sorts before "two.mp3", so it keeps the plain name
        self.assertEqual(
            (self.root / "Artist - Album" / "02 - Second.mp3").read_bytes(), b"dup.mp3")

    def test_dry_run_matches_execute_shape(self) -> None:
        orchestrator, sources = self.sources()
        preview = orchestrator.run(sources, dry_run=True)
        report = orchestrator.run(sources, dry_run=False)
        self.assertEqual(
            [o.resolved.final_destination for o in preview.outcomes],
            [o.resolved.final_destination for o in report.outcomes],
        )
        self.assertEqual(
            (preview.total_files, preview.folder_count, preview.unsorted_count),
            (report.total_files, report.folder_count, report.unsorted_count),
        )

    def test_second_run_is_all_skips(self) -> None:
        orchestrator, sources = self.sources()
        orchestrator.run(sources, dry_run=False)
        placed = self.snapshot()

        name_tags = {
            "01 - First.mp3": TAGS["one.mp3"],
            "02 - Second.mp3": TAGS["two.mp3"],
            "02 - Second (1).mp3": TAGS["two.mp3"],
            "Track.flac": TAGS["other.flac"],
        }
        rerun = BatchOrchestrator(self.root, tag_reader=lambda p: name_tags.get(p.name))
        rescanned = rerun.load_sources(sorted(p for p in self.root.rglob("*") if p.is_file()))
        for dry_run in (True, False):
            with self.subTest(dry_run=dry_run):
                report = rerun.run(rescanned, dry_run=dry_run)
                self.assertEqual({o.resolved.action for o in report.outcomes}, {Action.SKIP})
                self.assertEqual(report.skipped_count, 5)
                self.assertEqual(report.moved_count, 0)
                self.assertEqual(report.folder_count, 2)
                self.assertEqual(report.unsorted_count, 1)
                self.assertEqual(self.snapshot(), placed)

    def test_failure_does_not_abort_batch(self) -> None:
        orchestrator, sources = self.sources()
        real_rename = os.rename

        def flaky_rename(src, dst):
            if Path(src).name == "one.mp3":
                raise PermissionError(errno.EACCES, "Permission denied")
            return real_rename(src, dst)

        with mock.patch("tagmv.core.executor.os.rename", side_effect=flaky_rename):
            report = orchestrator.run(sources, dry_run=False)
        self.assertEqual(report.failed_count, 1)
        self.assertEqual(report.moved_count, 4)
        self.assertTrue((self.root / "one.mp3").exists())
        self.assertEqual(report.failures()[0].resolved.source.path.name, "one.mp3")

    def test_tag_reader_errors_become_unsorted(self) -> None:
        def broken(path):
            raise ValueError("corrupt header")

        orchestrator = BatchOrchestrator(self.root, tag_reader=broken)
        sources = orchestrator.load_sources([self.root / "one.mp3"])
        self.assertIsNone(sources[0].tags)
        report = orchestrator.run(sources, dry_run=True)
        self.assertEqual(report.outcomes[0].resolved.final_destination, "_Unsorted/one.mp3")
        self.assertEqual(report.unsorted_count, 1)
        self.assertEqual(report.folder_count, 0)

    def test_module_level_run(self) -> None:
        files = [SourceFile(self.root / "one.mp3", TAGS["one.mp3"])]
        report = run(files, True, self.root)
        self.assertEqual(report.outcomes[0].resolved.final_destination,
                         "Artist - Album/01 - First.mp3")

    def test_count_folders_ignores_unsorted(self) -> None:
        orchestrator, sources = self.sources()
        resolved = orchestrator.resolve(sources)
        self.assertEqual(count_folders(resolved), 2)
        self.assertEqual(report_folders(orchestrator.run(sources, dry_run=True)),
                         ["Artist - Album", "Someone - Else", "_Unsorted"])


def report_folders(report):
    return list(report.folders())


if __name__ == "__main__":
    unittest.main()
