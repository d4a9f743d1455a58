import unittest
from pathlib import Path
from types import SimpleNamespace
from unittest import mock

from mutagen import MutagenError
from mutagen.id3 import TALB, TIT2, TPE1, TRCK

from tagmv.addons.tags import parse_track_number, read_tags
from tagmv.core.models import TagRecord


def fake_audio(tags):
    return SimpleNamespace(tags=tags)


class ParseTrackNumberTests(unittest.TestCase):
    def test_formats(self) -> None:
        self.assertEqual(parse_track_number("5"), 5)
        self.assertEqual(parse_track_number("05/12"), 5)
        self.assertEqual(parse_track_number(["7"]), 7)
        self.assertEqual(parse_track_number((3, 10)), 3)
        self.assertEqual(parse_track_number(120), 120)

    def test_missing_or_invalid(self) -> None:
        self.assertIsNone(parse_track_number(None))
        self.assertIsNone(parse_track_number(""))
        self.assertIsNone(parse_track_number("A1"))
        self.assertIsNone(parse_track_number("0"))
        self.assertIsNone(parse_track_number([]))


class ReadTagsTests(unittest.TestCase):
    def test_easy_tags(self) -> None:
        audio = fake_audio({
            'artist': ['Chlär'],
            'album': ['Breakthrough - EP'],
            'title': ['Close Contact'],
            'tracknumber': ['1/5'],
        })
        with mock.patch("tagmv.addons.tags.MutagenFile", return_value=audio) as opened:
            record = read_tags(Path("/music/song.m4a"))
        opened.assert_called_once_with(Path("/music/song.m4a"), easy=True)
        self.assertEqual(record, TagRecord("Chlär", "Breakthrough - EP", 1, "Close Contact"))

    def test_id3_frames(self) -> None:
        audio = fake_audio({
            'TPE1': TPE1(encoding=3, text=["Artist"]),
            'TALB': TALB(encoding=3, text=["Album"]),
            'TIT2': TIT2(encoding=3, text=["Title"]),
            'TRCK': TRCK(encoding=3, text=["3/9"]),
        })
        with mock.patch("tagmv.addons.tags.MutagenFile", return_value=audio):
            record = read_tags("/music/song.wav")
        self.assertEqual(record, TagRecord("Artist", "Album", 3, "Title"))

    def test_mp4_atoms(self) -> None:
        audio = fake_audio({
            '\xa9ART': ['Artist'],
            '\xa9alb': ['Album'],
            'trkn': [(2, 10)],
        })
        with mock.patch("tagmv.addons.tags.MutagenFile", return_value=audio):
            record = read_tags("/music/song.m4a")
        self.assertEqual(record, TagRecord("Artist", "Album", 2, ""))

    def test_missing_fields_are_empty(self) -> None:
        with mock.patch("tagmv.addons.tags.MutagenFile", return_value=fake_audio({'title': ['Only']})):
            record = read_tags("/music/song.flac")
        self.assertEqual(record.artist, "")
        self.assertEqual(record.album, "")
        self.assertIsNone(record.track_number)
        self.assertFalse(record.is_sortable())

    def test_unrecognized_file(self) -> None:
        with mock.patch("tagmv.addons.tags.MutagenFile", return_value=None):
            self.assertIsNone(read_tags("/music/song.aac"))

    def test_no_tags(self) -> None:
        with mock.patch("tagmv.addons.tags.MutagenFile", return_value=fake_audio(None)):
            self.assertIsNone(read_tags("/music/song.ogg"))

    def test_read_errors_become_no_tags(self) -> None:
        for error in (MutagenError("bad header"), OSError("unreadable")):
            with self.subTest(error=error):
                with mock.patch("tagmv.addons.tags.MutagenFile", side_effect=error):
                    self.assertIsNone(read_tags("/music/broken.mp3"))


if __name__ == "__main__":
    unittest.main()
