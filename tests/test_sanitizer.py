import unittest

from tagmv.core.sanitizer import sanitize

FORBIDDEN = set('/\\:*?"<>|')


class SanitizeTests(unittest.TestCase):
    def test_keeps_plain_text(self) -> None:
        self.assertEqual(sanitize("Hello World"), "Hello World")

    def test_slashes_become_dashes(self) -> None:
        self.assertEqual(sanitize("AC/DC"), "AC-DC")
        self.assertEqual(sanitize("Back\\Slash"), "Back-Slash")

    def test_removes_forbidden_chars(self) -> None:
        self.assertEqual(sanitize("What: is *this?"), "What is this")
        self.assertEqual(sanitize('a"b<c>d|e'), "abcde")

    def test_removes_control_chars(self) -> None:
        self.assertEqual(sanitize("hello\x00world\x1f"), "helloworld")
        self.assertEqual(sanitize("del\x7fete"), "delete")
        self.assertEqual(sanitize("c1\x85char"), "c1char")

    def test_tabs_are_removed_not_collapsed(self) -> None:
        self.assertEqual(sanitize("tabs\there"), "tabshere")

    def test_collapses_whitespace(self) -> None:
        self.assertEqual(sanitize("  too   many   spaces  "), "too many spaces")

    def test_trims_dots(self) -> None:
        self.assertEqual(sanitize("...leading"), "leading")
        self.assertEqual(sanitize("trailing..."), "trailing")
        self.assertEqual(sanitize("..both.."), "both")
        self.assertEqual(sanitize("Vol. 2"), "Vol. 2")

    def test_empty_results_fall_back_to_unknown(self) -> None:
        for raw in ["", "   ", "***", "...", "?:|", "\x00\x01"]:
            with self.subTest(raw=raw):
                self.assertEqual(sanitize(raw), "Unknown")

    def test_reserved_names_get_prefix(self) -> None:
        self.assertEqual(sanitize("CON"), "_CON")
        self.assertEqual(sanitize("con"), "_con")
        self.assertEqual(sanitize("NUL"), "_NUL")
        self.assertEqual(sanitize("COM1"), "_COM1")
        self.assertEqual(sanitize("LPT9"), "_LPT9")
        self.assertEqual(sanitize("CONNECT"), "CONNECT")
        self.assertEqual(sanitize("CONSOLE"), "CONSOLE")

    def test_unicode_preserved(self) -> None:
        self.assertEqual(sanitize("Chlär"), "Chlär")
        self.assertEqual(sanitize("Nørbak"), "Nørbak")

    def test_output_never_contains_unsafe_chars(self) -> None:
        samples = [
            "a/b\\c:d*e?f\"g<h>i|j",
            "\x00\x1f\x7f mixed \t\n text",
            " . / . ",
            "".join(chr(i) for i in range(0, 0x100)),
        ]
        for raw in samples:
            with self.subTest(raw=raw):
                result = sanitize(raw)
                self.assertTrue(result)
                self.assertFalse(FORBIDDEN & set(result))
                self.assertFalse(any(ord(c) < 0x20 or 0x7F <= ord(c) <= 0x9F for c in result))
                self.assertEqual(result, result.strip(". "))


if __name__ == "__main__":
    unittest.main()
