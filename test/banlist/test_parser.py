import unittest

from src.banlist.parser import ParsedList, parse_banlist, split_lines


class TestParser(unittest.TestCase):
    def test_parse_header_and_entries(self):
        parsed = parse_banlist("v1\nentryA\nentryB")
        self.assertEqual(parsed, ParsedList(header="v1", entries=("entryA", "entryB")))

    def test_parse_accepts_crlf(self):
        parsed = parse_banlist("2024-01-01\r\nalice\r\nbob\r\n")
        self.assertEqual(parsed.header, "2024-01-01")
        self.assertEqual(parsed.entries, ("alice", "bob"))

    def test_parse_keeps_entry_order_and_duplicates(self):
        parsed = parse_banlist("h\nzed\nalice\nzed")
        self.assertEqual(parsed.entries, ("zed", "alice", "zed"))

    def test_entries_are_not_validated(self):
        parsed = parse_banlist("h\n  spaced name \n\nnot/a/name")
        self.assertEqual(parsed.entries, ("  spaced name ", "", "not/a/name"))

    def test_too_few_lines_is_empty(self):
        for payload in ["", "v1", "v1\n", "v1\r\n\r\n"]:
            with self.subTest(payload=payload):
                with self.assertLogs("src.banlist.parser", level="WARNING") as logs:
                    self.assertIsNone(parse_banlist(payload))
                self.assertIn("Banlist is empty!", logs.output[0])

    def test_split_lines_drops_only_trailing_blank_lines(self):
        self.assertEqual(split_lines("\na\n\nb\n\n"), ["", "a", "", "b"])


if __name__ == "__main__":
    unittest.main()
