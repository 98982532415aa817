import io
import itertools
import json
import os
import shutil
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from pypdf import PdfWriter
from pypdf.generic import DecodedStreamObject, DictionaryObject, NameObject

from cases import CaseError, SearchCase, discover_cases, load_case, parse_case
from config import NOT_FOUND_INDEX
from kmp import SearchStats, build_lps, count_comparisons, search, search_all
from main import KMPTestRunner, main, run_case
from pdfreader import extract_pdf_text, parse_pdf_to_pages_text
from report import build_report, format_lps, input_digest, output_path_for, write_report

# --- Helpers ---

def brute_force_lps(pattern):
    """Longest border of every prefix, computed directly."""
    table = []
    for i in range(len(pattern)):
        prefix = pattern[:i + 1]
        best = 0
        for k in range(1, len(prefix)):
            if prefix[:k] == prefix[-k:]:
                best = k
        table.append(best)
    return table


def brute_force_all(text, pattern):
    m = len(pattern)
    return [k for k in range(len(text) - m + 1) if text[k:k + m] == pattern]


def words(alphabet, max_len):
    for n in range(max_len + 1):
        for letters in itertools.product(alphabet, repeat=n):
            yield "".join(letters)

# --- Test Cases ---

class TestBuildLps(unittest.TestCase):
    """Tests for the LPS (failure) table."""

    def test_reference_pattern(self):
        self.assertEqual(build_lps("ABABCABAB"), [0, 0, 1, 2, 0, 1, 2, 3, 4])

    def test_empty_pattern(self):
        self.assertEqual(build_lps(""), [])

    def test_known_tables(self):
        self.assertEqual(build_lps("A"), [0])
        self.assertEqual(build_lps("AAAA"), [0, 1, 2, 3])
        self.assertEqual(build_lps("ABCD"), [0, 0, 0, 0])
        self.assertEqual(build_lps("AABAACAABAA"), [0, 1, 0, 1, 2, 0, 1, 2, 3, 4, 5])
        self.assertEqual(build_lps("AAACAAAA"), [0, 1, 2, 0, 1, 2, 3, 3])

    def test_matches_brute_force(self):
        """Every pattern over a small alphabet gets the longest-border table."""
        for pattern in words("ABC", 6):
            lps = build_lps(pattern)
            self.assertEqual(lps, brute_force_lps(pattern), pattern)
            if pattern:
                self.assertEqual(lps[0], 0)

    def test_fresh_table_per_call(self):
        first = build_lps("ABAB")
        first[0] = 99
        self.assertEqual(build_lps("ABAB"), [0, 0, 1, 2])

    def test_other_sequence_types(self):
        self.assertEqual(build_lps(b"ABAB"), [0, 0, 1, 2])
        self.assertEqual(build_lps([1, 2, 1, 2, 1]), [0, 0, 1, 2, 3])


class TestSearch(unittest.TestCase):
    """Tests for first-match search."""

    def test_reference_case(self):
        self.assertEqual(search("ABABDABACDABABCABAB", "ABABCABAB"), 10)

    def test_space_is_a_symbol(self):
        self.assertEqual(search("HELLO WORLD", "WORLD"), 6)

    def test_empty_inputs(self):
        self.assertEqual(search("", ""), 0)
        self.assertIsNone(search("", "ABC"))
        self.assertEqual(search("HELLO", ""), 0)

    def test_absent_inputs(self):
        self.assertIsNone(search(None, "ABC"))
        self.assertIsNone(search(None, ""))
        self.assertIsNone(search(None, None))
        self.assertEqual(search("HELLO", None), 0)
        self.assertEqual(search("", None), 0)

    def test_pattern_longer_than_text(self):
        self.assertIsNone(search("ABC", "ABCDEF"))

    def test_match_at_start_is_not_confused_with_not_found(self):
        self.assertEqual(search("ABC", "ABC"), 0)
        self.assertEqual(search("ABC", "A"), 0)

    def test_match_at_end(self):
        self.assertEqual(search("XXXXAB", "AB"), 4)

    def test_first_of_several(self):
        self.assertEqual(search("ABCABCABC", "CAB"), 2)

    def test_not_found(self):
        self.assertIsNone(search("ABCDEFGH", "XYZ"))
        self.assertIsNone(search("AAAAAAAB", "AABC"))

    def test_matches_brute_force(self):
        """The returned offset is a real occurrence and the smallest one."""
        for text in words("AB", 7):
            for pattern in words("AB", 4):
                if not pattern:
                    continue
                expected = brute_force_all(text, pattern)
                result = search(text, pattern)
                if expected:
                    self.assertEqual(result, expected[0], (text, pattern))
                    self.assertEqual(text[result:result + len(pattern)], pattern)
                else:
                    self.assertIsNone(result, (text, pattern))

    def test_bytes_and_lists(self):
        self.assertEqual(search(b"\x00\x01\x02\x01\x02", b"\x01\x02"), 1)
        self.assertEqual(search([3, 1, 4, 1, 5, 9], [1, 5]), 3)


class TestSearchAll(unittest.TestCase):
    """Tests for all-matches search."""

    def test_overlapping_matches(self):
        self.assertEqual(search_all("ABABABABAB", "ABA"), [0, 2, 4, 6])
        self.assertEqual(search_all("AAAAA", "AA"), [0, 1, 2, 3])

    def test_no_match(self):
        self.assertEqual(search_all("ABCDEFGH", "XYZ"), [])

    def test_degenerate_inputs(self):
        self.assertEqual(search_all("HELLO", ""), [])
        self.assertEqual(search_all("", ""), [])
        self.assertEqual(search_all("", "A"), [])
        self.assertEqual(search_all(None, "A"), [])
        self.assertEqual(search_all("A", None), [])
        self.assertEqual(search_all("AB", "ABC"), [])

    def test_whole_text(self):
        self.assertEqual(search_all("ABC", "ABC"), [0])

    def test_matches_brute_force(self):
        for text in words("AB", 7):
            for pattern in words("AB", 4):
                if not pattern:
                    continue
                self.assertEqual(search_all(text, pattern), brute_force_all(text, pattern), (text, pattern))

    def test_offsets_strictly_increasing(self):
        for text in words("AB", 8):
            offsets = search_all(text, "ABA")
            self.assertTrue(all(a < b for a, b in zip(offsets, offsets[1:])), text)


class TestConsistency(unittest.TestCase):
    """First-match and all-matches agree, except for the empty pattern."""

    def test_not_found_iff_no_matches(self):
        for text in words("AB", 6):
            for pattern in words("AB", 3):
                if not pattern:
                    continue
                first = search(text, pattern)
                every = search_all(text, pattern)
                self.assertEqual(first is None, every == [], (text, pattern))
                if every:
                    self.assertEqual(first, every[0])

    def test_empty_pattern_asymmetry(self):
        self.assertEqual(search("HELLO", ""), 0)
        self.assertEqual(search_all("HELLO", ""), [])
        self.assertEqual(search("", ""), 0)
        self.assertEqual(search_all("", ""), [])


class TestComparisonBound(unittest.TestCase):
    """The scan does linear work even on repetitive inputs."""

    def assertLinear(self, text, pattern):
        stats = count_comparisons(text, pattern)
        self.assertLessEqual(stats.comparisons, 2 * (len(text) + len(pattern)))
        return stats

    def test_all_same_symbol(self):
        stats = self.assertLinear("A" * 10000, "A" * 50)
        self.assertGreater(stats.comparisons, 0)

    def test_near_miss_pattern(self):
        self.assertLinear("A" * 10000, "A" * 49 + "B")

    def test_periodic_text(self):
        self.assertLinear("AB" * 5000, "ABABABAC")

    def test_lps_build_is_linear(self):
        stats = SearchStats()
        pattern = "A" * 500 + "B" + "A" * 500
        build_lps(pattern, stats)
        self.assertLessEqual(stats.comparisons, 2 * len(pattern))
        self.assertGreater(stats.fallbacks, 0)

    def test_first_match_stops_early(self):
        stats = SearchStats()
        self.assertEqual(search("AB" + "C" * 1000, "AB", stats), 0)
        self.assertLess(stats.comparisons, 10)

    def test_stats_untouched_for_degenerate_inputs(self):
        stats = SearchStats()
        search("ABC", "", stats)
        search_all("", "A", stats)
        self.assertEqual(stats, SearchStats())


class TestCases(unittest.TestCase):
    """Tests for loading test-case input files."""

    def setUp(self):
        self.test_dir = tempfile.mkdtemp(prefix="kmp_cases_")

    def tearDown(self):
        shutil.rmtree(self.test_dir, ignore_errors=True)

    def _write(self, name, content):
        path = os.path.join(self.test_dir, name)
        with open(path, "w", encoding="utf-8") as f:
            f.write(content if isinstance(content, str) else json.dumps(content))
        return path

    def test_load_case(self):
        path = self._write("case1.json", {
            "test_id": "TC1", "text": "ABABDABACDABABCABAB",
            "pattern": "ABABCABAB", "description": "reference"
        })
        case = load_case(path)
        self.assertEqual(case.test_id, "TC1")
        self.assertEqual(case.pattern, "ABABCABAB")
        self.assertEqual(case.source, path)

    def test_missing_fields_default_to_empty(self):
        case = parse_case({"test_id": "TC2", "text": "HELLO"})
        self.assertEqual(case.pattern, "")
        self.assertEqual(case.description, "")

    def test_invalid_json(self):
        path = self._write("bad.json", "{not json")
        with self.assertRaises(CaseError):
            load_case(path)

    def test_non_object_root(self):
        path = self._write("list.json", [1, 2, 3])
        with self.assertRaises(CaseError):
            load_case(path)

    def test_non_string_field(self):
        with self.assertRaises(CaseError):
            parse_case({"text": "ABC", "pattern": 5})

    def test_text_file(self):
        self._write("body.txt", "the quick brown fox")
        path = self._write("case.json", {"test_id": "T", "text_file": "body.txt", "pattern": "fox"})
        self.assertEqual(load_case(path).text, "the quick brown fox")

    def test_missing_text_file(self):
        path = self._write("case.json", {"text_file": "nope.txt", "pattern": "x"})
        with self.assertRaises(CaseError):
            load_case(path)

    def test_pdf_text_file(self):
        self._write("doc.pdf", "%PDF-1.4")
        path = self._write("case.json", {"text_file": "doc.pdf", "pattern": "fox"})
        with patch("cases.extract_pdf_text", return_value="a fox in a pdf") as mock_extract:
            case = load_case(path)
        self.assertEqual(case.text, "a fox in a pdf")
        mock_extract.assert_called_once_with(os.path.join(self.test_dir, "doc.pdf"))

    def test_unreadable_pdf(self):
        self._write("doc.pdf", "%PDF-1.4")
        path = self._write("case.json", {"text_file": "doc.pdf", "pattern": "fox"})
        with patch("cases.extract_pdf_text", return_value=None):
            with self.assertRaises(CaseError):
                load_case(path)

    def test_discover_cases_sorted(self):
        self._write("b.json", {})
        self._write("a.json", {})
        self._write("notes.txt", "ignored")
        names = [p.name for p in discover_cases(self.test_dir)]
        self.assertEqual(names, ["a.json", "b.json"])

    def test_extract_pdf_text_missing_file(self):
        self.assertIsNone(extract_pdf_text(os.path.join(self.test_dir, "missing.pdf")))

    def _write_pdf(self, name, page_texts):
        """Write a PDF with one page per entry; None gives a page without text."""
        writer = PdfWriter()
        for text in page_texts:
            page = writer.add_blank_page(width=300, height=200)
            if text is None:
                continue
            font = DictionaryObject({
                NameObject("/Type"): NameObject("/Font"),
                NameObject("/Subtype"): NameObject("/Type1"),
                NameObject("/BaseFont"): NameObject("/Helvetica"),
            })
            page[NameObject("/Resources")] = DictionaryObject({
                NameObject("/Font"): DictionaryObject({NameObject("/F1"): font})
            })
            content = DecodedStreamObject()
            content.set_data(f"BT /F1 12 Tf 20 100 Td ({text}) Tj ET".encode("latin-1"))
            page.replace_contents(content)
        path = os.path.join(self.test_dir, name)
        with open(path, "wb") as f:
            writer.write(f)
        return path

    def test_parse_real_pdf(self):
        path = self._write_pdf("doc.pdf", ["Hello KMP", None, "ABABCABAB"])
        pages = parse_pdf_to_pages_text(path)
        self.assertEqual(len(pages), 3)
        self.assertEqual(pages[0], "Hello KMP")
        self.assertEqual(pages[1], "")
        self.assertEqual(pages[2], "ABABCABAB")
        self.assertEqual(extract_pdf_text(path), "Hello KMP ABABCABAB")

    def test_case_with_real_pdf_text(self):
        self._write_pdf("doc.pdf", ["the lazy dog"])
        path = self._write("case.json", {"test_id": "PDF", "text_file": "doc.pdf", "pattern": "lazy"})
        case = load_case(path)
        self.assertEqual(case.text, "the lazy dog")
        self.assertEqual(search(case.text, case.pattern), 4)

    def test_non_utf8_case_file(self):
        path = os.path.join(self.test_dir, "latin1.json")
        with open(path, "wb") as f:
            f.write(b'{"text": "\xff\xfe", "pattern": "A"}')
        with self.assertRaises(CaseError):
            load_case(path)

    def test_size_limit_counts_utf8_bytes(self):
        # 4 characters, 8 bytes in UTF-8
        with patch("cases.MAX_ALLOWED_TEXT_SIZE", 6):
            with self.assertRaises(CaseError):
                parse_case({"text": "éééé", "pattern": "é"})
            self.assertEqual(parse_case({"text": "abcd", "pattern": "b"}).text, "abcd")

class TestReport(unittest.TestCase):
    """Tests for report building and output files."""

    def test_found_report(self):
        case = SearchCase(test_id="TC1", text="ABABDABACDABABCABAB", pattern="ABABCABAB", description="d")
        report = run_case(case)
        self.assertTrue(report.found)
        self.assertEqual(report.index, 10)
        self.assertEqual(report.matches, [10])
        self.assertEqual(report.lps_array, [0, 0, 1, 2, 0, 1, 2, 3, 4])
        self.assertEqual(report.text_length, 19)
        self.assertEqual(report.pattern_length, 9)
        self.assertGreaterEqual(report.execution_time_ns, 0)

    def test_not_found_uses_sentinel(self):
        case = SearchCase(test_id="TC2", text="ABC", pattern="ABCDEF")
        report = build_report(case, None, [], build_lps(case.pattern), 1500)
        self.assertFalse(report.found)
        self.assertEqual(report.index, NOT_FOUND_INDEX)
        self.assertEqual(report.execution_time_ms, 0.0015)

    def test_offset_zero_is_found(self):
        report = build_report(SearchCase("TC3", "HELLO", ""), 0, [], [], 0)
        self.assertTrue(report.found)
        self.assertEqual(report.index, 0)

    def test_json_output(self):
        case = SearchCase(test_id="TC4", text="naïve \"quoted\"\n", pattern="ï")
        data = json.loads(run_case(case).to_json())
        self.assertEqual(data["text"], "naïve \"quoted\"\n")
        self.assertEqual(data["index"], 2)
        self.assertEqual(data["lps_array"], [0])
        self.assertEqual(data["input_digest"], input_digest(case.text, case.pattern))

    def test_input_digest(self):
        self.assertEqual(len(input_digest("ABC", "B")), 64)
        self.assertEqual(input_digest("ABC", "B"), input_digest("ABC", "B"))
        self.assertNotEqual(input_digest("ABC", "B"), input_digest("AB", "CB"))

    def test_output_path_for(self):
        self.assertEqual(output_path_for("data/input/case1.json", "out"), Path("out") / "case1_output.json")

    def test_write_report_creates_directories(self):
        test_dir = tempfile.mkdtemp(prefix="kmp_report_")
        try:
            path = Path(test_dir) / "nested" / "x_output.json"
            write_report(run_case(SearchCase("T", "AB", "B")), path)
            with open(path, encoding="utf-8") as f:
                self.assertEqual(json.load(f)["index"], 1)
        finally:
            shutil.rmtree(test_dir, ignore_errors=True)

    def test_format_lps(self):
        self.assertEqual(format_lps([0, 0, 1]), "[0, 0, 1]")
        self.assertEqual(format_lps([]), "[]")


class TestRunner(unittest.TestCase):
    """Tests for the directory runner and command line."""

    def setUp(self):
        self.test_dir = tempfile.mkdtemp(prefix="kmp_runner_")
        self.input_dir = os.path.join(self.test_dir, "input")
        self.output_dir = os.path.join(self.test_dir, "output")
        os.makedirs(self.input_dir)

    def tearDown(self):
        shutil.rmtree(self.test_dir, ignore_errors=True)

    def _write_case(self, name, record):
        with open(os.path.join(self.input_dir, name), "w", encoding="utf-8") as f:
            f.write(record if isinstance(record, str) else json.dumps(record))

    @patch("sys.stdout", new_callable=io.StringIO)
    def test_run_writes_outputs(self, mock_stdout):
        self._write_case("case1.json", {"test_id": "TC1", "text": "ABABABABAB", "pattern": "ABA"})
        self._write_case("case2.json", {"test_id": "TC2", "text": "ABC", "pattern": "XYZ"})
        summary = KMPTestRunner(self.input_dir, self.output_dir).run()

        self.assertEqual((summary.total, summary.passed, summary.failed), (2, 2, 0))
        with open(os.path.join(self.output_dir, "case1_output.json"), encoding="utf-8") as f:
            first = json.load(f)
        with open(os.path.join(self.output_dir, "case2_output.json"), encoding="utf-8") as f:
            second = json.load(f)
        self.assertEqual(first["index"], 0)
        self.assertEqual(first["matches"], [0, 2, 4, 6])
        self.assertEqual(second["index"], -1)
        self.assertFalse(second["found"])
        self.assertIn("TEST SUMMARY", mock_stdout.getvalue())

    @patch("sys.stdout", new_callable=io.StringIO)
    def test_bad_file_is_counted_and_skipped(self, mock_stdout):
        self._write_case("a_bad.json", "{broken")
        self._write_case("b_good.json", {"test_id": "TC", "text": "HELLO", "pattern": "LL"})
        summary = KMPTestRunner(self.input_dir, self.output_dir).run()

        self.assertEqual((summary.passed, summary.failed), (1, 1))
        self.assertEqual(summary.failures, ["a_bad.json"])
        self.assertTrue(os.path.exists(os.path.join(self.output_dir, "b_good_output.json")))

    @patch("sys.stdout", new_callable=io.StringIO)
    def test_undecodable_file_does_not_stop_the_run(self, mock_stdout):
        with open(os.path.join(self.input_dir, "a_bad.json"), "wb") as f:
            f.write(b'{"text": "\xff\xfe", "pattern": "A"}')
        self._write_case("b_good.json", {"test_id": "TC", "text": "HELLO", "pattern": "LO"})
        summary = KMPTestRunner(self.input_dir, self.output_dir).run()

        self.assertEqual((summary.total, summary.passed, summary.failed), (2, 1, 1))
        self.assertEqual(summary.failures, ["a_bad.json"])
        with open(os.path.join(self.output_dir, "b_good_output.json"), encoding="utf-8") as f:
            self.assertEqual(json.load(f)["index"], 3)

    @patch("sys.stdout", new_callable=io.StringIO)
    def test_missing_input_directory(self, mock_stdout):
        runner = KMPTestRunner(os.path.join(self.test_dir, "missing"), self.output_dir)
        self.assertIsNone(runner.run())

    @patch("sys.stdout", new_callable=io.StringIO)
    def test_empty_input_directory(self, mock_stdout):
        summary = KMPTestRunner(self.input_dir, self.output_dir).run()
        self.assertEqual(summary.total, 0)

    @patch("main.setup_logging")
    @patch("sys.stdout", new_callable=io.StringIO)
    def test_main_exit_codes(self, mock_stdout, mock_setup_logging):
        self._write_case("case1.json", {"test_id": "TC1", "text": "ABC", "pattern": "B"})
        self.assertEqual(main([self.input_dir, self.output_dir]), 0)
        self.assertEqual(main([os.path.join(self.test_dir, "missing"), self.output_dir]), 1)
        self._write_case("case2.json", "[]")
        self.assertEqual(main([self.input_dir, self.output_dir]), 1)

    @patch("sys.stdout", new_callable=io.StringIO)
    def test_main_search_command(self, mock_stdout):
        self.assertEqual(main(["search", "HELLO WORLD", "WORLD"]), 0)
        output = mock_stdout.getvalue()
        self.assertIn("Found at index 6", output)
        self.assertIn("LPS Array: [0, 0, 0, 0, 0]", output)

    @patch("sys.stdout", new_callable=io.StringIO)
    def test_main_usage_errors(self, mock_stdout):
        self.assertEqual(main(["search", "only-text"]), 2)
        self.assertEqual(main(["a", "b", "c"]), 2)
        self.assertEqual(main(["--help"]), 0)
        self.assertIn("Usage", mock_stdout.getvalue())

# --- Test Runner ---
if __name__ == '__main__':
    unittest.main(verbosity=3)
