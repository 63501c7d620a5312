import os
import tempfile
import unittest

import file_matcher
from file_matcher import FileMatcher, build_file_inventory, derive_base_name, normalize


def _matcher(names, source="Z:\\Disegni", target="C:\\Tavole"):
    return FileMatcher(build_file_inventory(names), source, target)


class TestNormalize(unittest.TestCase):
    def test_case_and_whitespace_insensitive(self):
        self.assertEqual(normalize("  ba102262 "), normalize("BA102262"))
        self.assertEqual(normalize("\tRp000005-01a\n"), "RP000005-01A")

    def test_empty_values(self):
        self.assertEqual(normalize(None), "")
        self.assertEqual(normalize("   "), "")

    def test_integral_float_reads_like_int(self):
        self.assertEqual(normalize(1.0), "1")
        self.assertEqual(normalize(1), "1")
        self.assertEqual(normalize(1.5), "1.5")


class TestDeriveBaseName(unittest.TestCase):
    def test_code_equal_to_configuration(self):
        self.assertEqual(derive_base_name("BA102262", "BA102262", "A"), "BA102262A")

    def test_code_different_from_configuration(self):
        self.assertEqual(derive_base_name("BA001218", "RP000005", "-01A"), "BA001218_RP000005-01A")

    def test_equality_ignores_case_but_keeps_raw_text(self):
        self.assertEqual(derive_base_name(" ba102262", "BA102262 ", "a"), "ba102262a")

    def test_illegal_characters_removed(self):
        self.assertEqual(derive_base_name("AB/12", "C:D", "?1"), "AB12_CD1")

    def test_blank_code_gives_empty_name(self):
        self.assertEqual(derive_base_name("  ", "CFG", "A"), "")
        self.assertEqual(derive_base_name(None, "CFG", "A"), "")

    def test_numeric_revision(self):
        self.assertEqual(derive_base_name("P1", "P1", 1.0), "P11")


class TestBuildFileInventory(unittest.TestCase):
    def test_filters_on_allowed_extensions(self):
        names = ["a.pdf", "b.DWG", "c.txt", "noext", "d.Step", "e.stp", "x.dwg", "archive.pdf.zip"]
        available, dwg_files = build_file_inventory(names)
        self.assertEqual(set(available), {"A.PDF", "B.DWG", "D.STEP", "E.STP", "X.DWG"})
        self.assertEqual(available["D.STEP"], "d.Step")
        self.assertEqual(dwg_files, ["b.DWG", "x.dwg"])

    def test_empty_listing(self):
        self.assertEqual(build_file_inventory([]), ({}, []))


class TestFileMatcher(unittest.TestCase):
    def test_pdf_exact_match_is_case_insensitive(self):
        matcher = _matcher(["ba102262a.PDF"])
        self.assertEqual(matcher.match("BA102262A", "A", "pdf"), ["ba102262a.PDF"])
        self.assertEqual(matcher.match("BA102262", "A", "pdf"), [])

    def test_dwg_prefix_match(self):
        names = ["BA001218_RP000005-01 DISTINTA.dwg", "OTHER.dwg", "BA001218_RP000005-01.dwg"]
        matcher = _matcher(names)
        self.assertEqual(
            matcher.match("BA001218_RP000005-01", "-01", "DWG"),
            ["BA001218_RP000005-01 DISTINTA.dwg", "BA001218_RP000005-01.dwg"],
        )

    def test_pdf_is_not_prefix_matched(self):
        matcher = _matcher(["BA001218_RP000005-01 DISTINTA.pdf"])
        self.assertEqual(matcher.match("BA001218_RP000005-01", "-01", "PDF"), [])

    def test_single_digit_revision_is_padded(self):
        matcher = _matcher(["BA001218_RP000005-01.pdf", "BA10226201 DISTINTA.dwg"])
        self.assertEqual(matcher.match("BA001218_RP000005-1", "1", "PDF"), ["BA001218_RP000005-01.pdf"])
        self.assertEqual(matcher.match("BA1022621", 1, "DWG"), ["BA10226201 DISTINTA.dwg"])

    def test_padding_only_for_single_digit(self):
        matcher = _matcher(["P1012.pdf"])
        self.assertEqual(matcher.match("P112", "12", "PDF"), [])
        self.assertEqual(file_matcher.pad_revision_base_name("P1A", "A"), "")
        self.assertEqual(file_matcher.pad_revision_base_name("P13", "3"), "P103")

    def test_step_is_fallback_for_stp(self):
        matcher = _matcher(["P1A.step"])
        self.assertEqual(matcher.match_family("P1A", "A", "STEP"), ["P1A.step"])
        self.assertEqual(matcher.files_found_details, {"pdf": 0, "dwg": 0, "stp": 1})
        self.assertEqual(
            matcher.copy_commands,
            ['if exist "Z:\\Disegni\\P1A.step" copy "Z:\\Disegni\\P1A.step" "C:\\Tavole\\STEP\\P1A.step" > nul'],
        )

    def test_stp_preferred_over_step(self):
        matcher = _matcher(["P1A.step", "P1A.stp"])
        self.assertEqual(matcher.match_family("P1A", "A", "STEP"), ["P1A.stp"])

    def test_padded_revision_for_stp(self):
        matcher = _matcher(["X-01.stp"])
        self.assertEqual(matcher.match_family("X-1", "1", "STEP"), ["X-01.stp"])
        self.assertEqual(matcher.files_found_details, {"pdf": 0, "dwg": 0, "stp": 1})
        self.assertEqual(
            matcher.copy_commands,
            ['if exist "Z:\\Disegni\\X-01.stp" copy "Z:\\Disegni\\X-01.stp" "C:\\Tavole\\STEP\\X-01.stp" > nul'],
        )

    def test_padded_revision_for_step_fallback(self):
        matcher = _matcher(["X-01.step"])
        self.assertEqual(matcher.match_family("X-1", "1", "STEP"), ["X-01.step"])
        self.assertEqual(matcher.files_found, 1)
        self.assertIn("\\STEP\\X-01.step", matcher.copy_commands[0])

    def test_same_file_counted_and_copied_once(self):
        matcher = _matcher(["P1A.pdf", "P2A.pdf"])
        matcher.match_family("P1A", "A", "PDF")
        matcher.match_family("P2A", "A", "PDF")
        matcher.match_family("P1A", "A", "PDF")
        self.assertEqual(matcher.files_found, 2)
        self.assertEqual(matcher.files_found_details["pdf"], 2)
        self.assertEqual(len(matcher.copy_commands), 2)
        self.assertIn("P1A.pdf", matcher.copy_commands[0])
        self.assertIn("P2A.pdf", matcher.copy_commands[1])

    def test_dwg_commands_use_dwg_subfolder(self):
        matcher = _matcher(["P1A REV.dwg"])
        matcher.match_family("P1A", "A", "DWG")
        self.assertEqual(
            matcher.copy_commands,
            ['if exist "Z:\\Disegni\\P1A REV.dwg" copy "Z:\\Disegni\\P1A REV.dwg" "C:\\Tavole\\DWG\\P1A REV.dwg" > nul'],
        )

    def test_empty_base_name_never_matches(self):
        matcher = _matcher([".pdf", "x.dwg"])
        self.assertEqual(matcher.match("", "", "PDF"), [])
        self.assertEqual(matcher.match("", "", "DWG"), [])


class TestListSourceFiles(unittest.TestCase):
    def test_lists_only_top_level_files(self):
        with tempfile.TemporaryDirectory() as td:
            for name in ["b.pdf", "a.dwg"]:
                with open(os.path.join(td, name), "w") as f:
                    f.write("x")
            os.mkdir(os.path.join(td, "sub"))
            with open(os.path.join(td, "sub", "c.pdf"), "w") as f:
                f.write("x")

            self.assertEqual(file_matcher.list_source_files(td), ["a.dwg", "b.pdf"])

    def test_missing_directory(self):
        with tempfile.TemporaryDirectory() as td:
            with self.assertRaises(FileNotFoundError):
                file_matcher.list_source_files(os.path.join(td, "nope"))


if __name__ == "__main__":
    unittest.main()
