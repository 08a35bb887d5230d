# -*- coding:utf-8 -*-
# Made by Kei Choi(hanul93@gmail.com)

import json
import os
import tempfile
import unittest

import isfixtures
from isextract import Extractor
from isextract.iscore.config import Config

FILES = [("a.txt", b"first file\r\n" * 20), ("b.txt", b"second file\r\n" * 40)]


class Test_Extractor(unittest.TestCase):
    def setUp(self):
        self.extractor = Extractor(Config())
        self.tmp = tempfile.TemporaryDirectory()

    def tearDown(self):
        self.extractor.close()
        self.tmp.cleanup()

    def write(self, name, data):
        path = os.path.join(self.tmp.name, name)
        with open(path, "wb") as fp:
            fp.write(data)
        return path

    def test_two_file_stream(self):
        data = isfixtures.make_pe(isfixtures.stream12_overlay(FILES))
        report = self.extractor.extract_bytes(data, "setup.exe")

        self.assertEqual(report.status, "complete")
        self.assertEqual(report.variant, "Stream12")
        self.assertEqual(report.overlay_offset, 0x400)
        self.assertEqual([(f.filename, f.content) for f in report.files], FILES)
        self.assertEqual(report.entries_decoded, 2)
        self.assertEqual(report.bytes_lost_to_resync, 0)
        self.assertEqual(report.entries_undecodable, 0)

    def test_version_hint_override(self):
        data = isfixtures.make_pe(isfixtures.stream30_overlay(FILES))

        with Extractor(Config(), version_hint="30.0.157") as extractor:
            report = extractor.extract_bytes(data)
        self.assertEqual(report.variant, "Stream30")
        self.assertEqual(report.namelist(), ["a.txt", "b.txt"])

    def test_unsupported(self):
        report = self.extractor.extract_bytes(b"MZ not really a PE")
        self.assertEqual(report.status, "unsupported")

        report = self.extractor.extract_bytes(isfixtures.make_pe())
        self.assertEqual(report.status, "unsupported")

        report = self.extractor.extract_bytes(isfixtures.make_pe(b"PK\x03\x04" + b"\0" * 100))
        self.assertEqual(report.status, "unsupported")
        self.assertEqual(report.files, [])

    def test_truncated_header(self):
        report = self.extractor.extract_bytes(isfixtures.make_pe(isfixtures.make_header(2)[:30]))
        self.assertEqual(report.status, "failed")
        self.assertFalse(report.unsupported)

    def test_extract_file(self):
        path = self.write("setup.exe", isfixtures.make_pe(isfixtures.stream12_overlay(FILES)))
        report = self.extractor.extract_file(path)
        self.assertEqual(report.path, path)
        self.assertEqual(report.namelist(), ["a.txt", "b.txt"])

        report = self.extractor.extract_file(os.path.join(self.tmp.name, "missing.exe"))
        self.assertEqual(report.status, "failed")
        self.assertEqual(report.error, "File not found")

    def test_extract_files_parallel(self):
        paths = [
            self.write(f"setup{i}.exe", isfixtures.make_pe(isfixtures.stream12_overlay(FILES[: i + 1])))
            for i in range(2)
        ]
        paths.append(self.write("readme.txt", b"not an installer"))

        seen = []
        reports = self.extractor.extract_files(paths, callback=seen.append, parallel=True, max_workers=2)

        self.assertEqual([r.path for r in reports], paths)
        self.assertEqual([r.entries_decoded for r in reports], [1, 2, 0])
        self.assertEqual(reports[2].status, "unsupported")
        self.assertEqual(len(seen), 3)

    def test_extract_directory(self):
        os.makedirs(os.path.join(self.tmp.name, "sub"))
        self.write("setup.exe", isfixtures.make_pe(isfixtures.stream12_overlay(FILES)))
        self.write(os.path.join("sub", "setup2.exe"), isfixtures.make_pe(isfixtures.stream12_overlay(FILES)))

        self.assertEqual(len(self.extractor.extract_directory(self.tmp.name)), 2)
        self.assertEqual(len(self.extractor.extract_directory(self.tmp.name, recursive=False)), 1)

        reports = self.extractor.extract_directory(os.path.join(self.tmp.name, "nothing"))
        self.assertEqual(reports[0].error, "Directory not found")

    def test_save(self):
        files = [("a.txt", b"one"), ("A.TXT", b"two"), ("..\\evil.txt", b"three"), ("dir\\c.txt", b"four")]
        report = self.extractor.extract_bytes(isfixtures.make_pe(isfixtures.stream12_overlay(files)))
        self.assertEqual(report.entries_decoded, 4)

        out = os.path.join(self.tmp.name, "out")
        written = self.extractor.save(report, out)

        names = sorted(os.path.relpath(p, out).replace(os.sep, "/") for p in written)
        self.assertEqual(names, ["A_1.TXT", "a.txt", "dir/c.txt", "file_0002.bin"])
        with open(os.path.join(out, "dir", "c.txt"), "rb") as fp:
            self.assertEqual(fp.read(), b"four")
        for path in written:
            self.assertTrue(os.path.abspath(path).startswith(os.path.abspath(out) + os.sep))

    @unittest.skipIf(os.name == "nt", "symlinks need privileges on Windows")
    def test_save_symlink_outside(self):
        report = self.extractor.extract_bytes(isfixtures.make_pe(isfixtures.stream12_overlay(FILES)))

        outside = self.write("outside.txt", b"keep")
        out = os.path.join(self.tmp.name, "out")
        os.makedirs(out)
        os.symlink(outside, os.path.join(out, "a.txt"))

        written = self.extractor.save(report, out)
        self.assertEqual([os.path.basename(p) for p in written], ["b.txt"])
        with open(outside, "rb") as fp:
            self.assertEqual(fp.read(), b"keep")

    def test_report_to_dict(self):
        report = self.extractor.extract_bytes(isfixtures.make_pe(isfixtures.stream12_overlay(FILES)), "setup.exe")
        d = json.loads(json.dumps(report.to_dict()))

        self.assertEqual(d["status"], "complete")
        self.assertEqual(d["entries_decoded"], 2)
        self.assertEqual(d["files"][0]["filename"], "a.txt")
        self.assertEqual(d["files"][0]["size"], len(FILES[0][1]))
        self.assertEqual(len(d["files"][0]["sha256"]), 64)


if __name__ == "__main__":
    unittest.main()
