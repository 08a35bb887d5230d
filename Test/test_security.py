# -*- coding:utf-8 -*-
# Made by Kei Choi(hanul93@gmail.com)

import os
import tempfile
import unittest

from isextract.iscore import issecurity


class Test_Member_Names(unittest.TestCase):
    def test_normalize(self):
        self.assertEqual(issecurity.normalize_member_name("setup.inx", "x"), "setup.inx")
        self.assertEqual(issecurity.normalize_member_name("Disk1\\data1.cab", "x"), "Disk1/data1.cab")
        self.assertEqual(issecurity.normalize_member_name("what?.txt", "x"), "what_.txt")

    def test_fallback(self):
        for name in ("", "..\\..\\boot.ini", "C:\\Windows\\win.ini", "\\\\server\\share\\a", "/etc/passwd", "a\0b"):
            self.assertEqual(issecurity.normalize_member_name(name, "fallback.bin"), "fallback.bin")

    def test_safe_extract(self):
        with tempfile.TemporaryDirectory() as base:
            path = issecurity.safe_extract_member("dir/a.txt", base)
            self.assertEqual(path, os.path.join(os.path.abspath(base), "dir", "a.txt"))

            with self.assertRaises(issecurity.SecurityError):
                issecurity.safe_extract_member("../a.txt", base)
            self.assertIsNone(issecurity.get_safe_extract_path("../../a.txt", base))


if __name__ == "__main__":
    unittest.main()
