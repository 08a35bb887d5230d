# -*- coding:utf-8 -*-
# Made by Kei Choi(hanul93@gmail.com)

import unittest

import isfixtures
from isextract.formats import pe
from isextract.iscore.isconst import UnsupportedFormatError

OVERLAY = isfixtures.stream12_overlay([("a.txt", b"alpha")])


class Test_PE_Overlay(unittest.TestCase):
    def test_overlay(self):
        data = isfixtures.make_pe(OVERLAY)
        p = pe.PEOverlay(data, "setup.exe").parse()
        self.assertEqual(p.overlay_start, 0x400)
        self.assertEqual(p.overlay_end, len(data))
        self.assertTrue(p.has_overlay)

        image = p.get_overlay_image()
        self.assertEqual(image.data, OVERLAY)
        self.assertEqual(image.offset, 0x400)
        self.assertEqual(image.filename, "setup.exe")
        p.close()

    def test_no_overlay(self):
        p = pe.PEOverlay(isfixtures.make_pe()).parse()
        self.assertFalse(p.has_overlay)
        p.close()

        with self.assertRaises(UnsupportedFormatError):
            pe.get_overlay(isfixtures.make_pe())

    def test_certificate_after_overlay(self):
        cert = b"\x30\x82" + b"\0" * 62
        data = isfixtures.make_pe(OVERLAY, cert=cert)
        image, _, _ = pe.get_overlay(data)
        self.assertEqual(image.offset, 0x400)
        self.assertEqual(image.data, OVERLAY)

    def test_certificate_before_overlay(self):
        cert = b"\x30\x82" + b"\0" * 62
        data = isfixtures.make_pe(OVERLAY, cert=cert, cert_first=True)
        image, _, _ = pe.get_overlay(data)
        self.assertEqual(image.offset, 0x400 + len(cert))
        self.assertEqual(image.data, OVERLAY)

    def test_not_pe(self):
        with self.assertRaises(UnsupportedFormatError):
            pe.PEOverlay(b"ISSetupStream" + b"\0" * 100).parse()

        with self.assertRaises(UnsupportedFormatError):
            pe.get_overlay(b"")

    def test_version_strings(self):
        p = pe.PEOverlay(isfixtures.make_pe(OVERLAY)).parse()
        self.assertIsNone(p.get_version_hint())
        self.assertIsNone(p.get_description())

        p.strings = {"FileVersion": "12.0.0.1", "ISInternalVersion": "30.0.157"}
        self.assertEqual(p.get_version_hint(), "30.0.157")

        p.strings = {"FileVersion": "24.0.573", "ISInternalDescription": "InstallScript Setup Launcher"}
        self.assertEqual(p.get_version_hint(), "24.0.573")
        self.assertEqual(p.get_description(), "InstallScript Setup Launcher")
        p.close()


if __name__ == "__main__":
    unittest.main()
