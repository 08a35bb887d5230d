# -*- coding:utf-8 -*-
# Made by Kei Choi(hanul93@gmail.com)

import unittest
import zlib

from isextract.formats import cryptolib
from isextract.iscore.isconst import CorruptPayloadError


class Test_IS_Cipher(unittest.TestCase):
    def setUp(self):
        self.key = cryptolib.gen_key(b"setup.inx")

    def test_gen_key(self):
        key = cryptolib.gen_key(b"a.txt")
        self.assertEqual(key, bytes([0x61 ^ 0x13, 0x2E ^ 0x35, 0x74 ^ 0x86, 0x78 ^ 0x07, 0x74 ^ 0x13]))
        self.assertEqual(cryptolib.gen_key(b""), b"")

    def test_decode_byte(self):
        # 0x12 -> nibble swap 0x21 -> ~0x21
        self.assertEqual(cryptolib.decode_byte(0x12, 0x00), 0xDE)
        self.assertEqual(cryptolib.decode_byte(0x12, 0xFF), 0x21)

        for key_byte in (0x00, 0x13, 0x72, 0xFF):
            for b in range(256):
                self.assertEqual(cryptolib.decode_byte(cryptolib.encode_byte(b, key_byte), key_byte), b)

    def test_block_round_trip(self):
        for size in (1, 1023, 1024, 1025, 2048, 2049, 5000):
            data = bytes((i * 7 + 3) & 0xFF for i in range(size))
            enc = cryptolib.encode_data_ustrm(data, 0, self.key)
            self.assertEqual(len(enc), size)
            self.assertEqual(cryptolib.decode_data_ustrm(enc, 0, self.key), data)

    def test_stream_round_trip(self):
        for size in (1023, 1024, 1025, 4096):
            data = bytes((i * 13) & 0xFF for i in range(size))
            enc = cryptolib.encode_data(data, 0, self.key)
            self.assertEqual(cryptolib.decode_data(enc, 0, self.key), data)

    def test_key_index_restarts_per_block(self):
        data = b"\0" * 2048
        enc = cryptolib.encode_data_ustrm(data, 0, self.key)
        self.assertEqual(enc[:1024], enc[1024:])

        # The key length (9) does not divide 1024, a continuous stream differs
        enc = cryptolib.encode_data(data, 0, self.key)
        self.assertNotEqual(enc[:1024], enc[1024:])

    def test_block_offset(self):
        data = bytes(range(256)) * 8
        enc = cryptolib.encode_data_ustrm(data, 0, self.key)
        # Decoding a tail keeps the block-relative key position
        self.assertEqual(cryptolib.decode_data_ustrm(enc[1000:], 1000, self.key), data[1000:])


class Test_IS_Payload(unittest.TestCase):
    def test_compressed_payload(self):
        content = b"InstallShield payload " * 200
        for flags in (cryptolib.FLAG_CHUNKED, cryptolib.FLAG_ENCODED, cryptolib.FLAG_ENCODED | cryptolib.FLAG_CHUNKED):
            raw = cryptolib.encode_payload(content, b"data1.hdr", flags)
            self.assertNotEqual(raw[:1], b"\x78")
            self.assertEqual(cryptolib.decode_payload(raw, b"data1.hdr", flags), content)

    def test_uncompressed_payload(self):
        content = b"plain text"
        raw = cryptolib.encode_payload(content, b"a.txt", cryptolib.FLAG_CHUNKED, compress=False)
        self.assertEqual(cryptolib.decode_payload(raw, b"a.txt", cryptolib.FLAG_CHUNKED), content)

    def test_stored_payload(self):
        # No cipher bit: returned verbatim even when it starts with the zlib marker
        self.assertEqual(cryptolib.decode_payload(b"xyz", b"a.txt", 0x01), b"xyz")
        self.assertEqual(cryptolib.decode_payload(b"", b"a.txt", 0x00), b"")

    def test_corrupt_zlib(self):
        raw = cryptolib.encode_payload(b"\x78\x00 not a zlib stream", b"a.txt", compress=False)
        with self.assertRaises(CorruptPayloadError):
            cryptolib.decode_payload(raw, b"a.txt")

    def test_missing_key(self):
        with self.assertRaises(CorruptPayloadError):
            cryptolib.decode_payload(b"\x01\x02", b"", cryptolib.FLAG_CHUNKED)

    def test_inflate_file(self):
        self.assertEqual(cryptolib.inflate_file(zlib.compress(b"abc")), b"abc")
        with self.assertRaises(CorruptPayloadError):
            cryptolib.inflate_file(b"\x78")


if __name__ == "__main__":
    unittest.main()
