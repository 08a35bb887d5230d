# -*- coding:utf-8 -*-
# Author: Kei Choi(hanul93@gmail.com)

"""
InstallShield payload cipher

Every payload byte is nibble-swapped, XORed with a key derived from the owning
file name and inverted. The key index either runs continuously over the whole
payload or restarts at every 1024-byte block, depending on the entry flags.
A decrypted payload starting with 0x78 is a zlib stream.
"""

import functools
import logging
import zlib

from isextract.iscore.isconst import CorruptPayloadError

# Module logger
logger = logging.getLogger(__name__)

MAGIC_DEC = (0x13, 0x35, 0x86, 0x07)
IS_BLOCK_SIZE = 1024
ZLIB_MARKER = 0x78

FLAG_ENCODED = 0x2  # One continuous key stream
FLAG_CHUNKED = 0x4  # Key index restarts at every IS_BLOCK_SIZE block


# -------------------------------------------------------------------------
# gen_key(seed)
# Generate the key from the raw bytes of a file name
# input  : seed - file name bytes
# return : key
# -------------------------------------------------------------------------
def gen_key(seed: bytes) -> bytes:
    return bytes(byte ^ MAGIC_DEC[i % len(MAGIC_DEC)] for i, byte in enumerate(seed))


def decode_byte(byte: int, key_byte: int) -> int:
    """Decode single byte"""
    # ~(key ^ (Byte * 16 | Byte >> 4))
    rotated = ((byte << 4) & 0xFF) | (byte >> 4)
    xored = key_byte ^ rotated
    return (~xored) & 0xFF


def encode_byte(byte: int, key_byte: int) -> int:
    """Encode single byte (inverse of decode_byte)"""
    xored = ((~byte) & 0xFF) ^ key_byte
    return ((xored << 4) & 0xFF) | (xored >> 4)


@functools.lru_cache(maxsize=256)
def _decode_table(key_byte: int) -> bytes:
    return bytes(decode_byte(b, key_byte) for b in range(256))


@functools.lru_cache(maxsize=256)
def _encode_table(key_byte: int) -> bytes:
    return bytes(encode_byte(b, key_byte) for b in range(256))


def _transform(data, offset: int, key: bytes, table) -> bytes:
    # Bytes sharing a key index are translated together
    data = bytes(data)
    key_len = len(key)
    result = bytearray(len(data))

    for i in range(min(key_len, len(data))):
        result[i::key_len] = data[i::key_len].translate(table(key[(i + offset) % key_len]))

    return bytes(result)


def _transform_blocks(data, offset: int, key: bytes, table) -> bytes:
    data = bytes(data)
    chunks = []
    done = 0
    data_len = len(data)

    while done < data_len:
        block_start = (done + offset) % IS_BLOCK_SIZE
        task_len = min(IS_BLOCK_SIZE - block_start, data_len - done)

        chunks.append(_transform(data[done : done + task_len], block_start, key, table))
        done += task_len

    return b"".join(chunks)


def decode_data(data, offset: int, key: bytes) -> bytes:
    """Decode data with key (one continuous stream starting at key index offset)"""
    return _transform(data, offset, key, _decode_table)


def encode_data(data, offset: int, key: bytes) -> bytes:
    """Encode data with key (inverse of decode_data)"""
    return _transform(data, offset, key, _encode_table)


def decode_data_ustrm(data, offset: int, key: bytes) -> bytes:
    """Decode data for unicode stream (key index resets every 1024 byte block)"""
    return _transform_blocks(data, offset, key, _decode_table)


def encode_data_ustrm(data, offset: int, key: bytes) -> bytes:
    """Encode data for unicode stream (inverse of decode_data_ustrm)"""
    return _transform_blocks(data, offset, key, _encode_table)


# -------------------------------------------------------------------------
# inflate_file(data)
# Inflate a zlib compressed payload
# input  : data - decrypted payload starting with the zlib header
# return : decompressed data
# -------------------------------------------------------------------------
def inflate_file(compressed_data: bytes) -> bytes:
    if len(compressed_data) < 2:
        raise CorruptPayloadError("zlib stream too short")

    try:
        return zlib.decompress(compressed_data)
    except zlib.error as e:
        raise CorruptPayloadError(f"zlib stream is corrupt: {e}") from e


# -------------------------------------------------------------------------
# decode_payload(data, seed, cipher_flags)
# Decrypt one payload and inflate it when it carries the zlib marker
# input  : data         - raw payload bytes
#          seed         - raw bytes of the owning file name
#          cipher_flags - FLAG_CHUNKED / FLAG_ENCODED bits of the entry
# return : decoded content
# -------------------------------------------------------------------------
def decode_payload(data, seed: bytes, cipher_flags: int = FLAG_CHUNKED) -> bytes:
    if not cipher_flags & (FLAG_ENCODED | FLAG_CHUNKED):
        # Stored in the clear
        return bytes(data)

    key = gen_key(seed)
    if not key:
        raise CorruptPayloadError("empty file name, no key material")

    if cipher_flags & FLAG_CHUNKED:
        decoded = decode_data_ustrm(data, 0, key)
    else:
        decoded = decode_data(data, 0, key)

    if decoded[:1] == bytes([ZLIB_MARKER]):
        logger.debug("Inflating %d byte payload", len(decoded))
        return inflate_file(decoded)

    return decoded


# -------------------------------------------------------------------------
# encode_payload(data, seed, cipher_flags, compress)
# Build a payload the way the installer stores it (used to craft samples)
# -------------------------------------------------------------------------
def encode_payload(data: bytes, seed: bytes, cipher_flags: int = FLAG_CHUNKED, compress: bool = True) -> bytes:
    if compress:
        data = zlib.compress(data)

    if not cipher_flags & (FLAG_ENCODED | FLAG_CHUNKED):
        return bytes(data)

    key = gen_key(seed)
    if cipher_flags & FLAG_CHUNKED:
        return encode_data_ustrm(data, 0, key)
    return encode_data(data, 0, key)
