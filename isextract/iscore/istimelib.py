# -*- coding:utf-8 -*-
# Author: Kei Choi(hanul93@gmail.com)


import datetime
import struct

FILETIME_EPOCH = datetime.datetime(1601, 1, 1, tzinfo=datetime.timezone.utc)


# ---------------------------------------------------------------------
# filetime_to_datetime(ft)
# Convert a FILETIME value or its raw 8 bytes to an aware datetime.
# Argument: ft - 64-bit FILETIME or 8-byte little-endian buffer
# Return: datetime in UTC, or None when the value is empty or out of range
# ---------------------------------------------------------------------
def filetime_to_datetime(ft):
    if isinstance(ft, (bytes, bytearray, memoryview)):
        if len(ft) != 8:
            return None
        ft = struct.unpack("<Q", ft)[0]

    if not ft:
        return None

    try:
        return FILETIME_EPOCH + datetime.timedelta(microseconds=ft // 10)
    except OverflowError:
        return None


# ---------------------------------------------------------------------
# datetime_to_filetime(dt)
# Convert a datetime to a FILETIME value.
# Argument: dt - datetime (naive values are treated as UTC)
# Return: 64-bit FILETIME
# ---------------------------------------------------------------------
def datetime_to_filetime(dt):
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=datetime.timezone.utc)

    delta = dt - FILETIME_EPOCH
    return (delta.days * 86400 + delta.seconds) * 10000000 + delta.microseconds * 10
