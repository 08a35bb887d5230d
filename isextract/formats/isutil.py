# -*- coding:utf-8 -*-
# Author: Kei Choi(hanul93@gmail.com)


import struct


# -------------------------------------------------------------------------
# get_uint32(buf, off):
# Read the value from the given buffer based on the offset as uint32
# input  : buf - Buffer
#          off - Offset
# return : uint32 converted value
# -------------------------------------------------------------------------
def get_uint32(buf, off, endian="<"):
    return struct.unpack_from(f"{endian}L", buf, off)[0]


# -------------------------------------------------------------------------
# HexDump
# Format a buffer as classic hex dump lines (used in debug logs)
# -------------------------------------------------------------------------
class HexDump:
    def __init__(self, width=16):
        self.width = width

    # -------------------------------------------------------------------------
    # Lines
    # Hex dump lines for a given buffer
    # input  : buf   : Buffer
    #          start : Address printed for buf[0]
    #          size  : Size to dump
    # return : list of strings
    # -------------------------------------------------------------------------
    def Lines(self, buf, start=0, size=0x100):
        width = self.width
        buf = bytes(buf[:size])
        lines = []

        for pos in range(0, len(buf), width):
            line = buf[pos : pos + width]
            output = "%08X : " % (start + pos)
            output += "".join("%02x " % c for c in line)
            output += (width - len(line)) * "   "
            output += " " + "".join([".", chr(c)][self.IsPrint(c)] for c in line)
            lines.append(output)

        return lines

    def Buffer(self, buf, start=0, size=0x100):
        return "\n".join(self.Lines(buf, start, size))

    # -------------------------------------------------------------------------
    # IsPrint
    # Check if the given character is printable
    # input  : char  : Character
    # return : True  : Printable character
    #          False : Non-printable character
    # -------------------------------------------------------------------------
    def IsPrint(self, c):
        return c >= 0x20 and c < 0x80
