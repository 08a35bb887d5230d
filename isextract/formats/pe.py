# -*- coding:utf-8 -*-
# Author: Kei Choi(hanul93@gmail.com)

"""
PE Overlay Locator

Finds the bytes appended after the last section of a setup executable and
reads the InstallShield version strings from its version resource.
"""

import logging
from typing import Dict, Optional

import pefile

from isextract.iscore.isconst import UnsupportedFormatError
from isextract.iscore.isfile import OverlayImage

# Module logger
logger = logging.getLogger(__name__)

VERSION_KEYS = ("ISInternalVersion", "FileVersion")
DESCRIPTION_KEY = "ISInternalDescription"


# -------------------------------------------------------------------------
# PEOverlay Class
# -------------------------------------------------------------------------
class PEOverlay:
    def __init__(self, data: bytes, filename: str = "<memory>"):
        self.data = data
        self.filename = filename
        self.pe = None
        self.overlay_start = 0
        self.overlay_end = 0
        self.strings = {}

    # ---------------------------------------------------------------------
    # parse()
    # Read the PE headers, the overlay bounds and the version strings
    # return : self
    # ---------------------------------------------------------------------
    def parse(self) -> "PEOverlay":
        try:
            self.pe = pefile.PE(data=self.data, fast_load=True)
        except pefile.PEFormatError as e:
            raise UnsupportedFormatError(f"{self.filename}: not a PE file ({e})") from e

        self.overlay_start, self.overlay_end = self._overlay_bounds()
        self.strings = self._version_strings()

        logger.debug(
            "%s: overlay [0x%X, 0x%X), version strings %s",
            self.filename,
            self.overlay_start,
            self.overlay_end,
            self.strings,
        )
        return self

    def _overlay_bounds(self):
        pe = self.pe
        file_size = len(self.data)
        file_align = pe.OPTIONAL_HEADER.FileAlignment or 0x200

        # Attached data starts where the last raw section ends
        attach_pos = 0
        for section in pe.sections:
            if not section.SizeOfRawData:
                continue
            raw_start = section.PointerToRawData - (section.PointerToRawData % file_align) if file_align else section.PointerToRawData
            attach_pos = max(attach_pos, raw_start + section.SizeOfRawData)

        if attach_pos == 0:
            attach_pos = pe.OPTIONAL_HEADER.SizeOfHeaders

        start = min(attach_pos, file_size)
        end = file_size

        # Authenticode signature lives in the overlay area too
        security = pefile.DIRECTORY_ENTRY["IMAGE_DIRECTORY_ENTRY_SECURITY"]
        if len(pe.OPTIONAL_HEADER.DATA_DIRECTORY) > security:
            cert = pe.OPTIONAL_HEADER.DATA_DIRECTORY[security]
            cert_pos, cert_size = cert.VirtualAddress, cert.Size
            if cert_size and start <= cert_pos < file_size:
                if cert_pos == start:
                    start = min(cert_pos + cert_size, file_size)
                else:
                    end = cert_pos

        return start, end

    def _version_strings(self) -> Dict[str, str]:
        strings = {}
        resource = pefile.DIRECTORY_ENTRY["IMAGE_DIRECTORY_ENTRY_RESOURCE"]

        try:
            self.pe.parse_data_directories(directories=[resource])
        except pefile.PEFormatError as e:
            logger.debug("%s: resource directory unreadable (%s)", self.filename, e)
            return strings

        for file_info in getattr(self.pe, "FileInfo", None) or []:
            for info in file_info:
                if getattr(info, "Key", b"") != b"StringFileInfo":
                    continue
                for table in info.StringTable:
                    for key, value in table.entries.items():
                        key = key.decode("utf-8", "ignore") if isinstance(key, bytes) else key
                        value = value.decode("utf-8", "ignore") if isinstance(value, bytes) else value
                        strings.setdefault(key, value.rstrip("\x00"))

        return strings

    @property
    def has_overlay(self) -> bool:
        return self.overlay_end > self.overlay_start

    def get_version_hint(self) -> Optional[str]:
        for key in VERSION_KEYS:
            if self.strings.get(key):
                return self.strings[key]
        return None

    def get_description(self) -> Optional[str]:
        return self.strings.get(DESCRIPTION_KEY)

    def get_overlay_image(self) -> OverlayImage:
        return OverlayImage(self.data[self.overlay_start : self.overlay_end], self.overlay_start, self.filename)

    def close(self):
        if self.pe:
            self.pe.close()
            self.pe = None


def get_overlay(data: bytes, filename: str = "<memory>"):
    """Locate the overlay of a PE file.

    Returns:
        (OverlayImage, version hint, description)

    Raises:
        UnsupportedFormatError: not a PE file or no overlay
    """
    pe = PEOverlay(data, filename).parse()
    try:
        if not pe.has_overlay:
            raise UnsupportedFormatError(f"{filename}: no data appended to the PE image")
        return pe.get_overlay_image(), pe.get_version_hint(), pe.get_description()
    finally:
        pe.close()
