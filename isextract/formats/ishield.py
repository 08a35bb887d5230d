# -*- coding:utf-8 -*-
# Author: Kei Choi(hanul93@gmail.com)

"""
InstallShield Overlay Engine

Reads the installer data appended to an InstallShield setup executable.
Files are stored back-to-back behind small attribute records, and the counts
and lengths those records declare are not always right. The EntryWalker trusts
a record when it validates and otherwise scans forward byte by byte until a
plausible record shows up again.
"""

import enum
import logging
import re
import struct
from dataclasses import dataclass, replace
from typing import Iterator, Optional

from isextract.formats import cryptolib
from isextract.formats import isutil
from isextract.iscore import istimelib
from isextract.iscore.config import Config, get_config
from isextract.iscore.isconst import (
    CorruptPayloadError,
    NoteKind,
    ResyncExhaustedError,
    TruncatedHeaderError,
    TruncatedRecordError,
    UnsupportedFormatError,
)
from isextract.iscore.isfile import OverlayImage
from isextract.iscore.report import DecodedFile, ExtractionReport

# Module logger
logger = logging.getLogger(__name__)


# -------------------------------------------------------------------------
# Constants
# -------------------------------------------------------------------------
ISSIG = b"InstallShield"
ISSIG_strm = b"ISSetupStream"
PDB_SIG = b"NB10"
INSTALLSCRIPT_DESC = "InstallScript"
_MAX_PATH = 260

STREAM30_MIN_VERSION = 30
IS_HDR_TYPE_DUPLICATE = 4  # Header type whose entries carry a second record copy

NAME_LEN_MIN = 10
NAME_LEN_MAX = 200
X2_PREFERRED = 6
X2_MIN = 1
X2_MAX = 10

p_version = re.compile(r"\s*v?(\d+)")
p_ctrl = re.compile(rb"[\x00-\x1f\x7f]")
p_ctrl_text = re.compile(r"[\x00-\x1f\x7f]")


class FormatVariant(enum.Enum):
    LEGACY = "Legacy"
    STREAM12 = "Stream12"
    STREAM30 = "Stream30"
    INSTALLSCRIPT = "InstallScript"

    @property
    def is_stream(self) -> bool:
        return self in (FormatVariant.STREAM12, FormatVariant.STREAM30)


class WalkState(enum.Enum):
    AT_ENTRY_START = 1
    RESYNCING = 2
    DONE = 3


# -------------------------------------------------------------------------
# Version Classifier
# -------------------------------------------------------------------------
def get_major_version(version_hint) -> Optional[int]:
    """Get the major number of a textual version such as "30.0.157"."""
    if version_hint is None:
        return None
    if isinstance(version_hint, int):
        return version_hint

    if obj := p_version.match(str(version_hint)):
        return int(obj.group(1))
    return None


def classify_version(signature, version_hint=None) -> FormatVariant:
    """Map a header signature and an optional version hint to a FormatVariant.

    Args:
        signature: 13/14-byte header signature (bytes or str)
        version_hint: Optional textual installer version (e.g. "30.0.157")

    Returns:
        FormatVariant

    Raises:
        UnsupportedFormatError: unknown signature
    """
    if isinstance(signature, (bytes, bytearray)):
        signature = bytes(signature).rstrip(b"\x00")
    else:
        signature = str(signature).rstrip("\x00").encode("latin-1", errors="replace")

    if signature == ISSIG:
        return FormatVariant.LEGACY

    if signature == ISSIG_strm:
        major = get_major_version(version_hint)
        if major is not None and major >= STREAM30_MIN_VERSION:
            return FormatVariant.STREAM30
        return FormatVariant.STREAM12

    raise UnsupportedFormatError(f"Unsupported InstallShield signature {signature!r}")


def is_installscript(description) -> bool:
    """InstallScript setups name themselves in the ISInternalDescription resource string."""
    return bool(description) and str(description).startswith(INSTALLSCRIPT_DESC)


# -------------------------------------------------------------------------
# Header Parser
# -------------------------------------------------------------------------
def skip_pdb_info(buf, off: int) -> int:
    """Skip an optional PDB 2.0 block (NB10, 12 bytes, null-terminated path)."""
    if buf[off : off + 4] != PDB_SIG:
        return off

    end = buf.find(b"\x00", off + 16)
    if end == -1:
        raise TruncatedHeaderError("Unterminated PDB path in front of the header", off)

    logger.debug("Skipped PDB info at 0x%X", off)
    return end + 1


class ISHeader:
    """InstallShield Archive Header - 46 bytes (0x2E)"""

    SIZE = 46

    def __init__(self, data: bytes):
        # char sig[13], uint8_t term, uint16_t num_files, uint32_t type,
        # uint8_t x4[8], uint8_t x5[2], uint8_t x6[16]
        if len(data) < self.SIZE:
            raise TruncatedHeaderError(f"Main header needs {self.SIZE} bytes, {len(data)} left")

        fields = struct.unpack_from("<13sBHI8s2s16s", data, 0)
        self.sig = fields[0].rstrip(b"\x00")
        self.terminator = fields[1]
        self.num_files = fields[2]
        self.type = fields[3]
        self.x4 = fields[4]
        self.x5 = fields[5]
        self.x6 = fields[6]

    @property
    def signature(self) -> str:
        return self.sig.decode("latin-1")

    @classmethod
    def read(cls, buf, off: int = 0):
        """Read the main header at off.

        Returns:
            (ISHeader, offset of the first entry)

        Raises:
            TruncatedHeaderError: fewer than 46 bytes remain
        """
        off = skip_pdb_info(buf, off)
        if len(buf) - off < cls.SIZE:
            raise TruncatedHeaderError(f"Main header needs {cls.SIZE} bytes, {max(len(buf) - off, 0)} left", off)

        header = cls(buf[off : off + cls.SIZE])
        if header.terminator != 0:
            logger.debug("Header signature terminator is 0x%02X, not 0", header.terminator)

        return header, off + cls.SIZE


# -------------------------------------------------------------------------
# Attribute Records
# -------------------------------------------------------------------------
class ISFileAttributes:
    """IS File Attributes - 312 bytes (0x138), file name embedded"""

    SIZE = 312

    def __init__(self, data):
        # char file_name[260], uint32_t encoded_flags, uint32_t x3, uint32_t file_len,
        # uint8_t x5[8], uint16_t is_unicode_launcher, uint8_t x7[30]
        fields = struct.unpack_from("<260sIII8sH30s", data, 0)
        self.raw_name = fields[0].split(b"\x00", 1)[0]
        self.encoded_flags = fields[1]
        self.x3 = fields[2]
        self.file_len = fields[3]
        self.x5 = fields[4]
        self.is_unicode_launcher = fields[5]
        self.x7 = fields[6]

    filename_len = 0

    @property
    def cipher_flags(self) -> int:
        return self.encoded_flags

    @property
    def mtime(self):
        return None


class ISFileAttributesX:
    """IS File Attributes X - 24 bytes (0x18) for ISSetupStream"""

    SIZE = 24

    def __init__(self, data):
        # uint32_t filename_len, uint32_t encoded_flags, uint8_t x3[2], uint32_t file_len,
        # uint8_t x5[8], uint16_t is_unicode_launcher
        fields = struct.unpack_from("<II2sI8sH", data, 0)
        self.filename_len = fields[0]
        self.encoded_flags = fields[1]
        self.x3 = fields[2]
        self.file_len = fields[3]
        self.x5 = fields[4]
        self.is_unicode_launcher = fields[5]

    @property
    def flag_byte(self) -> int:
        return self.encoded_flags & 0xFF

    @property
    def cipher_flags(self) -> int:
        return self.flag_byte

    @property
    def mtime(self):
        return None


class ISFileAttributesX30:
    """IS File Attributes X - 48 bytes (0x30) for ISSetupStream 30.x"""

    SIZE = 48

    def __init__(self, data):
        # uint32_t filename_len, uint16_t x2, uint16_t encoded_flags, uint8_t x3[2],
        # uint32_t file_len, uint8_t x5[8], uint16_t is_unicode_launcher,
        # FILETIME created, FILETIME accessed, FILETIME modified
        fields = struct.unpack_from("<IHH2sI8sH8s8s8s", data, 0)
        self.filename_len = fields[0]
        self.x2 = fields[1]
        self.encoded_flags = fields[2]
        self.x3 = fields[3]
        self.file_len = fields[4]
        self.x5 = fields[5]
        self.is_unicode_launcher = fields[6]
        self.created = fields[7]
        self.accessed = fields[8]
        self.modified = fields[9]

    @property
    def flag_byte(self) -> int:
        return (self.encoded_flags >> 8) & 0xFF

    @property
    def cipher_flags(self) -> int:
        # Every 30.x payload is block encrypted, whatever the flag byte holds
        return cryptolib.FLAG_CHUNKED

    @property
    def mtime(self):
        return istimelib.filetime_to_datetime(self.modified)


ATTRIBUTE_CLASSES = {
    FormatVariant.LEGACY: ISFileAttributes,
    FormatVariant.STREAM12: ISFileAttributesX,
    FormatVariant.STREAM30: ISFileAttributesX30,
}


# -------------------------------------------------------------------------
# Attribute Validator
# -------------------------------------------------------------------------
def _score_stream12(buf, off: int) -> int:
    if off < 0 or off + ISFileAttributesX.SIZE > len(buf):
        return 0

    filename_len, encoded_flags = struct.unpack_from("<II", buf, off)
    if filename_len % 2 or not NAME_LEN_MIN <= filename_len <= NAME_LEN_MAX:
        return 0
    if (encoded_flags & 0xFF) in (0x00, 0xFF):
        return 0
    return 2


def _score_stream30(buf, off: int) -> int:
    if off < 0 or off + ISFileAttributesX30.SIZE > len(buf):
        return 0

    filename_len, x2, encoded_flags = struct.unpack_from("<IHH", buf, off)
    if filename_len % 2 or not NAME_LEN_MIN <= filename_len <= NAME_LEN_MAX:
        return 0
    if (encoded_flags >> 8) in (0x00, 0xFF):
        return 0
    if x2 == X2_PREFERRED:
        return 2
    if X2_MIN <= x2 <= X2_MAX:
        return 1
    return 0


def _score_legacy(buf, off: int) -> int:
    if off < 0 or off + ISFileAttributes.SIZE > len(buf):
        return 0

    nul = buf.find(b"\x00", off, off + _MAX_PATH)
    if nul <= off:  # No terminator, or an empty name
        return 0
    if p_ctrl.search(buf, off, nul):
        return 0
    return 2


def _read_utf16_strz(buf, off: int, max_units: int = _MAX_PATH):
    """Read a null-terminated UTF-16LE string.

    Returns:
        (text, offset after the terminator), or None when no terminator follows
        within max_units code units

    Raises:
        TruncatedRecordError: the buffer ends before the terminator
    """
    end = len(buf)
    span = (max_units + 1) * 2
    limit = min(end, off + span)

    pos = off
    while True:
        pos = buf.find(b"\x00\x00", pos, limit)
        if pos == -1:
            break
        if (pos - off) % 2 == 0:
            return bytes(buf[off:pos]).decode("utf-16le", errors="replace"), pos + 2
        pos += 1  # Straddles two code units

    if off + span > end:
        raise TruncatedRecordError("UTF-16 string runs past the overlay", off)
    return None


def _read_installscript_record(buf, off: int):
    """Read the four strings in front of an InstallScript payload.

    Returns:
        (name, destination, version, size, data offset) or None when they do not
        look like a record

    Raises:
        TruncatedRecordError: the buffer ends inside the record
    """
    if off + 2 > len(buf):
        raise TruncatedRecordError("InstallScript record runs past the overlay", off)

    # The name starts with a printable code unit
    first = buf[off] | (buf[off + 1] << 8)
    if first < 0x20 or first == 0x7F:
        return None

    ret = _read_utf16_strz(buf, off)
    if ret is None:
        return None
    name, pos = ret
    if p_ctrl_text.search(name):
        return None

    strings = []
    for max_units in (_MAX_PATH, _MAX_PATH, 10):
        ret = _read_utf16_strz(buf, pos, max_units)
        if ret is None:
            return None
        text, pos = ret
        strings.append(text)

    dest, version, size = strings
    if not size.isdigit() or not size.isascii():
        return None

    return name, dest, version, int(size), pos


def _score_installscript(buf, off: int) -> int:
    if off < 0:
        return 0
    try:
        return 2 if _read_installscript_record(buf, off) else 0
    except TruncatedRecordError:
        return 0


_SCORERS = {
    FormatVariant.LEGACY: _score_legacy,
    FormatVariant.STREAM12: _score_stream12,
    FormatVariant.STREAM30: _score_stream30,
    FormatVariant.INSTALLSCRIPT: _score_installscript,
}


def attribute_score(buf, off: int, variant: FormatVariant) -> int:
    """Rate how much the bytes at off look like an attribute record.

    Returns:
        0 = not a record, 1 = acceptable, 2 = preferred match
    """
    return _SCORERS[variant](buf, off)


def is_valid_attribute(buf, off: int, variant: FormatVariant) -> bool:
    """Decide whether the bytes at off look like a genuine attribute record.

    Args:
        buf: Overlay bytes
        off: Candidate record position
        variant: Layout to check against

    Returns:
        True or False, never raises
    """
    return attribute_score(buf, off, variant) > 0


# -------------------------------------------------------------------------
# Entry
# -------------------------------------------------------------------------
@dataclass(frozen=True)
class Entry:
    """One file located in the overlay (positions are overlay-relative)."""

    filename: str
    seed: bytes  # Raw file name bytes, key material of the cipher
    start: int
    data_offset: int
    data_len: int
    cipher_flags: int = 0
    attr: object = None
    recovered: bool = False
    zero_length_recovered: bool = False

    @property
    def end(self) -> int:
        return self.data_offset + self.data_len


# -------------------------------------------------------------------------
# Entry Walker
# -------------------------------------------------------------------------
class EntryWalker:
    """Produce the entries of an overlay in file order.

    The walker is an explicit state machine over an integer cursor. Every
    iteration moves the cursor forward, so any finite buffer is walked in a
    bounded number of steps and spans never overlap.
    """

    def __init__(
        self,
        image: OverlayImage,
        variant: FormatVariant,
        start: int,
        declared_files: int = 0,
        header_type: int = 0,
        config: Optional[Config] = None,
        report: Optional[ExtractionReport] = None,
    ):
        config = config or get_config()

        self.image = image
        self.data = image.data
        self.variant = variant
        self.start = start
        self.declared_files = declared_files
        self.header_type = header_type
        self.max_entries = config.max_entries
        self.resync_limit = config.resync_limit
        self.zero_length_cap = config.zero_length_cap
        self.report = report if report is not None else ExtractionReport()
        self.state = WalkState.AT_ENTRY_START
        self.cursor = start

        # Layout: [duplicate before][record][duplicate after][name][data]
        self.attr_class = ATTRIBUTE_CLASSES.get(variant)
        self.dup_before = 0
        self.dup_after = 0
        if header_type == IS_HDR_TYPE_DUPLICATE:
            if variant == FormatVariant.STREAM30:
                self.dup_before = ISFileAttributesX30.SIZE
            elif variant == FormatVariant.STREAM12:
                self.dup_after = ISFileAttributesX.SIZE

    def _read_entry(self, pos: int, recover_zero: bool = True) -> Optional[Entry]:
        """Structural decode at pos.

        Returns:
            Entry, or None when the record does not validate

        Raises:
            TruncatedRecordError: the record or its payload runs past the overlay
        """
        if self.variant == FormatVariant.INSTALLSCRIPT:
            return self._read_installscript_entry(pos, recover_zero)

        buf = self.data
        end = len(buf)
        attr_pos = pos + self.dup_before
        attr_size = self.attr_class.SIZE

        if attr_pos + attr_size > end:
            raise TruncatedRecordError(f"Attribute record at 0x{pos:X} runs past the overlay", pos)

        if not is_valid_attribute(buf, attr_pos, self.variant):
            return None

        attr = self.attr_class(memoryview(buf)[attr_pos : attr_pos + attr_size])
        name_off = attr_pos + attr_size + self.dup_after
        data_off = name_off + attr.filename_len
        if data_off > end:
            raise TruncatedRecordError(f"File name at 0x{name_off:X} runs past the overlay", pos)

        if self.variant == FormatVariant.LEGACY:
            seed = attr.raw_name
            filename = seed.decode("cp1252", errors="replace")
        else:
            filename = buf[name_off:data_off].decode("utf-16le", errors="replace").rstrip("\x00")
            seed = filename.encode("utf-8")

        if not filename:
            filename = f"0x{self.image.absolute(pos):X}"

        return self._make_entry(filename, seed, pos, data_off, attr.file_len, attr.cipher_flags, attr, recover_zero)

    def _read_installscript_entry(self, pos: int, recover_zero: bool) -> Optional[Entry]:
        record = _read_installscript_record(self.data, pos)
        if record is None:
            return None

        name, _, _, size, data_off = record
        return self._make_entry(name, name.encode("utf-8"), pos, data_off, size, 0, None, recover_zero)

    def _make_entry(self, filename, seed, pos, data_off, file_len, cipher_flags, attr, recover_zero) -> Entry:
        zero_length_recovered = False

        if file_len == 0:
            if recover_zero:
                file_len = self._recover_zero_length(data_off)
                zero_length_recovered = file_len > 0
        elif data_off + file_len > len(self.data):
            raise TruncatedRecordError(
                f"{filename}: {file_len} bytes declared at 0x{self.image.absolute(data_off):X}, "
                f"{len(self.data) - data_off} left",
                pos,
            )

        return Entry(
            filename=filename,
            seed=seed,
            start=pos,
            data_offset=data_off,
            data_len=file_len,
            cipher_flags=cipher_flags,
            attr=attr,
            zero_length_recovered=zero_length_recovered,
        )

    def _accept(self, pos: int) -> bool:
        """A resynchronization candidate must validate and fit in the overlay."""
        try:
            return self._read_entry(pos, recover_zero=False) is not None
        except TruncatedRecordError:
            return False

    def _recover_zero_length(self, data_off: int) -> int:
        """Length of a zero-length entry: bytes up to the next valid record, capped."""
        limit = min(len(self.data), data_off + self.zero_length_cap)

        for pos in range(data_off, limit):
            if self._accept(pos):
                return pos - data_off

        return limit - data_off

    def _resync(self, cursor: int) -> int:
        """Find the next position after cursor where a record validates.

        Raises:
            ResyncExhaustedError: nothing found within the scan bound
        """
        end = len(self.data)
        if self.resync_limit:
            end = min(end, cursor + 1 + self.resync_limit)

        for pos in range(cursor + 1, end):
            if self._accept(pos):
                if logger.isEnabledFor(logging.DEBUG):
                    weak = self.variant.is_stream and attribute_score(self.data, pos + self.dup_before, self.variant) < 2
                    logger.debug(
                        "Resynchronized at 0x%X%s\n%s",
                        self.image.absolute(pos),
                        " (weak match)" if weak else "",
                        isutil.HexDump().Buffer(self.data[pos : pos + 0x40], self.image.absolute(pos), 0x40),
                    )
                return pos

        raise ResyncExhaustedError(
            f"No attribute record within 0x{end - cursor:X} bytes of 0x{self.image.absolute(cursor):X}", cursor
        )

    def walk(self) -> Iterator[Entry]:
        """Walk the overlay and yield entries in file order."""
        report = self.report
        end = len(self.data)
        produced = 0
        recovered = False

        while self.state != WalkState.DONE:
            cursor = self.cursor

            if cursor >= end:
                self.state = WalkState.DONE
                continue

            if produced >= self.max_entries:
                report.add_note(
                    NoteKind.ENTRY_LIMIT,
                    self.image.absolute(cursor),
                    end - cursor,
                    message=f"Stopped after {produced} entries",
                )
                self.state = WalkState.DONE
                continue

            if self.state == WalkState.AT_ENTRY_START:
                count_met = produced >= self.declared_files

                try:
                    entry = self._read_entry(cursor)
                except TruncatedRecordError as e:
                    if count_met:
                        report.trailing_bytes += end - cursor
                    else:
                        report.add_note(NoteKind.TRUNCATED, self.image.absolute(cursor), end - cursor, message=str(e))
                        logger.debug("%s", e)
                    self.state = WalkState.DONE
                    continue

                if entry is None:
                    if count_met:
                        # Past the declared count only clean records are taken
                        report.trailing_bytes += end - cursor
                        self.state = WalkState.DONE
                    else:
                        self.state = WalkState.RESYNCING
                    continue

                if recovered:
                    entry = replace(entry, recovered=True)
                    recovered = False

                if entry.zero_length_recovered:
                    entry = replace(entry, recovered=True)
                    report.add_note(
                        NoteKind.ZERO_LENGTH_RECOVERED,
                        self.image.absolute(entry.data_offset),
                        entry.data_len,
                        entry.filename,
                        "Zero declared length, content recovered up to the next record",
                    )

                produced += 1
                self.cursor = entry.end if entry.end > cursor else cursor + 1
                yield entry

            else:
                try:
                    target = self._resync(cursor)
                except ResyncExhaustedError as e:
                    scanned = (min(end, cursor + 1 + self.resync_limit) if self.resync_limit else end) - cursor
                    report.bytes_lost_to_resync += scanned
                    report.add_note(NoteKind.RESYNC_EXHAUSTED, self.image.absolute(cursor), scanned, message=str(e))
                    logger.debug("%s", e)
                    self.state = WalkState.DONE
                    continue

                report.bytes_lost_to_resync += target - cursor
                report.add_note(
                    NoteKind.RESYNCHRONIZED,
                    self.image.absolute(cursor),
                    target - cursor,
                    message=f"Skipped {target - cursor} bytes to 0x{self.image.absolute(target):X}",
                )
                recovered = True
                self.cursor = target
                self.state = WalkState.AT_ENTRY_START


# -------------------------------------------------------------------------
# InstallShield
# -------------------------------------------------------------------------
class InstallShield:
    """Reader for the overlay of one InstallShield setup executable."""

    def __init__(
        self,
        image: OverlayImage,
        version_hint: Optional[str] = None,
        description: Optional[str] = None,
        config: Optional[Config] = None,
    ):
        self.image = image
        self.version_hint = version_hint
        self.description = description
        self.config = config or get_config()
        self.header = None
        self.variant = None
        self.num_files = 0
        self.data_off = 0

    def parse(self) -> bool:
        """Detect the variant and read the main header.

        Raises:
            UnsupportedFormatError: not an InstallShield overlay
            TruncatedHeaderError: the overlay is too short for its header
        """
        buf = self.image.data

        if is_installscript(self.description):
            # No main header, a file count leads the entries
            if len(buf) < 4:
                raise TruncatedHeaderError("InstallScript file count missing", 0)
            self.variant = FormatVariant.INSTALLSCRIPT
            self.num_files = isutil.get_uint32(buf, 0)
            self.data_off = 4
        else:
            self.header, self.data_off = ISHeader.read(buf, 0)
            self.variant = classify_version(self.header.sig, self.version_hint)
            self.num_files = self.header.num_files

        logger.debug(
            "%s: %s overlay at 0x%X, %d files declared",
            self.image.filename,
            self.variant.value,
            self.image.offset,
            self.num_files,
        )
        return True

    def _walker(self, report: Optional[ExtractionReport] = None) -> EntryWalker:
        if self.variant is None:
            self.parse()

        return EntryWalker(
            self.image,
            self.variant,
            self.data_off,
            declared_files=self.num_files,
            header_type=self.header.type if self.header else 0,
            config=self.config,
            report=report,
        )

    def entries(self) -> Iterator[Entry]:
        return self._walker().walk()

    def namelist(self):
        return [entry.filename for entry in self.entries()]

    def read_entry(self, entry: Entry) -> bytes:
        """Decode the payload of one entry.

        Raises:
            CorruptPayloadError: decryption or decompression failed
        """
        raw = self.image.view(entry.data_offset, entry.end)
        return cryptolib.decode_payload(raw, entry.seed, entry.cipher_flags)

    def read(self, fname: str) -> Optional[bytes]:
        for entry in self.entries():
            if entry.filename == fname:
                return self.read_entry(entry)
        return None

    def new_report(self) -> ExtractionReport:
        return ExtractionReport(
            path=self.image.filename,
            variant=self.variant.value if self.variant else None,
            overlay_offset=self.image.offset,
            declared_files=self.num_files,
        )

    def extract(self) -> ExtractionReport:
        """Walk the overlay and decode every entry found.

        Returns:
            ExtractionReport
        """
        if self.variant is None:
            self.parse()

        report = self.new_report()
        for entry in self._walker(report).walk():
            try:
                content = self.read_entry(entry)
            except CorruptPayloadError as e:
                report.entries_undecodable += 1
                report.add_note(
                    NoteKind.UNDECODABLE,
                    self.image.absolute(entry.data_offset),
                    entry.data_len,
                    entry.filename,
                    str(e),
                )
                logger.debug("%s: %s", entry.filename, e)
                continue

            report.files.append(
                DecodedFile(
                    filename=entry.filename,
                    content=content,
                    recovered=entry.recovered,
                    offset=self.image.absolute(entry.data_offset),
                    mtime=entry.attr.mtime if entry.attr is not None else None,
                )
            )

        logger.info(
            "%s: %d of %d files decoded (%s)",
            self.image.filename,
            report.entries_decoded,
            report.declared_files,
            report.status,
        )
        return report
