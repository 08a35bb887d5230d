# -*- coding:utf-8 -*-
# Author: Kei Choi(hanul93@gmail.com)

"""
isextract Report Module

Result types produced by an extraction: the decoded files in overlay order,
the recovery notes collected while walking, and the aggregate counters.
"""

import datetime
import hashlib
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .isconst import NoteKind


@dataclass
class DecodedFile:
    """A file recovered from an installer overlay.

    Attributes:
        filename: Name stored in the attribute record
        content: Decrypted and, when marked, inflated payload
        recovered: True when heuristic resynchronization located the entry
        offset: Absolute file offset of the raw payload
        mtime: Modification time from the attribute record, if it carries one
    """

    filename: str
    content: bytes
    recovered: bool = False
    offset: int = 0
    mtime: Optional[datetime.datetime] = None

    @property
    def size(self) -> int:
        return len(self.content)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "filename": self.filename,
            "size": self.size,
            "sha256": hashlib.sha256(self.content).hexdigest(),
            "recovered": self.recovered,
            "offset": self.offset,
            "mtime": self.mtime.isoformat() if self.mtime else None,
        }


@dataclass
class RecoveryNote:
    """An anomaly met while walking the overlay.

    Attributes:
        kind: What happened (see isconst.NoteKind)
        offset: Absolute file offset where it happened
        length: Number of bytes involved (skipped, recovered or missing)
        filename: Entry the note belongs to, if any
        message: Human readable detail
    """

    kind: NoteKind
    offset: int
    length: int = 0
    filename: Optional[str] = None
    message: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind.value,
            "offset": self.offset,
            "length": self.length,
            "filename": self.filename,
            "message": self.message,
        }


@dataclass
class ExtractionReport:
    """Result of extracting one installer.

    Attributes:
        path: Source of the overlay (file path or "<memory>")
        variant: Name of the detected format variant
        overlay_offset: Absolute offset of the overlay in the host file
        declared_files: File count declared by the header (a hint)
        files: Decoded files in overlay order
        notes: Recovery notes in the order they were raised
        bytes_lost_to_resync: Bytes skipped while resynchronizing
        entries_undecodable: Entries found whose payload could not be decoded
        trailing_bytes: Bytes left after the walk stopped at the declared count
        error: Fatal error message when the image could not be processed
        unsupported: True when the overlay is not a supported InstallShield format
    """

    path: str = "<memory>"
    variant: Optional[str] = None
    overlay_offset: int = 0
    declared_files: int = 0
    files: List[DecodedFile] = field(default_factory=list)
    notes: List[RecoveryNote] = field(default_factory=list)
    bytes_lost_to_resync: int = 0
    entries_undecodable: int = 0
    trailing_bytes: int = 0
    error: Optional[str] = None
    unsupported: bool = False

    @property
    def entries_decoded(self) -> int:
        return len(self.files)

    @property
    def status(self) -> str:
        """Get the overall outcome.

        Returns:
            "unsupported", "failed", "partial" or "complete"
        """
        if self.unsupported:
            return "unsupported"
        if self.error:
            return "failed"
        if self.notes or self.entries_undecodable or self.bytes_lost_to_resync:
            return "partial"
        return "complete"

    def add_note(self, kind: NoteKind, offset: int, length: int = 0, filename: Optional[str] = None, message: str = ""):
        note = RecoveryNote(kind, offset, length, filename, message)
        self.notes.append(note)
        return note

    def notes_of(self, kind: NoteKind) -> List[RecoveryNote]:
        return [n for n in self.notes if n.kind == kind]

    def namelist(self) -> List[str]:
        return [f.filename for f in self.files]

    def get(self, filename: str) -> Optional[DecodedFile]:
        """Get the last decoded file with the given name (case-insensitive)."""
        for f in reversed(self.files):
            if f.filename.lower() == filename.lower():
                return f
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "path": self.path,
            "status": self.status,
            "variant": self.variant,
            "overlay_offset": self.overlay_offset,
            "declared_files": self.declared_files,
            "entries_decoded": self.entries_decoded,
            "bytes_lost_to_resync": self.bytes_lost_to_resync,
            "entries_undecodable": self.entries_undecodable,
            "trailing_bytes": self.trailing_bytes,
            "error": self.error,
            "files": [f.to_dict() for f in self.files],
            "notes": [n.to_dict() for n in self.notes],
        }
