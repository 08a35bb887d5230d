# -*- coding:utf-8 -*-
# Author: Kei Choi(hanul93@gmail.com)

from enum import Enum


# -------------------------------------------------------------------------
# Default limits for the entry walker
# Overridable through iscore.config
# -------------------------------------------------------------------------
IS_DEFAULT_MAX_ENTRIES = 65536
IS_DEFAULT_RESYNC_LIMIT = 0  # 0 = scan to the end of the overlay
IS_DEFAULT_ZERO_LENGTH_CAP = 100 * 1024


# -------------------------------------------------------------------------
# Kinds of recovery notes attached to an extraction report
# -------------------------------------------------------------------------
class NoteKind(str, Enum):
    RESYNCHRONIZED = "resynchronized"
    RESYNC_EXHAUSTED = "resync_exhausted"
    TRUNCATED = "truncated"
    UNDECODABLE = "undecodable"
    ZERO_LENGTH_RECOVERED = "zero_length_recovered"
    ENTRY_LIMIT = "entry_limit"


# -------------------------------------------------------------------------
# Exceptions raised while reading an InstallShield overlay
# Fatal ones abort the image, the rest end up as recovery notes
# -------------------------------------------------------------------------
class ISExtractError(Exception):
    """Base class of every extraction error."""

    def __init__(self, message: str, offset: int = -1):
        super().__init__(message)
        self.offset = offset


class UnsupportedFormatError(ISExtractError):
    """The overlay does not carry a known InstallShield signature."""

    pass


class TruncatedHeaderError(ISExtractError):
    """Fewer bytes than the main header needs remain at the overlay offset."""

    pass


class TruncatedRecordError(ISExtractError):
    """An attribute record or its payload runs past the end of the overlay."""

    pass


class CorruptPayloadError(ISExtractError):
    """A payload could not be decrypted or inflated."""

    pass


class ResyncExhaustedError(ISExtractError):
    """No valid attribute record was found within the scan bound."""

    pass
