# -*- coding:utf-8 -*-
# Author: Kei Choi(hanul93@gmail.com)

"""
isextract Core Module

This module provides the configuration, result types and the extractor facade.
"""

# Configuration management
from .config import Config, get_config, init, reload_config

# Error taxonomy
from .isconst import (
    CorruptPayloadError,
    ISExtractError,
    NoteKind,
    ResyncExhaustedError,
    TruncatedHeaderError,
    TruncatedRecordError,
    UnsupportedFormatError,
)

# Result types
from .isfile import OverlayImage
from .report import DecodedFile, ExtractionReport, RecoveryNote

# Extractor (high-level API)
from .extractor import Extractor

# Core modules
from . import isconst, issecurity, istimelib

__all__ = [
    # Configuration
    "Config",
    "get_config",
    "init",
    "reload_config",
    # Errors
    "ISExtractError",
    "UnsupportedFormatError",
    "TruncatedHeaderError",
    "TruncatedRecordError",
    "CorruptPayloadError",
    "ResyncExhaustedError",
    "NoteKind",
    # Results
    "OverlayImage",
    "DecodedFile",
    "RecoveryNote",
    "ExtractionReport",
    # Extractor
    "Extractor",
    # Core modules
    "isconst",
    "issecurity",
    "istimelib",
]
