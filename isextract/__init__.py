# -*- coding:utf-8 -*-
# InstallShield Overlay Extractor
# Author: Kei Choi (hanul93@gmail.com)

"""
isextract - InstallShield setup unpacker

Recovers the files stored in the overlay of InstallShield self-extracting
executables, including damaged ones.

Basic Usage:
    import isextract

    # Single installer
    with isextract.Extractor() as extractor:
        report = extractor.extract_file("/path/to/setup.exe")
        print(report.status)
        for f in report.files:
            print(f"{f.filename}: {f.size} bytes")

    # Write the files to disk
    with isextract.Extractor() as extractor:
        report = extractor.extract_file("/path/to/setup.exe")
        extractor.save(report, "/path/to/output")

Advanced Usage:
    import isextract
    from isextract.formats.ishield import InstallShield

    # Walk an overlay that is already in memory
    image = isextract.OverlayImage(overlay_bytes, offset=0x2A000)
    ishield = InstallShield(image, version_hint="30.0.157")
    ishield.parse()
    report = ishield.extract()

    # Configuration access
    config = isextract.get_config()
    print(config.max_entries)
"""

__version__ = "0.1.0"
__author__ = "Kei Choi"
__last_update__ = "Fri Oct 16 09:12:44 2026 UTC"

# Import from iscore for public API
from isextract.iscore import (
    # Configuration
    Config,
    get_config,
    # Errors
    ISExtractError,
    UnsupportedFormatError,
    TruncatedHeaderError,
    TruncatedRecordError,
    CorruptPayloadError,
    ResyncExhaustedError,
    NoteKind,
    # Results
    OverlayImage,
    DecodedFile,
    RecoveryNote,
    ExtractionReport,
    # Extractor (high-level API)
    Extractor,
    # Core modules
    isconst,
)

__all__ = [
    # Version info
    "__version__",
    "__author__",
    "__last_update__",
    # Configuration
    "Config",
    "get_config",
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
    # Extractor (recommended high-level API)
    "Extractor",
    # Core modules
    "isconst",
]
