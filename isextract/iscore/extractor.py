# -*- coding:utf-8 -*-
# Author: Kei Choi(hanul93@gmail.com)

"""
isextract Extractor Module

This module provides a high-level, easy-to-use interface for unpacking
InstallShield setup executables.
"""

import logging
import os
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path
from typing import Callable, List, Optional, Union

from isextract.formats import pe
from isextract.formats.ishield import InstallShield
from .config import Config, get_config
from .isconst import ISExtractError, TruncatedHeaderError, UnsupportedFormatError
from .isfile import OverlayImage
from .issecurity import get_safe_extract_path, normalize_member_name
from .report import ExtractionReport

# Module logger
logger = logging.getLogger(__name__)

# Type alias for extraction callback
ExtractCallback = Callable[[ExtractionReport], None]


class Extractor:
    """High-level InstallShield extractor interface.

    Example:
        # Single installer
        with Extractor() as extractor:
            report = extractor.extract_file("/path/to/setup.exe")
            for f in report.files:
                print(f.filename, f.size)

        # Folder of installers, written to disk
        with Extractor() as extractor:
            for report in extractor.extract_directory("/path/to/folder", parallel=True):
                extractor.save(report, "/path/to/output")
    """

    def __init__(
        self,
        config: Optional[Config] = None,
        version_hint: Optional[str] = None,
        description: Optional[str] = None,
    ):
        """Initialize the Extractor.

        Args:
            config: Walker limits and worker count. If None, uses get_config().
            version_hint: Overrides the version read from the PE resources
            description: Overrides ISInternalDescription read from the PE resources
        """
        self.config = config or get_config()
        self.version_hint = version_hint
        self.description = description

    def extract_overlay(
        self,
        image: OverlayImage,
        version_hint: Optional[str] = None,
        description: Optional[str] = None,
    ) -> ExtractionReport:
        """Extract an overlay that has already been cut out of its host file.

        Args:
            image: Overlay bytes and their absolute offset
            version_hint: Textual installer version, e.g. "30.0.157"
            description: ISInternalDescription of the setup, if known

        Returns:
            ExtractionReport
        """
        hint = self.version_hint or version_hint
        desc = self.description or description
        ishield = InstallShield(image, hint, desc, self.config)

        try:
            ishield.parse()
        except UnsupportedFormatError as e:
            logger.debug("%s: %s", image.filename, e)
            report = ishield.new_report()
            report.unsupported = True
            report.error = str(e)
            return report
        except TruncatedHeaderError as e:
            logger.debug("%s: %s", image.filename, e)
            report = ishield.new_report()
            report.error = str(e)
            return report

        return ishield.extract()

    def extract_bytes(self, data: bytes, filename: str = "<memory>") -> ExtractionReport:
        """Extract a setup executable held in memory.

        Args:
            data: Whole content of the PE file
            filename: Name used in the report

        Returns:
            ExtractionReport
        """
        try:
            image, hint, desc = pe.get_overlay(data, filename)
        except UnsupportedFormatError as e:
            logger.debug("%s", e)
            return ExtractionReport(path=filename, error=str(e), unsupported=True)

        return self.extract_overlay(image, hint, desc)

    def extract_file(self, path: Union[str, Path]) -> ExtractionReport:
        """Extract a single setup executable.

        Args:
            path: Path to the file

        Returns:
            ExtractionReport with error set when the file could not be processed
        """
        path_str = str(path)

        if not os.path.isfile(path_str):
            return ExtractionReport(path=path_str, error="File not found")

        try:
            with open(path_str, "rb") as fp:
                data = fp.read()
        except OSError as e:
            logger.warning("Cannot read %s: %s", path_str, e)
            return ExtractionReport(path=path_str, error=str(e))

        try:
            return self.extract_bytes(data, path_str)
        except ISExtractError as e:
            logger.exception("Error extracting file %s: %s", path_str, e)
            return ExtractionReport(path=path_str, error=str(e))

    def extract_files(
        self,
        paths: List[Union[str, Path]],
        callback: Optional[ExtractCallback] = None,
        parallel: bool = False,
        max_workers: Optional[int] = None,
    ) -> List[ExtractionReport]:
        """Extract several setup executables.

        Args:
            paths: Files to extract
            callback: Optional callback called for each report as it completes
            parallel: Extract independent files on a thread pool
            max_workers: Worker threads. If None, uses config.worker_count.

        Returns:
            List of ExtractionReport in the order of paths
        """
        paths = [str(p) for p in paths]

        if not parallel or len(paths) < 2:
            results = []
            for path in paths:
                report = self.extract_file(path)
                results.append(report)
                if callback:
                    callback(report)
            return results

        workers = max_workers if max_workers and max_workers > 0 else self.config.worker_count
        results: List[Optional[ExtractionReport]] = [None] * len(paths)

        with ThreadPoolExecutor(max_workers=workers) as pool:
            futures = {pool.submit(self.extract_file, path): i for i, path in enumerate(paths)}
            for future in as_completed(futures):
                report = future.result()
                results[futures[future]] = report
                if callback:
                    callback(report)

        return results

    def extract_directory(
        self,
        path: Union[str, Path],
        recursive: bool = True,
        callback: Optional[ExtractCallback] = None,
        parallel: bool = False,
        max_workers: Optional[int] = None,
    ) -> List[ExtractionReport]:
        """Extract every file in a directory.

        Args:
            path: Path to the directory
            recursive: If True, descend into subdirectories
            callback: Optional callback called for each report
            parallel: Extract files on a thread pool
            max_workers: Worker threads for parallel mode

        Returns:
            List of ExtractionReport for all files found
        """
        path_str = str(path)

        if not os.path.isdir(path_str):
            return [ExtractionReport(path=path_str, error="Directory not found")]

        files = []
        if recursive:
            for root, dirs, names in os.walk(path_str):
                dirs.sort()
                files.extend(os.path.join(root, name) for name in sorted(names))
        else:
            for name in sorted(os.listdir(path_str)):
                fpath = os.path.join(path_str, name)
                if os.path.isfile(fpath):
                    files.append(fpath)

        return self.extract_files(files, callback, parallel, max_workers)

    def save(self, report: ExtractionReport, output_dir: Union[str, Path]) -> List[str]:
        """Write the decoded files of a report below output_dir.

        Names are normalized and kept inside output_dir. A name met twice gets
        a numeric suffix so nothing is overwritten.

        Args:
            report: Report returned by one of the extract methods
            output_dir: Destination folder (created when missing)

        Returns:
            List of written paths
        """
        output_dir = os.path.abspath(str(output_dir))
        os.makedirs(output_dir, exist_ok=True)

        written = []
        used = set()

        for idx, decoded in enumerate(report.files):
            name = normalize_member_name(decoded.filename, f"file_{idx:04d}.bin")
            name = _unique_name(name, used)
            used.add(name.lower())

            target = get_safe_extract_path(name, output_dir)
            if target is None:
                logger.warning("Skipped %r: path leaves %s", decoded.filename, output_dir)
                continue

            os.makedirs(os.path.dirname(target), exist_ok=True)
            with open(target, "wb") as fp:
                fp.write(decoded.content)

            if decoded.mtime:
                ts = decoded.mtime.timestamp()
                os.utime(target, (ts, ts))

            written.append(target)

        logger.info("%s: wrote %d files to %s", report.path, len(written), output_dir)
        return written

    def close(self) -> None:
        """Nothing is held open between calls."""
        pass

    def __enter__(self) -> "Extractor":
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager exit."""
        self.close()


def _unique_name(name: str, used: set) -> str:
    if name.lower() not in used:
        return name

    stem, ext = os.path.splitext(name)
    n = 1
    while f"{stem}_{n}{ext}".lower() in used:
        n += 1
    return f"{stem}_{n}{ext}"
