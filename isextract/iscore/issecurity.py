# -*- coding:utf-8 -*-
# Author: Kei Choi(hanul93@gmail.com)
# Security utilities for isextract

"""
isextract Security Utilities

This module provides the following security features:
- Path Traversal prevention (CWE-22) when writing extracted files
- Member name normalization for names recovered from installer overlays
"""

import os
import pathlib
import re
from typing import Optional


# -------------------------------------------------------------------------
# SecurityError Exception
# -------------------------------------------------------------------------
class SecurityError(Exception):
    """Security exception class"""

    pass


# Characters that are not allowed in a file name on Windows
p_bad_chars = re.compile(r'[\x00-\x1f<>:"|?*]')


# -------------------------------------------------------------------------
# Path Validation Functions
# -------------------------------------------------------------------------
def validate_path(file_path: str, base_dir: str, allow_symlinks: bool = False) -> str:
    """
    Path validation - Path Traversal prevention (CWE-22)

    Args:
        file_path: Path to validate
        base_dir: Allowed base directory
        allow_symlinks: Allow symbolic links

    Returns:
        Normalized safe path

    Raises:
        SecurityError: Path validation failed
    """
    # 1. Convert to absolute path and normalize
    file_path = os.path.abspath(os.path.normpath(file_path))
    base_dir = os.path.abspath(os.path.normpath(base_dir))

    # 2. Verify if the path is inside base_dir
    if not (file_path.startswith(base_dir + os.sep) or file_path == base_dir):
        raise SecurityError(f"Path outside base directory: {file_path}")

    # 3. Verify ../ pattern (check after normalization)
    if ".." in pathlib.Path(file_path).parts:
        raise SecurityError(f"Parent directory reference in path: {file_path}")

    # 4. Verify symbolic links
    if not allow_symlinks and os.path.islink(file_path):
        real_path = os.path.realpath(file_path)
        if not (real_path.startswith(base_dir + os.sep) or real_path == base_dir):
            raise SecurityError(f"Symlink points outside base directory: {file_path}")

    return file_path


def safe_extract_member(archive_member_name: str, extract_base_dir: str) -> str:
    """
    Safe extraction of an installer member - Zip Slip prevention (CWE-22)

    Args:
        archive_member_name: Name of the member recovered from the overlay
        extract_base_dir: Base directory for extraction

    Returns:
        Safe extraction path

    Raises:
        SecurityError: Path validation failed
    """
    # 1. Verify null byte
    if "\0" in archive_member_name:
        raise SecurityError(f"Null byte in filename: {archive_member_name!r}")

    # 2. Block absolute path
    if os.path.isabs(archive_member_name):
        raise SecurityError(f"Absolute path in archive: {archive_member_name}")

    # 3. Normalize path
    extract_path = os.path.normpath(os.path.join(extract_base_dir, archive_member_name))

    # 4. Verify path traversal
    return validate_path(extract_path, extract_base_dir, allow_symlinks=False)


def is_safe_archive_member(member_name: str) -> bool:
    """
    Verify the safety of the member name quickly

    Args:
        member_name: Name of the member

    Returns:
        Safety status (True/False)
    """
    if not member_name:
        return False

    # Verify null byte
    if "\0" in member_name:
        return False

    # Verify absolute path
    if os.path.isabs(member_name) or pathlib.PureWindowsPath(member_name).drive:
        return False

    # Verify path traversal
    if ".." in pathlib.PureWindowsPath(member_name).parts:
        return False

    return True


def normalize_member_name(member_name: str, fallback: str) -> str:
    """
    Turn an installer member name into a relative POSIX-style path

    InstallShield stores bare Windows file names. Separators are converted and
    characters Windows rejects are replaced, unsafe names fall back.

    Args:
        member_name: Name of the member
        fallback: Name used when member_name cannot be made safe

    Returns:
        Normalized member name
    """
    if not is_safe_archive_member(member_name):
        return fallback

    parts = [p_bad_chars.sub("_", part) for part in pathlib.PureWindowsPath(member_name).parts]
    parts = [part for part in parts if part not in ("", ".", "\\", "/")]
    if not parts:
        return fallback

    return "/".join(parts)


def get_safe_extract_path(archive_member_name: str, extract_base_dir: str) -> Optional[str]:
    """
    Return a safe extraction path, or return None if it is not safe

    Args:
        archive_member_name: Name of the member
        extract_base_dir: Base directory for extraction

    Returns:
        Safe extraction path or None
    """
    try:
        return safe_extract_member(archive_member_name, extract_base_dir)
    except SecurityError:
        return None
