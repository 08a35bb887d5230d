# -*- coding:utf-8 -*-
# Author: Kei Choi(hanul93@gmail.com)


from dataclasses import dataclass, field


# -------------------------------------------------------------------------
# OverlayImage Class
# The bytes appended after the last PE section, read-only once created
# -------------------------------------------------------------------------
@dataclass(frozen=True)
class OverlayImage:
    data: bytes
    offset: int = 0  # Absolute offset of data[0] in the host file
    filename: str = field(default="<memory>", compare=False)

    def __post_init__(self):
        if not isinstance(self.data, bytes):
            object.__setattr__(self, "data", bytes(self.data))
        if self.offset < 0:
            raise ValueError("overlay offset must be non-negative")

    def __len__(self):
        return len(self.data)

    # ---------------------------------------------------------------------
    # view(start, end)
    # Zero-copy view of [start, end) relative to the overlay start.
    # Raises IndexError when the span leaves the buffer.
    # ---------------------------------------------------------------------
    def view(self, start: int, end: int) -> memoryview:
        if start < 0 or end < start or end > len(self.data):
            raise IndexError(f"span [{start:#x}, {end:#x}) outside overlay of {len(self.data):#x} bytes")
        return memoryview(self.data)[start:end]

    def absolute(self, pos: int) -> int:
        """Convert an overlay-relative position to a file offset."""
        return self.offset + pos
