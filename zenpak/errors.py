"""
Conversion errors.

Decode failures mean the bytes do not match the configured layout,
encode failures mean a record cannot be placed in the output,
resolution failures mean the legacy tables are corrupt or unsupported.
All abort the conversion of the current package; I/O errors are never
wrapped and propagate as OSError / EOFError.
"""

from typing import Any, Optional


class DecodeError(ValueError):
    """A field holds a value outside its closed set, or offsets contradict the layout."""

    def __init__(self, message: str, field: Optional[str] = None, value: Any = None, offset: Optional[int] = None):
        super().__init__(message)
        self.field = field
        self.value = value
        self.offset = offset


class UnsupportedLayoutError(DecodeError):
    """The selected layout variant is known but has no implementation."""

    def __init__(self, layout: str, operation: str):
        super().__init__(f"Unsupported layout {layout}: {operation} is not implemented",
                         field="layout", value=layout)
        self.layout = layout
        self.operation = operation


class ResolutionError(ValueError):
    """A legacy import or export entry cannot be resolved to a path."""

    def __init__(self, kind: str, index: int, raw: Any, reason: str, package: Optional[str] = None):
        where = f" in package {package}" if package else ""
        super().__init__(f"Cannot resolve {kind} {index}{where}: {reason} (value {raw!r})")
        self.kind = kind
        self.index = index
        self.raw = raw
        self.reason = reason
        self.package = package


class EncodeError(ValueError):
    """A record cannot be laid out in the output, e.g. an offset does not fit its field."""

    def __init__(self, message: str, field: Optional[str] = None, value: Any = None, offset: Optional[int] = None):
        super().__init__(message)
        self.field = field
        self.value = value
        self.offset = offset


class PackagePathError(ValueError):
    """A package file has no game path under the configured content root."""

    def __init__(self, file_path: Any, content_root: Any):
        super().__init__(f"{file_path} is not under the content root {content_root}")
        self.file_path = file_path
        self.content_root = content_root
