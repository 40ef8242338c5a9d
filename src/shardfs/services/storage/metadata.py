"""Metadata records reported by storage backends."""

import posixpath
from dataclasses import dataclass, field

TYPE_FILE = "file"
TYPE_DIR = "dir"

VISIBILITY_PUBLIC = "public"
VISIBILITY_PRIVATE = "private"


@dataclass(frozen=True)
class Metadata:
    """Attributes of a file or directory at a path.

    ``inner`` holds the untranslated record when this one was produced by
    rewriting another (e.g. physical -> logical); it is kept for
    diagnostics only and ignored in comparisons.
    """

    path: str
    type: str
    basename: str = ""
    filename: str | None = None
    extension: str | None = None
    dirname: str = ""
    size: int | None = None
    timestamp: int | None = None
    visibility: str | None = None
    mimetype: str | None = None
    inner: "Metadata | None" = field(default=None, repr=False, compare=False)

    @classmethod
    def for_path(cls, path: str, type: str, **attrs) -> "Metadata":
        """Build a record, deriving the name attributes from ``path``."""
        dirname, basename = posixpath.split(path)
        filename, extension = posixpath.splitext(basename)
        return cls(
            path=path,
            type=type,
            basename=basename,
            filename=filename,
            extension=extension.lstrip(".") or None,
            dirname=dirname,
            **attrs,
        )

    @property
    def is_dir(self) -> bool:
        return self.type == TYPE_DIR

    @property
    def is_file(self) -> bool:
        return self.type == TYPE_FILE
