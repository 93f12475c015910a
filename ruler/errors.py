from pathlib import Path


class RulerError(Exception):
    """Base user-facing application error."""


class MalformedMetadataError(RulerError):
    def __init__(self, detail: str) -> None:
        self.detail = detail
        super().__init__(f"Malformed frontmatter ({detail})")


class UnsupportedFieldShapeError(RulerError):
    def __init__(self, field: str, shape: str) -> None:
        self.field = field
        self.shape = shape
        super().__init__(f"Unsupported value for '{field}' ({shape})")


class RulerFileError(RulerError):
    def __init__(self, path: Path, message: str) -> None:
        self.path = path
        self.message = message
        super().__init__(f"{message}: {path}")


class SourceDirectoryNotFoundError(RulerFileError):
    def __init__(self, path: Path) -> None:
        super().__init__(path=path, message="Source directory does not exist")


class RuleReadError(RulerFileError):
    def __init__(self, path: Path, detail: str) -> None:
        self.detail = detail
        super().__init__(path=path, message=f"Cannot read rule file ({detail})")


class RuleWriteError(RulerFileError):
    def __init__(self, path: Path, detail: str) -> None:
        self.detail = detail
        super().__init__(path=path, message=f"Cannot write rule file ({detail})")
