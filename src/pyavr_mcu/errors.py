"""Clear exceptions for pyavr-mcu: malformed pack content, unknown devices and storage errors."""

from pathlib import Path


class PyAvrMcuError(Exception):
    """Base exception for pyavr-mcu."""

    pass


class PackError(PyAvrMcuError):
    """
    Raised when the content of a pack file cannot be turned into a device model.

    The loader fills in `path` so the failure can be reproduced from the message.
    """

    def __init__(self, message: str, *, path: Path | None = None) -> None:
        self.path = path
        self._msg = message
        super().__init__(message)

    def __str__(self) -> str:
        if self.path is not None:
            return f"{self._msg} (in {self.path})"
        return self._msg


class MalformedPackError(PackError):
    """Raised when a pack file is not well-formed XML."""

    pass


class MissingElementError(PackError):
    """Raised when a required child element (e.g. <variants>) is absent."""

    def __init__(self, element: str, parent: str, *, path: Path | None = None) -> None:
        self.element = element
        self.parent = parent
        super().__init__(f"Missing <{element}> in <{parent}>", path=path)


class MissingAttributeError(PackError):
    """Raised when a required attribute is absent from an element."""

    def __init__(self, attribute: str, element: str, *, path: Path | None = None) -> None:
        self.attribute = attribute
        self.element = element
        super().__init__(f"Missing attribute {attribute!r} on <{element}>", path=path)


class InvalidLiteralError(PackError):
    """Raised when a numeric attribute is absent or not a decimal/0x-hex literal."""

    def __init__(
        self,
        text: str | None,
        *,
        attribute: str | None = None,
        element: str | None = None,
        path: Path | None = None,
    ) -> None:
        self.text = text
        self.attribute = attribute
        self.element = element
        where = ""
        if attribute:
            where = f" for attribute {attribute!r}"
            if element:
                where += f" on <{element}>"
        super().__init__(f"Invalid literal {text!r}{where}", path=path)


class UnexpectedElementError(PackError):
    """Raised when a closed element (e.g. <value-group>) contains an unknown child."""

    def __init__(self, element: str, parent: str, *, path: Path | None = None) -> None:
        self.element = element
        self.parent = parent
        super().__init__(f"Unexpected <{element}> in <{parent}>", path=path)


class UnknownDeviceError(PackError):
    """Raised when a device name has no entry in the architecture table."""

    def __init__(self, name: str, *, path: Path | None = None) -> None:
        self.name = name
        super().__init__(f"The AVR architecture for MCU {name!r} is unknown", path=path)


class DuplicateDeviceError(PackError):
    """Raised when a pack describes a device already loaded from another pack."""

    def __init__(self, name: str, first: Path, *, path: Path | None = None) -> None:
        self.name = name
        self.first = first
        super().__init__(f"Duplicate device {name!r}, already loaded from {first}", path=path)


class StorageError(PyAvrMcuError):
    """Raised when a pack file or directory cannot be read (missing, permissions, ...)."""

    def __init__(self, path: Path, cause: BaseException | None = None) -> None:
        self.path = path
        self.cause = cause
        detail = f": {cause}" if cause is not None else ""
        super().__init__(f"Cannot read {path}{detail}")


class UnknownMcuError(PyAvrMcuError):
    """Raised when a catalog lookup does not match any loaded device."""

    def __init__(self, name: str, message: str | None = None) -> None:
        self.name = name
        self._msg = message or f"Unknown microcontroller: {name!r}"
        super().__init__(self._msg)
