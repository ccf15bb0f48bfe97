"""Exception types raised by the AccuRev bridge."""

from __future__ import annotations


class AccuBridgeError(Exception):
    """Base class for every failure surfaced by accubridge."""


class ToolUnavailable(AccuBridgeError):
    """The configured accurev executable is missing or not executable."""

    def __init__(self, exe_path: str, reason: str = "not found") -> None:
        self.exe_path = exe_path
        self.reason = reason
        super().__init__(f"AccuRev executable is not available ({reason}): {exe_path}")


class ExternalToolError(AccuBridgeError):
    """The tool ran but exited with a non-zero status."""

    def __init__(self, exe_name: str, command: str, exit_code: int, output: bytes) -> None:
        self.exe_name = exe_name
        self.command = command
        self.exit_code = exit_code
        self.output = output
        super().__init__(
            f"{exe_name} {command} exited with {exit_code} (expected 0): "
            f"{output.decode('utf-8', errors='replace').strip()}"
        )


class ToolTimeout(ExternalToolError):
    """The tool did not exit within the configured timeout and was killed."""

    def __init__(self, exe_name: str, command: str, timeout: float, output: bytes) -> None:
        self.timeout = timeout
        super().__init__(exe_name, command, -1, output)
        self.args = (f"{exe_name} {command} timed out after {timeout}s",)


class MalformedReply(AccuBridgeError):
    """Tool output could not be parsed even as an XML fragment."""

    def __init__(self, detail: str, output: bytes = b"") -> None:
        self.detail = detail
        self.output = output
        super().__init__(f"Malformed XML reply: {detail}")


class InvalidPath(AccuBridgeError, ValueError):
    """A source path did not name a stream segment."""

    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(f"Invalid source path; stream not specified: {path!r}")


class NoRootStream(AccuBridgeError):
    """The stream list did not contain exactly one stream without a basis."""

    def __init__(self, count: int) -> None:
        self.count = count
        super().__init__(
            f"Unable to get list of streams from AccuRev: expected one root stream, found {count}"
        )


class AuthenticationFailed(AccuBridgeError):
    """``accurev login`` was rejected."""

    def __init__(self, username: str, cause: Exception) -> None:
        self.username = username
        super().__init__(f"AccuRev login failed for user {username!r}: {cause}")
        self.__cause__ = cause


class SchemaFieldNotFound(AccuBridgeError, ValueError):
    """A configured field name does not exist in the AccuWork schema."""

    def __init__(self, role: str, field_name: str | None) -> None:
        self.role = role
        self.field_name = field_name
        super().__init__(f"{role} field {field_name!r} not found in AccuWork schema.")


class InvalidCategoryFieldType(AccuBridgeError, ValueError):
    """The category filter field is not an enumerated ("Choose") field."""

    def __init__(self, field_name: str, field_type: str) -> None:
        self.field_name = field_name
        self.field_type = field_type
        super().__init__(
            "Only fields defined as type 'Choose' in AccuWork may be used for filtering "
            f"(field={field_name!r}, type={field_type!r})."
        )
