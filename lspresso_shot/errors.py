"""Exception hierarchy raised by the test entry points."""

from typing import Any

from .compare import render_items, write_fields_comparison


class LspressoError(Exception):
    """Base class for every failure a test case can report."""


# =============================================================================
# Setup errors: raised before the editor is launched
# =============================================================================


class TestSetupError(LspressoError):
    __test__ = False


class MissingFileExtension(TestSetupError):
    def __init__(self, path: str):
        self.path = path
        super().__init__(f'Source file "{path}" must have an extension')


class InvalidFileExtension(TestSetupError):
    def __init__(self, path: str):
        self.path = path
        super().__init__(f'The extension of source file "{path}" is invalid')


class InvalidFilePath(TestSetupError):
    def __init__(self, path: str):
        self.path = path
        super().__init__(f'Source file path "{path}" is invalid')


class InvalidCursorPosition(TestSetupError):
    def __init__(self, kind: str):
        self.kind = kind
        super().__init__(f"A cursor position is required for {kind} tests")


class InvalidServerCommand(TestSetupError):
    def __init__(self, command: str):
        self.command = command
        super().__init__(f'The server command/path "{command}" is not executable')


class InvalidEditor(TestSetupError):
    def __init__(self, command: str):
        self.command = command
        super().__init__(f'The neovim command "{command}" is not executable')


class SetupIOError(TestSetupError):
    def __init__(self, detail: str):
        self.detail = detail
        super().__init__(detail)


# =============================================================================
# Execution errors: the editor ran, but no comparable result came back
# =============================================================================


class TestExecutionError(LspressoError):
    __test__ = False

    def __init__(self, test_id: str, msg: str):
        self.test_id = test_id
        super().__init__(f"Test {test_id}: {msg}")


class EditorError(TestExecutionError):
    """The editor failed to start, or the driver script reported an error."""

    def __init__(self, test_id: str, detail: str):
        self.detail = detail
        super().__init__(test_id, f"Neovim Error\n{detail}")


class TimeoutExceeded(TestExecutionError):
    def __init__(self, test_id: str, timeout: float):
        self.timeout = timeout
        super().__init__(test_id, f"Test timeout of {timeout:.3f}s exceeded")


class NoResults(TestExecutionError):
    def __init__(self, test_id: str):
        super().__init__(test_id, "No results were written")


class ExpectedNone(TestExecutionError):
    def __init__(self, test_id: str, label: str, actual: Any):
        self.label = label
        self.actual = actual
        super().__init__(test_id, f"Incorrect {label} response:\nExpected `None`, got:\n{actual!r}")


class ExpectedSome(TestExecutionError):
    def __init__(self, test_id: str, label: str):
        self.label = label
        super().__init__(test_id, f"Incorrect {label} response:\nExpected `Some`, got `None`")


class ExecutionIOError(TestExecutionError):
    def __init__(self, test_id: str, detail: str):
        self.detail = detail
        super().__init__(test_id, f"IO Error\n{detail}")


class Utf8Error(TestExecutionError):
    def __init__(self, test_id: str, detail: str):
        self.detail = detail
        super().__init__(test_id, f"UTF8 Error\n{detail}")


class DecodeError(TestExecutionError):
    def __init__(self, test_id: str, detail: str):
        self.detail = detail
        super().__init__(test_id, f"Serialization Error\n{detail}")


# =============================================================================
# Mismatches: a result came back and differs from the expectation
# =============================================================================


class ResponseMismatch(LspressoError):
    def __init__(self, test_id: str, label: str, expected: Any, actual: Any):
        self.test_id = test_id
        self.label = label
        self.expected = expected
        self.actual = actual
        msg = f"Test {test_id}: Incorrect {label} response:\n"
        msg += write_fields_comparison(expected, actual)
        super().__init__(msg)


class CompletionMismatch(ResponseMismatch):
    """An expected completion item was not found among the provided items."""

    def __init__(self, test_id: str, missing: list, provided: list, expected: Any, actual: Any):
        self.test_id = test_id
        self.label = "Completion"
        self.expected = expected
        self.actual = actual
        self.missing = missing
        msg = f"Test {test_id}: Incorrect Completion response:\n"
        msg += "Unprovided item(s):\n"
        msg += render_items(missing, fg="red")
        msg += "Provided item(s):\n"
        msg += render_items(provided, fg="green")
        LspressoError.__init__(self, msg)
