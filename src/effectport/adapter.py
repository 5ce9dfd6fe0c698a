"""Operating-system effects requested by the core."""

from __future__ import annotations

import sys
from typing import Callable, NoReturn, Optional, TextIO

import aiofiles  # type: ignore[import-untyped]

from .constants import EXIT_CODE_FAILURE, EXIT_CODE_SUCCESS, FILE_ENCODING
from .errors import EffectIOError

ExitFunction = Callable[[int], NoReturn]


def _failure_reason(error: Exception) -> str:
    if isinstance(error, OSError) and error.strerror:
        return error.strerror
    return str(error)


class OsAdapter:
    """Perform exactly one effect per call against the real OS.

    File effects are coroutines that return only after the file has been
    fully read or written. Terminal effects call ``exit_fn`` and never return.
    """

    def __init__(
        self,
        stdout: Optional[TextIO] = None,
        stderr: Optional[TextIO] = None,
        exit_fn: ExitFunction = sys.exit,
        encoding: str = FILE_ENCODING,
    ) -> None:
        self._stdout = stdout
        self._stderr = stderr
        self._exit_fn = exit_fn
        self.encoding = encoding

    @property
    def stdout(self) -> TextIO:
        # Resolved per call so redirected sys.stdout is honored.
        return self._stdout if self._stdout is not None else sys.stdout

    @property
    def stderr(self) -> TextIO:
        return self._stderr if self._stderr is not None else sys.stderr

    async def read_file(self, filename: str) -> str:
        """Return the full text contents of ``filename``.

        Undecodable bytes are replaced rather than failing the read.

        Raises:
            EffectIOError: Path missing, unreadable, malformed, or not a regular file.
        """
        try:
            async with aiofiles.open(
                filename, "r", encoding=self.encoding, errors="replace", newline=""
            ) as f:
                return await f.read()
        except (OSError, ValueError) as e:
            raise EffectIOError("read", filename, _failure_reason(e)) from e

    async def write_file(self, filename: str, text: str) -> None:
        """Create or fully overwrite ``filename`` with ``text``.

        The text is encoded before the file is opened, so text that cannot be
        encoded leaves an existing file untouched.

        Raises:
            EffectIOError: Path not writable or malformed, a missing parent
                directory, or text the encoding cannot represent.
        """
        try:
            data = text.encode(self.encoding)
            async with aiofiles.open(filename, "wb") as f:
                await f.write(data)
        except (OSError, ValueError) as e:
            raise EffectIOError("write", filename, _failure_reason(e)) from e

    def print_message(self, message: str) -> None:
        print(message, file=self.stdout)

    def exit_success(self, message: str) -> NoReturn:
        print(message, file=self.stdout)
        self.stdout.flush()
        self._exit_fn(EXIT_CODE_SUCCESS)

    def exit_failure(self, message: str) -> NoReturn:
        print(message, file=self.stderr)
        self.stderr.flush()
        self._exit_fn(EXIT_CODE_FAILURE)
