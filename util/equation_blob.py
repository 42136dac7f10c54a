import os
import re
import logging
import subprocess
import tempfile
from typing import List, Optional, Protocol

import config

logger = logging.getLogger(__name__)

MATH_ELEMENT = re.compile(r'(<math\b.*?</math>)', re.DOTALL)


class EquationConversionError(Exception):
    pass


class EquationConverter(Protocol):
    def convert(self, blob: bytes) -> Optional[str]:
        ...


class NullEquationConverter:
    """Used when no converter is configured; every legacy equation is dropped."""

    def convert(self, blob: bytes) -> Optional[str]:
        return None


def extract_math_element(output: str) -> Optional[str]:
    """First <math>...</math> element of converter output, whitespace collapsed."""
    match = MATH_ELEMENT.search(output or "")
    if not match:
        return None
    return re.sub(r'\s+', ' ', match.group(1)).strip()


class CommandEquationConverter:
    """
    Runs an external MathType-to-MathML tool over the OLE blob.
    The blob is written to a temporary .bin file whose path is the last argument.
    """

    def __init__(self, command: List[str], timeout: float = 30):
        if not command:
            raise ValueError("Equation converter command is empty")
        self.command = list(command)
        self.timeout = timeout

    def convert(self, blob: bytes) -> Optional[str]:
        fd, path = tempfile.mkstemp(prefix="equation", suffix=".bin")
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(blob)

            try:
                proc = subprocess.run(
                    self.command + [path],
                    capture_output=True,
                    timeout=self.timeout,
                )
            except subprocess.TimeoutExpired as e:
                raise EquationConversionError(f"converter timed out after {self.timeout}s") from e
            except OSError as e:
                raise EquationConversionError(f"converter could not start: {e}") from e

            if proc.returncode != 0:
                stderr = proc.stderr.decode("utf-8", errors="replace").strip()
                raise EquationConversionError(f"converter exited with {proc.returncode}: {stderr}")

            return extract_math_element(proc.stdout.decode("utf-8", errors="replace"))
        finally:
            if os.path.exists(path):
                os.remove(path)


def converter_from_settings(command: List[str] = None, timeout: float = None) -> EquationConverter:
    command = config.EQUATION_COMMAND if command is None else command
    timeout = config.EQUATION_TIMEOUT if timeout is None else timeout
    if command:
        logger.info("Using external equation converter: %s", " ".join(command))
        return CommandEquationConverter(command, timeout=timeout)
    return NullEquationConverter()
