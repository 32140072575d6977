"""Triage script provisioning.

gdb ``source``s the triage script by path, so the bundled script is written
to a temporary file that lives as long as the :class:`BuiltinScript` owning
it.  A caller may instead name an :class:`ExternalScript`.
"""

from __future__ import annotations

import logging
import tempfile
from importlib import resources
from pathlib import Path
from typing import Union

from .errors import ScriptProvisionError, UnsupportedScriptLocation

logger = logging.getLogger(__name__)

_SCRIPT_PACKAGE = "afltriage.gdb"
_SCRIPT_RESOURCE = "data/triage.py"


def load_builtin_script() -> bytes:
    """Return the bundled triage script's bytes."""
    return resources.files(_SCRIPT_PACKAGE).joinpath(_SCRIPT_RESOURCE).read_bytes()


class BuiltinScript:
    """The bundled triage script, materialised to a temporary ``.py`` file.

    The file is removed by :meth:`close`, on context-manager exit, or when
    this object is garbage collected.
    """

    def __init__(self, content: bytes | None = None) -> None:
        try:
            if content is None:
                content = load_builtin_script()
            self._file = tempfile.NamedTemporaryFile(
                prefix="afltriage-", suffix=".py", delete=True
            )
            self._file.write(content)
            self._file.flush()
        except OSError as exc:
            raise ScriptProvisionError(
                f"Failed to install the built-in triage script: {exc}"
            ) from exc
        logger.debug("Installed triage script at %s", self._file.name)

    def __enter__(self) -> BuiltinScript:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:  # noqa: ANN001
        self.close()

    @property
    def path(self) -> Path:
        return Path(self._file.name)

    @property
    def closed(self) -> bool:
        return self._file.closed

    def close(self) -> None:
        """Close the handle and delete the temporary file."""
        self._file.close()


class ExternalScript:
    """A caller-supplied triage script path, used as-is."""

    def __init__(self, path: Union[str, Path]) -> None:
        self.path = Path(path)

    def __repr__(self) -> str:
        return f"ExternalScript({str(self.path)!r})"


TriageScript = Union[BuiltinScript, ExternalScript]


def script_path(script: TriageScript) -> Path:
    """Resolve the path gdb should source for *script*.

    Raises
    ------
    UnsupportedScriptLocation
        For external scripts, which the driver cannot deliver yet, or for a
        built-in script whose file has already been released.
    """
    if isinstance(script, BuiltinScript):
        if script.closed:
            raise UnsupportedScriptLocation("Triage script has been released")
        return script.path
    raise UnsupportedScriptLocation()
