"""Upload-side models: the selected KML file and the file-input slot."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pathlib import Path


@dataclass(frozen=True, slots=True)
class KmlFile:
    """A KML file chosen by the user.

    Attributes:
        name: Original filename, sent as the multipart filename.
        content: Raw file bytes.
    """

    name: str
    content: bytes

    @classmethod
    def from_path(cls, path: Path) -> KmlFile:
        return cls(name=path.name, content=path.read_bytes())

    @property
    def size(self) -> int:
        return len(self.content)


class FileInput:
    """The file-picker slot that feeds the upload orchestrator.

    A browser file input only fires a change event when its value changes,
    so the upload orchestrator empties the slot after every attempt.  That
    keeps re-selecting the same file (for instance after a parse error)
    possible.
    """

    def __init__(self) -> None:
        self._value: KmlFile | None = None

    @property
    def value(self) -> KmlFile | None:
        return self._value

    def select(self, kml_file: KmlFile) -> bool:
        """Place *kml_file* in the slot.

        Returns:
            ``True`` if the selection changed (a change event would fire),
            ``False`` if the same file is already selected.
        """
        if self._value == kml_file:
            return False
        self._value = kml_file
        return True

    def reset(self) -> None:
        self._value = None
