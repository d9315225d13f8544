"""Document sinks for rendered resources and the operator's active document."""

from __future__ import annotations

import logging
import subprocess
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from rich.console import Console
from rich.panel import Panel
from rich.syntax import Syntax

from kubepick.errors import ActionError, PreconditionError

LOGGER = logging.getLogger("kubepick.documents")


class DocumentSink(Protocol):
    def create_document(self, name: str, content_type: str, lines: Sequence[str]) -> None:
        ...


class ConsoleDocumentSink:
    """Shows the document on the terminal with syntax highlighting."""

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()

    def create_document(self, name: str, content_type: str, lines: Sequence[str]) -> None:
        syntax = Syntax("\n".join(lines), content_type, line_numbers=False, word_wrap=True)
        self.console.print(Panel(syntax, title=name, title_align="left"))


class FileDocumentSink:
    """Writes the document into a directory and optionally opens it in an editor."""

    def __init__(self, output_dir: Path, *, editor: str | None = None) -> None:
        self.output_dir = output_dir
        self.editor = editor
        self.created: list[Path] = []

    def create_document(self, name: str, content_type: str, lines: Sequence[str]) -> None:
        path = self.output_dir / Path(name).name
        text = "\n".join(lines)
        if not text.endswith("\n"):
            text += "\n"
        try:
            self.output_dir.mkdir(parents=True, exist_ok=True)
            path.write_text(text, encoding="utf-8")
        except OSError as exc:
            raise ActionError(f"Failed to write document {name}: {exc}") from exc
        self.created.append(path)
        LOGGER.info("document written path=%s content_type=%s", path, content_type)

        if self.editor:
            try:
                subprocess.run([self.editor, str(path)], check=False)
            except OSError as exc:
                raise ActionError(f"Failed to open document {name} in {self.editor}: {exc}") from exc


@dataclass(frozen=True)
class ActiveDocument:
    file_path: Path | None = None

    def require_file(self) -> Path:
        if self.file_path is None or not str(self.file_path).strip():
            raise PreconditionError("No file selected")
        if not self.file_path.is_file():
            raise PreconditionError(f"File not found: {self.file_path}")
        return self.file_path
