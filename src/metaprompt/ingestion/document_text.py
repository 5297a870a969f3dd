"""Document text extraction: uploaded file bytes → plain UTF-8 text.

The file type is chosen by extension (case-insensitive).  PDFs are read with
``pypdf``, Word documents with ``mammoth`` and workbooks with ``openpyxl``
(one CSV block per sheet).  Slides are read straight from the pptx slide
XML.  Parsing is blocking work and runs in a worker thread so concurrent
conversions do not stall the loop.
"""

from __future__ import annotations

import asyncio
import csv
import io
import logging
import re
import zipfile
from collections.abc import Callable
from typing import Any, Protocol, runtime_checkable
from xml.etree import ElementTree

import mammoth
from openpyxl import load_workbook
from openpyxl.utils.exceptions import InvalidFileException
from pypdf import PdfReader

from metaprompt.exceptions import DocumentConversionError, UnsupportedFileTypeError
from metaprompt.models import UploadedFile

log = logging.getLogger(__name__)

SUPPORTED_EXTENSIONS: frozenset[str] = frozenset({"txt", "md", "pdf", "docx", "pptx", "xlsx"})

_DRAWING_NS = "http://schemas.openxmlformats.org/drawingml/2006/main"
_SLIDE_PART = re.compile(r"^ppt/slides/slide(\d+)\.xml$")


@runtime_checkable
class DocumentTextExtractor(Protocol):
    """Converts an uploaded file into text or raises ``DocumentConversionError``."""

    async def extract(self, upload: UploadedFile) -> str:
        """Return the text of *upload*.

        Raises:
            UnsupportedFileTypeError: The extension is not supported.
            DocumentConversionError: The file could not be parsed.
        """
        ...


class DefaultDocumentTextExtractor:
    """Built-in extractor for txt, md, pdf, docx, pptx and xlsx files."""

    def __init__(self) -> None:
        self._parsers: dict[str, Callable[[bytes], str]] = {
            "txt": _text_from_plain,
            "md": _text_from_plain,
            "pdf": _text_from_pdf,
            "docx": _text_from_docx,
            "pptx": _text_from_pptx,
            "xlsx": _text_from_xlsx,
        }

    async def extract(self, upload: UploadedFile) -> str:
        ext = upload.extension
        parser = self._parsers.get(ext)
        if parser is None:
            raise UnsupportedFileTypeError(
                upload.filename, f"Tipe file .{ext or '?'} tidak didukung."
            )

        try:
            text = await asyncio.to_thread(parser, upload.content)
        except (zipfile.BadZipFile, ElementTree.ParseError, InvalidFileException, KeyError) as exc:
            raise DocumentConversionError(
                upload.filename, f"File rusak atau bukan dokumen .{ext} yang valid ({exc})"
            ) from exc
        except Exception as exc:
            log.warning("Failed to parse %s: %s", upload.filename, exc)
            raise DocumentConversionError(upload.filename, str(exc) or type(exc).__name__) from exc

        log.debug("Extracted %d chars from %s", len(text), upload.filename)
        return text


# ── Parsers ──────────────────────────────────────────────────────────


def _text_from_plain(data: bytes) -> str:
    return data.decode("utf-8", errors="replace")


def _text_from_pdf(data: bytes) -> str:
    reader = PdfReader(io.BytesIO(data))
    pages = [(page.extract_text() or "") for page in reader.pages]
    return "\n".join(pages)


def _text_from_docx(data: bytes) -> str:
    result = mammoth.extract_raw_text(io.BytesIO(data))
    for message in result.messages:
        log.debug("mammoth: %s", message)
    return result.value.strip()


def _text_from_pptx(data: bytes) -> str:
    with zipfile.ZipFile(io.BytesIO(data)) as zf:
        slides: list[tuple[int, str]] = []
        for name in zf.namelist():
            match = _SLIDE_PART.match(name)
            if match:
                slides.append((int(match.group(1)), name))
        # slide10 sorts after slide9
        slides.sort()

        blocks = []
        for _, name in slides:
            root = ElementTree.fromstring(zf.read(name))
            blocks.append(" ".join(t.text or "" for t in root.iter(f"{{{_DRAWING_NS}}}t")))
    return "\n\n".join(blocks).strip()


def _text_from_xlsx(data: bytes) -> str:
    workbook = load_workbook(io.BytesIO(data), read_only=True, data_only=True)
    try:
        blocks = [f"--- SHEET: {sheet.title} ---\n{_sheet_to_csv(sheet)}" for sheet in workbook.worksheets]
    finally:
        workbook.close()
    return "\n\n".join(blocks).strip()


def _cell_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "TRUE" if value else "FALSE"
    return str(value)


def _sheet_to_csv(sheet: Any) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    for row in sheet.iter_rows(values_only=True):
        cells = [_cell_text(v) for v in row]
        # read-only rows are padded to the sheet dimension
        while cells and cells[-1] == "":
            cells.pop()
        writer.writerow(cells)
    return buffer.getvalue().rstrip("\n")
