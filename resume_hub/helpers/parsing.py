import io
import zipfile
from pathlib import PurePosixPath
from typing import List, Tuple
from pdfminer.high_level import extract_text as pdf_extract
from docx import Document

from resume_hub.utils.config import MAX_UPLOAD_BYTES, MAX_ZIP_EXPANDED_BYTES
from resume_hub.utils.exceptions import DocumentParseError
from resume_hub.utils.logging_config import get_logger

logger = get_logger(__name__)

PDF = "application/pdf"
DOCX = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
TXT = "text/plain"
ZIP_TYPES = ("application/zip", "application/x-zip-compressed")

EXTENSION_TYPES = {
    ".pdf": PDF,
    ".docx": DOCX,
    ".txt": TXT,
    ".zip": ZIP_TYPES[0],
}

def read_txt(content: bytes) -> str:
    return content.decode("utf-8", errors="ignore")

def read_docx(content: bytes) -> str:
    doc = Document(io.BytesIO(content))
    return "\n".join([p.text for p in doc.paragraphs])

def read_pdf(content: bytes) -> str:
    return pdf_extract(io.BytesIO(content))

def resolve_mimetype(mimetype: str, filename: str = "") -> str:
    """Trust the extension when the client sent a generic content type."""
    ext = PurePosixPath(filename or "").suffix.lower()
    if mimetype in (None, "", "application/octet-stream") and ext in EXTENSION_TYPES:
        return EXTENSION_TYPES[ext]
    return mimetype or ""


def is_zip(mimetype: str, filename: str = "") -> bool:
    return resolve_mimetype(mimetype, filename) in ZIP_TYPES

def parse_document(content: bytes, mimetype: str, filename: str = "") -> str:
    """Turn an uploaded PDF, DOCX or TXT file into plain text."""
    mimetype = resolve_mimetype(mimetype, filename)
    try:
        if mimetype == PDF:
            return read_pdf(content)
        if mimetype == DOCX:
            return read_docx(content)
        if mimetype == TXT:
            return read_txt(content)
    except Exception as e:
        logger.error(f"Failed to read {filename or 'document'} ({mimetype}): {e}")
        raise DocumentParseError(
            f"Failed to parse {filename or 'document'}", filename=filename, mimetype=mimetype, cause=e
        ) from e
    raise DocumentParseError("Unsupported file type", filename=filename, mimetype=mimetype)

def extract_zip_files(
    content: bytes,
    max_member_bytes: int = MAX_UPLOAD_BYTES,
    max_total_bytes: int = MAX_ZIP_EXPANDED_BYTES,
) -> List[Tuple[str, bytes, str]]:
    """Return (name, bytes, mimetype) for every supported document in a ZIP archive.

    Members larger than ``max_member_bytes`` once expanded are skipped; an
    archive whose kept members expand past ``max_total_bytes`` is rejected.
    Sizes come from the archive directory, which zipfile enforces on read.
    """
    try:
        archive = zipfile.ZipFile(io.BytesIO(content))
    except zipfile.BadZipFile as e:
        raise DocumentParseError("Invalid ZIP archive", cause=e) from e

    out = []
    expanded = 0
    with archive:
        for info in archive.infolist():
            path = PurePosixPath(info.filename)
            if info.is_dir() or path.name.startswith(".") or "__MACOSX" in path.parts:
                continue
            mimetype = EXTENSION_TYPES.get(path.suffix.lower())
            if mimetype is None or mimetype in ZIP_TYPES:
                logger.debug(f"Skipping unsupported archive member {info.filename}")
                continue
            if info.file_size > max_member_bytes:
                logger.warning(f"Skipping archive member {info.filename}: {info.file_size} bytes expanded")
                continue
            expanded += info.file_size
            if expanded > max_total_bytes:
                raise DocumentParseError(
                    f"ZIP archive expands past {max_total_bytes} bytes", filename=info.filename
                )
            try:
                data = archive.read(info)
            except zipfile.BadZipFile as e:
                raise DocumentParseError("Corrupt ZIP member", filename=info.filename, cause=e) from e
            out.append((path.name, data, mimetype))
    return out
