"""Text extraction from uploaded knowledge documents."""

from dataclasses import dataclass

# Allowed file extensions for text-based files
ALLOWED_EXTENSIONS = {".txt", ".md", ".json", ".csv", ".tsv"}

# Allowed content types when extension is missing or unknown
ALLOWED_CONTENT_TYPE_PREFIXES = ("text/", "application/json")

PDF_EXTENSION = ".pdf"
PDF_CONTENT_TYPE = "application/pdf"

# Explicitly rejected file types with helpful error message
REJECTED_EXTENSIONS = {".docx", ".doc", ".xlsx", ".xls", ".pptx", ".ppt"}
REJECTED_CONTENT_TYPES = {
    "application/vnd.openxmlformats-officedocument",
    "application/msword",
    "image/",
    "audio/",
}

# Lazy import to avoid loading PyMuPDF at module load
fitz = None


def _get_fitz():
    """Lazy load PyMuPDF."""
    global fitz
    if fitz is None:
        import fitz as _fitz

        fitz = _fitz
    return fitz


@dataclass
class FileTextResult:
    """Result of text extraction from a file."""

    text: str
    detected_encoding: str


def _get_extension(filename: str) -> str:
    """Extract lowercase file extension from filename."""
    if "." in filename:
        return "." + filename.rsplit(".", 1)[-1].lower()
    return ""


def _is_rejected_content_type(content_type: str | None) -> bool:
    if not content_type:
        return False
    content_type_lower = content_type.lower()
    return any(content_type_lower.startswith(rejected) for rejected in REJECTED_CONTENT_TYPES)


def _is_allowed_content_type(content_type: str | None) -> bool:
    if not content_type:
        return False
    content_type_lower = content_type.lower()
    return any(content_type_lower.startswith(prefix) for prefix in ALLOWED_CONTENT_TYPE_PREFIXES)


def _decode_bytes(raw_bytes: bytes) -> tuple[str, str]:
    """
    Attempt to decode bytes using fallback chain.

    Returns:
        Tuple of (decoded_text, encoding_name)

    Raises:
        ValueError: If no encoding works
    """
    if raw_bytes.startswith(b"\xef\xbb\xbf"):
        try:
            return raw_bytes.decode("utf-8-sig"), "utf-8-sig"
        except UnicodeDecodeError:
            pass

    # cp949 covers legacy Korean documents
    for encoding in ("utf-8", "cp949"):
        try:
            return raw_bytes.decode(encoding), encoding
        except UnicodeDecodeError:
            continue

    raise ValueError("Unable to decode file content. Supported encodings: UTF-8, UTF-8-BOM, CP949.")


def _extract_pdf_text(raw_bytes: bytes) -> str:
    """Concatenate the native text layer of every PDF page."""
    pymupdf = _get_fitz()
    try:
        with pymupdf.open(stream=raw_bytes, filetype="pdf") as doc:
            return "\n".join(page.get_text() for page in doc)
    except Exception as e:
        raise ValueError(f"Unable to read PDF: {e}") from e


def extract_text_from_upload(
    filename: str,
    content_type: str | None,
    raw_bytes: bytes,
) -> FileTextResult:
    """
    Extract text content from an uploaded file.

    Args:
        filename: Original filename
        content_type: MIME content type (may be None)
        raw_bytes: Raw file bytes

    Returns:
        FileTextResult with extracted text and detected encoding

    Raises:
        ValueError: If file type is not supported or content cannot be decoded
    """
    extension = _get_extension(filename)

    if extension in REJECTED_EXTENSIONS or _is_rejected_content_type(content_type):
        raise ValueError("Unsupported file type. Upload a PDF or a plain text document.")

    if extension == PDF_EXTENSION or (content_type or "").lower() == PDF_CONTENT_TYPE:
        return FileTextResult(text=_extract_pdf_text(raw_bytes), detected_encoding="pdf")

    if extension in ALLOWED_EXTENSIONS or _is_allowed_content_type(content_type):
        text, encoding = _decode_bytes(raw_bytes)
        return FileTextResult(text=text, detected_encoding=encoding)

    allowed_ext_list = ", ".join(sorted(ALLOWED_EXTENSIONS | {PDF_EXTENSION}))
    raise ValueError(f"Unsupported file type. Allowed extensions: {allowed_ext_list}.")
