"""Best-effort text extraction for uploaded documents.

Plain text and markdown are kept verbatim (capped). Binary formats are not
decoded here; they get a placeholder naming the file so the model can be told
what was uploaded.
"""

import logging

logger = logging.getLogger(__name__)

MAX_EXTRACTED_CHARS = 100_000
TRUNCATION_MARKER = "\n[Content truncated...]"

# Supported file extensions and their MIME types
SUPPORTED_EXTENSIONS = {
    '.pdf': 'application/pdf',
    '.txt': 'text/plain',
    '.md': 'text/markdown',
    '.doc': 'application/msword',
    '.docx': 'application/vnd.openxmlformats-officedocument.wordprocessingml.document',
    '.png': 'image/png',
    '.jpg': 'image/jpeg',
    '.jpeg': 'image/jpeg',
    '.webp': 'image/webp',
}

ALLOWED_MIME_TYPES = {
    'application/pdf',
    'text/plain',
    'application/msword',
    'application/vnd.openxmlformats-officedocument.wordprocessingml.document',
    'image/png',
    'image/jpeg',
    'image/jpg',
    'image/webp',
}

TEXT_MIME_TYPES = {'text/plain', 'text/markdown'}
WORD_MIME_TYPES = {
    'application/msword',
    'application/vnd.openxmlformats-officedocument.wordprocessingml.document',
}


def get_extension(filename: str) -> str:
    """Lower-cased extension without the dot, or '' if there is none."""
    if not filename or "." not in filename:
        return ""
    return filename.rsplit(".", 1)[-1].lower()


def is_allowed_file(filename: str, content_type: str) -> bool:
    """A file is accepted if either its MIME type or its extension is allowed."""
    if content_type in ALLOWED_MIME_TYPES:
        return True
    return f".{get_extension(filename)}" in SUPPORTED_EXTENSIONS


def _decode_text(file_content: bytes) -> str:
    # Try UTF-8 first, then fall back to other encodings
    for encoding in ('utf-8', 'cp1252'):
        try:
            return file_content.decode(encoding)
        except UnicodeDecodeError:
            continue
    return file_content.decode('latin-1')


def truncate_text(text: str, limit: int = MAX_EXTRACTED_CHARS) -> str:
    if len(text) > limit:
        return text[:limit] + TRUNCATION_MARKER
    return text


def extract_text(file_content: bytes, content_type: str, filename: str) -> str:
    """
    Produce a text representation of an uploaded file.

    Args:
        file_content: The raw bytes of the file
        content_type: Declared MIME type
        filename: Original filename (used to determine type)

    Returns:
        The extracted text, a placeholder for binary formats, or "" when the
        type is not recognized. Never raises.
    """
    content_type = content_type or ""
    ext = get_extension(filename)

    try:
        if content_type in TEXT_MIME_TYPES or ext in ("txt", "md"):
            return truncate_text(_decode_text(file_content))
        if content_type == "application/pdf" or ext == "pdf":
            return f"[PDF Document: {filename}] - Content will be analyzed by AI"
        if content_type.startswith("image/") or ext in ("png", "jpg", "jpeg", "webp"):
            return f"[Image: {filename}] - Visual content will be analyzed by AI"
        if content_type in WORD_MIME_TYPES or ext in ("doc", "docx"):
            return f"[Word Document: {filename}] - Content will be analyzed by AI"
    except Exception as e:
        logger.error(f"Unexpected error extracting text from {filename}: {e}")
        return ""

    return ""
