import re
from pathlib import Path

MAX_FILE_SIZE = 5 * 1024 * 1024  # 5MB
SUPPORTED_SUFFIXES = (".pdf", ".docx", ".txt", ".md")


def load_text(file_path: str | Path) -> str:
    """Load a resume or job description file (PDF, DOCX, TXT, MD) as plain text."""
    path = Path(file_path)
    size = path.stat().st_size
    if size > MAX_FILE_SIZE:
        raise ValueError(
            f"File size exceeds maximum of {MAX_FILE_SIZE // (1024 * 1024)}MB: {path.name}"
        )

    suffix = path.suffix.lower()
    if suffix == ".pdf":
        text = _parse_pdf(path)
    elif suffix == ".docx":
        text = _parse_docx(path)
    elif suffix in (".txt", ".md"):
        text = path.read_text(encoding="utf-8")
    else:
        raise ValueError(f"Unsupported file format: {path.suffix}")
    return normalize_whitespace(text)


def normalize_whitespace(text: str) -> str:
    """Drop BOM/zero-width characters, trailing spaces and runs of blank lines."""
    text = text.lstrip("\ufeff")
    text = re.sub(r"[\u200b\u200c\u200d\u00ad\u2060]", "", text)
    lines = [re.sub(r"[ \t]{2,}", " ", line).rstrip() for line in text.splitlines()]
    text = "\n".join(lines)
    # 3+ newlines -> one blank line
    text = re.sub(r"\n{3,}", "\n\n", text)
    return text.strip()


def _parse_pdf(path: Path) -> str:
    import fitz  # pymupdf

    doc = fitz.open(str(path))
    text = []
    for page in doc:
        text.append(page.get_text())
    doc.close()
    return "\n".join(text)


def _parse_docx(path: Path) -> str:
    from docx import Document

    doc = Document(str(path))
    return "\n".join(p.text for p in doc.paragraphs if p.text.strip())
