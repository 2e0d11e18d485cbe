from io import BytesIO

from pypdf import PdfReader
from pypdf.errors import PyPdfError


def extract_text_from_pdf_bytes(data: bytes, max_pages: int) -> tuple[str, dict]:
    """Extract text content from PDF file bytes.

    Args:
        data: Raw bytes of the PDF file.
        max_pages: Reject documents with more pages than this.

    Returns:
        tuple: A tuple containing:
            - str: Extracted text from all pages, pages separated by newlines.
            - dict: Metadata with page count.

    Raises:
        ValueError: If the PDF cannot be parsed or has too many pages.
    """
    try:
        reader = PdfReader(BytesIO(data))
        page_count = len(reader.pages)
    except PyPdfError as exc:
        raise ValueError(f"Unreadable PDF: {exc}") from exc

    if page_count > max_pages:
        raise ValueError(
            f"PDF has too many pages: {page_count} (max allowed: {max_pages})"
        )

    texts: list[str] = []
    try:
        for page in reader.pages:
            texts.append(page.extract_text() or "")
    except PyPdfError as exc:
        raise ValueError(f"Unreadable PDF: {exc}") from exc

    full_text = "\n".join(texts).strip()
    return full_text, {"pages": page_count}
