import pdfplumber
from io import BytesIO


def extract_text_from_pdf_bytes(pdf_bytes: bytes) -> str:
    """Return the document as plain text: page text followed by that page's table rows.
    Table rows are joined by '; ' and cells by ' | ', one paragraph per page;
    pages are separated by a blank line.
    """
    parts: list[str] = []
    with pdfplumber.open(BytesIO(pdf_bytes)) as pdf:
        for page in pdf.pages:
            txt = page.extract_text() or ""
            if txt.strip():
                parts.append(txt.strip())
            tables = page.extract_tables() or []
            if tables:
                rows = [" | ".join((c or "").strip() for c in row) for t in tables for row in t]
                para = "; ".join(r for r in rows if r.strip(" |"))
                if para:
                    parts.append(para)
    return "\n\n".join(parts)
