import io
import os
import fitz          # PyMuPDF
import docx          # python-docx


def extract_paragraphs(filename: str, data: bytes) -> list[str]:
    """
    Return a list of paragraph-like strings from uploaded .txt, .pdf or .docx bytes.
    The extension of `filename` picks the reader.
    """
    ext = os.path.splitext(filename)[1].lower()

    if ext == ".txt":
        text = data.decode("utf-8", errors="replace")
        return [p.strip() for p in text.replace("\r\n", "\n").split("\n\n") if p.strip()]

    if ext == ".pdf":
        paras: list[str] = []
        with fitz.open(stream=data, filetype="pdf") as doc:
            for page in doc:
                # 'blocks' yields tuples; index 4 is the text
                for b in page.get_text("blocks") or []:
                    if isinstance(b, (list, tuple)) and len(b) >= 5:
                        text = (b[4] or "").strip()
                        if text:
                            paras.append(text)
        return paras

    if ext == ".docx":
        d = docx.Document(io.BytesIO(data))
        return [p.text.strip() for p in d.paragraphs if p.text and p.text.strip()]

    raise ValueError(f"Unsupported extension: {ext or filename}")


def extract_text(filename: str, data: bytes) -> str:
    return "\n\n".join(extract_paragraphs(filename, data))
