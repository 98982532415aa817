from pypdf import PdfReader
import re
from typing import List, Optional

from config import logger

def parse_pdf_to_pages_text(file_path: str) -> Optional[List[str]]:
    """
    parses a PDF file and extracts text from each page.
    returns a list of strings, where each string is the text of a page.
    Pages without extractable text (e.g. image-only pages) give an empty string.
    """
    pages_text_content = []
    try:
        reader = PdfReader(file_path)
        num_pages = len(reader.pages)
        logger.debug(f"Extracting text from {num_pages} page(s) of {file_path}")
        for page in reader.pages:
            text = page.extract_text()
            if text:
                text = re.sub(r'\s+', ' ', text).strip()
            pages_text_content.append(text or "")

    except FileNotFoundError:
        logger.error(f"PDF document not found at {file_path}")
        return None
    except Exception as e:
        logger.error(f"Error parsing PDF document '{file_path}': {e}")
        return None
    return pages_text_content


def extract_pdf_text(file_path: str) -> Optional[str]:
    """
    Gets the text of a whole PDF as one string, pages joined by a single space.
    """
    pages = parse_pdf_to_pages_text(file_path)
    if pages is None:
        return None
    return ' '.join(page for page in pages if page)
