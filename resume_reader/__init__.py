from .reader import PdfTextError, build_resume_object, extract_text_from_pdf_bytes

__all__ = ["PdfTextError", "build_resume_object", "extract_text_from_pdf_bytes"]
