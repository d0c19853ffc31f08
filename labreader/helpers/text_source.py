import io
from typing import List, Optional

import fitz
import pytesseract
from PIL import Image, ImageOps

from labreader.commons.logger import logger
from labreader.commons.types import OcrCfg, PdfOcrMode

PDF = "application/pdf"
IMAGE_TYPES = ("image/jpeg", "image/png")


class TextSource:
    """
    Devuelve el texto crudo de un documento.
    - PDF: capa de texto embebida (PyMuPDF); si esta vacia (PDF escaneado) cada
      pagina se renderiza a imagen y pasa por Tesseract, segun `ocr.pdf_ocr`.
    - JPEG/PNG: Tesseract con modelo bilingue (eng+tur por defecto).
    Nunca levanta excepciones: cualquier fallo se registra y se devuelve "".
    """

    def __init__(self, ocr_cfg: Optional[OcrCfg] = None):
        self.ocr_cfg = ocr_cfg or OcrCfg()
        if self.ocr_cfg.tesseract_cmd:
            pytesseract.pytesseract.tesseract_cmd = self.ocr_cfg.tesseract_cmd

    def extract(self, data: bytes, media_type: str) -> str:
        try:
            if media_type == PDF:
                return self._extract_pdf(data)
            if media_type in IMAGE_TYPES:
                return self._extract_image(data)
            logger.warning(f"Tipo no soportado para extraccion: {media_type}")
            return ""
        except Exception as ex:
            logger.exception(f"Fallo la extraccion de texto ({media_type}): {ex}")
            return ""

    def _extract_pdf(self, data: bytes) -> str:
        mode = self.ocr_cfg.pdf_ocr
        with fitz.open(stream=data, filetype="pdf") as doc:
            text = ""
            if mode is not PdfOcrMode.ALWAYS:
                text = "\n".join(page.get_text() for page in doc)
                logger.info(f"PDF: {doc.page_count} pagina(s), capa de texto de {len(text.strip())} caracteres")
            if mode is PdfOcrMode.ALWAYS or (mode is PdfOcrMode.AUTO and not text.strip()):
                text = "\n".join(self._ocr_pdf_pages(doc))
        return text

    def _ocr_pdf_pages(self, doc: "fitz.Document") -> List[str]:
        dpi = self.ocr_cfg.pdf_dpi
        matrix = fitz.Matrix(dpi / 72.0, dpi / 72.0)
        out: List[str] = []
        for page in doc:
            pix = page.get_pixmap(matrix=matrix, alpha=False)
            with Image.open(io.BytesIO(pix.tobytes(output="png"))) as img:
                out.append(pytesseract.image_to_string(img.convert("L"), lang=self.ocr_cfg.lang) or "")
        logger.info(f"PDF OCR ({self.ocr_cfg.lang}, {dpi} dpi): {len(out)} pagina(s)")
        return out

    def _extract_image(self, data: bytes) -> str:
        with Image.open(io.BytesIO(data)) as img:
            # respeta la orientacion EXIF de fotos de celular
            img = ImageOps.exif_transpose(img).convert("RGB")
            text = pytesseract.image_to_string(img, lang=self.ocr_cfg.lang)
        logger.info(f"OCR ({self.ocr_cfg.lang}): {len(text)} caracteres")
        return text or ""
