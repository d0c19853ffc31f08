# ===============================
# File: labreader/commons/errors.py
# ===============================
"""
Errores terminales de una solicitud. `message` es el texto que ve el usuario.
"""
from typing import Dict

UPLOAD_MESSAGES: Dict[str, str] = {
    "no_file": "Dosya gerekli",
    "too_large": "Dosya boyutu {limit_mb}MB'ı aşmamalı",  # limite de UploadCfg.max_size_bytes
    "unsupported_type": "Yalnızca PDF, JPG, PNG kabul edilir",
}

EXTRACTION_MESSAGE = "Metin çıkarılamadı. Lütfen daha net bir rapor deneyin."


class LabReaderError(Exception):
    """Base de todos los errores de lab-report-reader."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class UploadRejected(LabReaderError):
    """Documento ausente, demasiado grande o de un tipo no soportado."""

    def __init__(self, reason: str, message: str = ""):
        super().__init__(message or UPLOAD_MESSAGES.get(reason, reason))
        self.reason = reason


class ExtractionFailure(LabReaderError):
    """La extraccion OCR/PDF no produjo texto util."""

    def __init__(self, message: str = EXTRACTION_MESSAGE):
        super().__init__(message)
