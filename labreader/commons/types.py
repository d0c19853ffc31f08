from enum import Enum
from typing import List

from pydantic import BaseModel, Field


class PathsCfg(BaseModel):
    logs_root: str = "logs"
    inbox: str = "data/inbox"
    archive: str = "data/archive"
    error: str = "data/error"


class UploadCfg(BaseModel):
    max_size_bytes: int = Field(default=10 * 1024 * 1024, gt=0)
    accepted_types: List[str] = ["application/pdf", "image/jpeg", "image/png"]


class PdfOcrMode(str, Enum):
    AUTO = "auto"  # OCR solo si el PDF no trae capa de texto
    ALWAYS = "always"
    NEVER = "never"


class OcrCfg(BaseModel):
    lang: str = "eng+tur"
    pdf_ocr: PdfOcrMode = PdfOcrMode.AUTO
    pdf_dpi: int = Field(default=200, ge=72, le=600)
    tesseract_cmd: str = ""  # vacio = el del PATH


class WatchCfg(BaseModel):
    filename_glob: str = "*.*"


class Settings(BaseModel):
    paths: PathsCfg = PathsCfg()
    upload: UploadCfg = UploadCfg()
    ocr: OcrCfg = OcrCfg()
    watch: WatchCfg = WatchCfg()
