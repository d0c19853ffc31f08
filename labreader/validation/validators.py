# labreader/validation/validators.py
from typing import Optional

from pydantic import BaseModel, ValidationError, ValidationInfo, field_validator
from pydantic_core import PydanticCustomError

from labreader.commons.errors import UPLOAD_MESSAGES, UploadRejected
from labreader.commons.types import UploadCfg


class UploadedDocument(BaseModel):
    # orden de validacion: archivo, tamano, tipo
    data: bytes
    media_type: str
    filename: Optional[str] = None

    @field_validator("data")
    @classmethod
    def _check_data(cls, v: bytes, info: ValidationInfo):
        if not v:
            raise PydanticCustomError("no_file", UPLOAD_MESSAGES["no_file"])
        limits: UploadCfg = (info.context or {}).get("upload") or UploadCfg()
        if len(v) > limits.max_size_bytes:
            raise PydanticCustomError(
                "too_large",
                UPLOAD_MESSAGES["too_large"],
                {"limit_mb": f"{limits.max_size_bytes / (1024 * 1024):g}"},
            )
        return v

    @field_validator("media_type")
    @classmethod
    def _check_media_type(cls, v: str, info: ValidationInfo):
        limits: UploadCfg = (info.context or {}).get("upload") or UploadCfg()
        v = (v or "").split(";", 1)[0].strip().lower()
        if v not in limits.accepted_types:
            raise PydanticCustomError("unsupported_type", UPLOAD_MESSAGES["unsupported_type"])
        return v


def validate_upload_or_raise(
    data: Optional[bytes],
    media_type: Optional[str],
    upload_cfg: Optional[UploadCfg] = None,
    filename: Optional[str] = None,
) -> UploadedDocument:
    """Construye el modelo y levanta UploadRejected con el primer error encontrado."""
    try:
        return UploadedDocument.model_validate(
            {"filename": filename, "media_type": media_type or "", "data": data or b""},
            context={"upload": upload_cfg or UploadCfg()},
        )
    except ValidationError as ve:
        first = ve.errors()[0]
        raise UploadRejected(first["type"], first["msg"]) from ve
