# labreader/services/analysis_service.py
import asyncio
import json
import mimetypes
import re
import shutil
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, List, Optional

from labreader.commons.errors import ExtractionFailure, LabReaderError
from labreader.commons.logger import logger
from labreader.commons.report_formatter import format_report
from labreader.commons.types import Settings
from labreader.helpers.file_watcher import DocumentWatcher
from labreader.helpers.text_source import TextSource
from labreader.parsers.lab_text import parse_lab_text
from labreader.parsers.models import ParsedTest
from labreader.validation.validators import validate_upload_or_raise


@dataclass(frozen=True)
class AnalysisResult:
    report: str
    raw_text: str
    tests: List[ParsedTest] = field(default_factory=list)

    @property
    def structured(self) -> bool:
        """False cuando hubo texto pero ninguna linea se pudo estructurar."""
        return bool(self.tests)

    def to_payload(self) -> Dict:
        return {
            "report": self.report,
            "raw_text": self.raw_text,
            "tests": [asdict(t) for t in self.tests],
        }


def generate_output_filename(source: str, extension: str = "json") -> str:
    """
    Nombre de salida con timestamp (orden natural) y el nombre base del documento.
    Ej: 20250821-170605-123456_hemograma_marzo.json
    """
    ts = datetime.now(timezone.utc).strftime("%Y%m%d-%H%M%S-%f")
    base_name = Path(source).stem if source else "document"
    safe_base = re.sub(r"[^a-zA-Z0-9_\-]", "_", base_name)
    return f"{ts}_{safe_base}.{extension}"


def guess_media_type(path: str) -> str:
    return mimetypes.guess_type(path)[0] or ""


class AnalysisService:
    def __init__(self, source: TextSource, settings: Settings):
        self.source = source
        self.settings = settings
        self.paths = settings.paths

    async def analyze(
        self, data: Optional[bytes], media_type: Optional[str], filename: Optional[str] = None
    ) -> AnalysisResult:
        # 1) valida archivo, tamano y tipo (UploadRejected)
        doc = validate_upload_or_raise(data, media_type, self.settings.upload, filename)
        # 2) extrae texto fuera del loop: OCR puede tardar segundos
        text = await asyncio.to_thread(self.source.extract, doc.data, doc.media_type)
        if not (text or "").strip():
            logger.warning(f"Sin texto extraido de {filename or doc.media_type}")
            raise ExtractionFailure()
        # 3) estructura y arma el informe; cero coincidencias no es un error
        tests = parse_lab_text(text)
        if not tests:
            logger.warning(f"{filename or 'documento'}: texto extraido pero ninguna linea reconocida")
        else:
            logger.info(f"{filename or 'documento'}: {len(tests)} test(s) reconocidos")
        return AnalysisResult(report=format_report(tests), raw_text=text, tests=tests)

    def _move(self, src: str, folder: str) -> Optional[Path]:
        if not src or not Path(src).exists():
            return None
        dst_dir = Path(folder)
        dst_dir.mkdir(parents=True, exist_ok=True)
        dst = dst_dir / Path(src).name
        shutil.move(src, dst)
        return dst

    async def process_document(self, data: bytes, src: str) -> Optional[Path]:
        """Procesa un documento del inbox. Devuelve la ruta del JSON o None si fallo."""
        name = Path(src).name
        try:
            result = await self.analyze(data, guess_media_type(src), filename=name)
        except LabReaderError as err:
            moved = self._move(src, self.paths.error)
            logger.error(f"{name} rechazado: {err.message}. Movido a {moved}")
            return None
        except Exception as ex:
            moved = self._move(src, self.paths.error)
            logger.exception(f"Error procesando {name}: {ex}. Movido a {moved}")
            return None

        out_dir = Path(self.paths.archive)
        out_dir.mkdir(parents=True, exist_ok=True)
        out_json = out_dir / generate_output_filename(src)
        out_json.write_text(json.dumps(result.to_payload(), ensure_ascii=False, indent=2), encoding="utf-8")
        self._move(src, str(out_dir / "docs"))
        logger.info(f"Informe generado y archivado: {out_json}")
        return out_json

    async def _process_backlog(self, glob_pat: str):
        inbox = Path(self.paths.inbox)
        files = sorted(p for p in inbox.glob(glob_pat) if p.is_file())
        if not files:
            return
        logger.info(f"Backlog detectado: {len(files)} archivo(s) en {inbox}")
        for f in files:
            # un fallo no detiene el backlog completo
            try:
                await self.process_document(f.read_bytes(), str(f))
            except Exception as ex:
                logger.exception(f"Fallo inesperado con {f}: {ex}")

    async def run_file_mode(self, glob_pat: str, stop_event: Optional[asyncio.Event] = None):
        loop = asyncio.get_running_loop()
        Path(self.paths.inbox).mkdir(parents=True, exist_ok=True)

        await self._process_backlog(glob_pat)

        watcher = DocumentWatcher(self.paths.inbox, glob_pat, self.process_document, loop)
        watcher.start()
        logger.info(f"Escuchando carpeta de documentos {self.paths.inbox} ...")
        try:
            await (stop_event or asyncio.Event()).wait()
        finally:
            watcher.stop()
