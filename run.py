import asyncio
import json
import os
import sys
from dataclasses import asdict
from pathlib import Path
from typing import Optional

import typer
import yaml

from labreader.commons.errors import ExtractionFailure, UploadRejected
from labreader.commons.logger import logger, setup_logging
from labreader.commons.report_formatter import format_report
from labreader.commons.types import PdfOcrMode, Settings
from labreader.helpers.text_source import TextSource
from labreader.parsers.lab_text import parse_lab_text
from labreader.services.analysis_service import AnalysisService, guess_media_type

app = typer.Typer(add_completion=False, help="Lab Report Reader")

DEFAULT_CFG = "labreader/configs/settings.yaml"


def resource_path(relative_path: str) -> str:
    """Ruta absoluta a un recurso, ya sea ejecutando como .exe o en desarrollo"""
    if hasattr(sys, "_MEIPASS"):
        # ejecutable generado por PyInstaller
        base_path = sys._MEIPASS
    else:
        base_path = os.path.dirname(os.path.abspath(__file__))
    return os.path.join(base_path, relative_path)


def load_cfg(path: str = DEFAULT_CFG) -> Settings:
    config_path = path if os.path.isabs(path) else resource_path(path)
    with open(config_path, "r", encoding="utf-8") as f:
        return Settings.model_validate(yaml.safe_load(f) or {})


def _bootstrap(config: str) -> Settings:
    cfg = load_cfg(config)
    setup_logging(cfg.paths.logs_root, os.getenv("LOG_LEVEL", "INFO"))
    return cfg


@app.command()
def analyze(
    document: Path = typer.Argument(..., exists=True, dir_okay=False, help="PDF, JPG o PNG"),
    as_json: bool = typer.Option(False, "--json", help="imprime report + raw_text + tests en JSON"),
    pdf_ocr: Optional[PdfOcrMode] = typer.Option(
        None, "--pdf-ocr", help="PDF: auto (OCR si no hay capa de texto), always o never; por defecto el de settings.yaml"
    ),
    config: str = typer.Option(DEFAULT_CFG, help="ruta al settings.yaml"),
):
    """Extrae el texto del documento y genera el informe para el paciente."""
    cfg = _bootstrap(config)
    if pdf_ocr is not None:
        cfg.ocr.pdf_ocr = pdf_ocr
    svc = AnalysisService(TextSource(cfg.ocr), cfg)
    try:
        result = asyncio.run(
            svc.analyze(document.read_bytes(), guess_media_type(str(document)), filename=document.name)
        )
    except UploadRejected as err:
        typer.echo(err.message, err=True)
        raise typer.Exit(code=1)
    except ExtractionFailure as err:
        typer.echo(err.message, err=True)
        raise typer.Exit(code=2)

    if as_json:
        typer.echo(json.dumps(result.to_payload(), ensure_ascii=False, indent=2))
        return
    typer.echo(result.report)
    if not result.structured:
        # sin registros: mostrar lo que se extrajo para diagnostico
        typer.echo("\n---- RAW TEXT ----\n" + result.raw_text)


@app.command()
def parse(
    text_file: Path = typer.Argument(..., exists=True, dir_okay=False, help="texto ya extraido"),
    report: bool = typer.Option(False, "--report", help="imprime el informe en vez de los registros"),
):
    """Estructura un .txt ya extraido (sin OCR), util para ajustar el parser."""
    raw = text_file.read_text(encoding="utf-8")
    tests = parse_lab_text(raw)
    if report:
        typer.echo(format_report(tests))
        return
    typer.echo(json.dumps([asdict(t) for t in tests], ensure_ascii=False, indent=2))


@app.command()
def watch(config: str = typer.Option(DEFAULT_CFG, help="ruta al settings.yaml")):
    """
    Procesa el backlog del inbox y luego queda escuchando documentos nuevos.
    - Informe JSON -> archive/, documento original -> archive/docs/
    - Rechazados -> error/
    """
    cfg = _bootstrap(config)
    svc = AnalysisService(TextSource(cfg.ocr), cfg)
    try:
        asyncio.run(svc.run_file_mode(cfg.watch.filename_glob))
    except KeyboardInterrupt:
        logger.info("Watcher detenido por el usuario")


if __name__ == "__main__":
    app()
