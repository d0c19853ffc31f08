"""
test_file_watcher.py

Modo carpeta: backlog + watchdog sobre un inbox temporal, con fuente de texto falsa.
"""

import asyncio
import json
import shutil
from concurrent.futures import Future

import pytest

from labreader.commons.logger import logger
from labreader.commons.types import PathsCfg, Settings
from labreader.helpers.file_watcher import log_if_failed, read_when_stable
from labreader.services.analysis_service import AnalysisService

REPORT_TEXT = "Hemoglobin (HGB): 10.5 g/dL (13.0-17.0 g/dL)\n"
PDF_BYTES = b"%PDF-1.4\n%fake\n"


class FakeSource:
    def extract(self, data: bytes, media_type: str) -> str:
        return REPORT_TEXT


def make_settings(tmp_path) -> Settings:
    return Settings(
        paths=PathsCfg(
            logs_root=str(tmp_path / "logs"),
            inbox=str(tmp_path / "inbox"),
            archive=str(tmp_path / "archive"),
            error=str(tmp_path / "error"),
        )
    )


async def wait_for(predicate, timeout: float = 10.0):
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while loop.time() < deadline:
        if predicate():
            return True
        await asyncio.sleep(0.1)
    return predicate()


def test_read_when_stable_returns_content(tmp_path):
    f = tmp_path / "rapor.pdf"
    f.write_bytes(PDF_BYTES)
    assert read_when_stable(f, attempts=3, delay=0.01) == PDF_BYTES


def test_read_when_stable_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        read_when_stable(tmp_path / "no_existe.pdf", attempts=2, delay=0.01)


def test_failed_future_is_logged():
    messages = []
    handler_id = logger.add(messages.append, level="ERROR")
    try:
        fut = Future()
        fut.set_exception(OSError("disco lleno"))
        log_if_failed(fut)

        ok = Future()
        ok.set_result(None)
        log_if_failed(ok)
    finally:
        logger.remove(handler_id)
    assert len(messages) == 1
    assert "disco lleno" in messages[0]


@pytest.mark.asyncio
async def test_watch_mode_processes_dropped_document(tmp_path):
    settings = make_settings(tmp_path)
    archive = tmp_path / "archive"
    svc = AnalysisService(FakeSource(), settings)
    stop = asyncio.Event()
    task = asyncio.create_task(svc.run_file_mode("*.pdf", stop_event=stop))
    try:
        # espera a que el watcher cree el inbox y arranque
        assert await wait_for(lambda: (tmp_path / "inbox").is_dir())
        await asyncio.sleep(0.5)

        staged = tmp_path / "hemogram.pdf"
        staged.write_bytes(PDF_BYTES)
        shutil.move(str(staged), str(tmp_path / "inbox" / "hemogram.pdf"))

        assert await wait_for(lambda: list(archive.glob("*.json")))
    finally:
        stop.set()
        await asyncio.wait_for(task, timeout=10)

    payload = json.loads(next(archive.glob("*.json")).read_text(encoding="utf-8"))
    assert payload["tests"][0]["short_code"] == "HGB"
    assert (archive / "docs" / "hemogram.pdf").exists()
    assert not (tmp_path / "inbox" / "hemogram.pdf").exists()
