import asyncio
import time
from concurrent.futures import Future
from pathlib import Path
from typing import Awaitable, Callable

from watchdog.events import PatternMatchingEventHandler
from watchdog.observers import Observer

from labreader.commons.logger import logger

OnDocument = Callable[[bytes, str], Awaitable[None]]


def read_when_stable(path: Path, attempts: int = 10, delay: float = 0.1) -> bytes:
    """
    Lee el archivo cuando su tamano deja de cambiar (escaneres/copias lentas).
    Levanta FileNotFoundError si el archivo desaparece.
    """
    last_size = -1
    for _ in range(attempts):
        size = path.stat().st_size
        if size == last_size and size > 0:
            break
        last_size = size
        time.sleep(delay)
    return path.read_bytes()


def log_if_failed(future: Future):
    """Callback del future: un error al archivar no debe perderse en el hilo del watcher."""
    if future.cancelled():
        return
    ex = future.exception()
    if ex is not None:
        logger.opt(exception=ex).error(f"Fallo procesando documento del inbox: {ex}")


class DocumentWatcher:
    """Vigila la carpeta de entrada y entrega cada documento nuevo al loop principal."""

    def __init__(self, inbox: str, glob: str, on_document: OnDocument, loop: asyncio.AbstractEventLoop):
        self.inbox = Path(inbox)
        self.inbox.mkdir(parents=True, exist_ok=True)
        self.loop = loop
        self.on_document = on_document
        self.handler = PatternMatchingEventHandler(patterns=[glob], ignore_directories=True)

        def _submit(path: Path):
            # al mover a archive/ o error/ tambien llega un evento "moved"
            if path.parent.resolve() != self.inbox.resolve():
                return
            try:
                data = read_when_stable(path)
            except FileNotFoundError:
                # ya fue movido a archive/ o error/
                return
            fut = asyncio.run_coroutine_threadsafe(self.on_document(data, str(path)), self.loop)
            fut.add_done_callback(log_if_failed)

        # modified se omite: un PDF grande dispara varios eventos mientras se copia
        self.handler.on_created = lambda e: _submit(Path(e.src_path))
        self.handler.on_moved = lambda e: _submit(Path(e.dest_path))

        self.observer = Observer()

    def start(self):
        self.observer.schedule(self.handler, str(self.inbox), recursive=False)
        self.observer.start()

    def stop(self):
        self.observer.stop()
        self.observer.join()
