from typing import List

from labreader.commons.logger import logger

from .base import _split_lines, match_lab_line
from .models import ParsedTest


def parse_lab_text(raw_text: str) -> List[ParsedTest]:
    """
    Convierte texto OCR/PDF en registros de laboratorio.
    Las lineas que no coinciden se descartan sin error; se respeta el orden.
    """
    lines = _split_lines(raw_text)
    tests: List[ParsedTest] = []
    for line in lines:
        parsed = match_lab_line(line)
        if parsed is not None:
            tests.append(parsed)
    logger.debug(f"parse_lab_text: {len(tests)}/{len(lines)} lineas reconocidas")
    return tests
