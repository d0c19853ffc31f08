import re
from typing import List, Optional

from .models import ParsedTest

# solo digitos ASCII: "١٢" no es un valor
_NUM = r"[0-9.,]+"
_UNIT = r"[a-zA-Z%/^\-]+"

# El patron retrocede en tiempo cubico con corridas largas de espacios;
# una linea de resultado real nunca se acerca a este largo.
MAX_LINE_LENGTH = 200

# nombre [ (CODIGO) ] sep valor [unidad] [ (min - max [unidad]) ]
LAB_LINE_RE = re.compile(
    r"^(?P<name>.*?)"
    r"(?:\s*\((?P<short>[A-Za-z0-9.\-]+)\))?"
    r"\s*[:\-\t ]+"
    rf"(?P<value>{_NUM})"
    rf"\s*(?P<unit>{_UNIT})?"
    rf"\s*(?:\(\s*(?P<low>{_NUM})\s*[-–]\s*(?P<high>{_NUM})\s*(?P<ref_unit>{_UNIT})?\s*\))?$"
)


def _split_lines(raw_text: str) -> List[str]:
    """Lineas recortadas y no vacias, en el orden del texto."""
    lines = (line.strip() for line in re.split(r"\r\n|\n|\r", raw_text or ""))
    return [line for line in lines if line]


def _to_number(raw: Optional[str]) -> Optional[float]:
    if not raw:
        return None
    try:
        return float(raw.replace(",", "."))
    except ValueError:
        # "1.2.3", "." y similares
        return None


def match_lab_line(line: str) -> Optional[ParsedTest]:
    """Convierte una linea del reporte en ParsedTest, o None si no parece un resultado."""
    if len(line) > MAX_LINE_LENGTH:
        return None
    m = LAB_LINE_RE.match(line)
    if not m:
        return None
    name = m.group("name").strip()
    if not name:
        return None
    return ParsedTest(
        name=name,
        short_code=m.group("short"),
        value=_to_number(m.group("value")),
        unit=m.group("unit"),
        ref_low=_to_number(m.group("low")),
        ref_high=_to_number(m.group("high")),
    )
