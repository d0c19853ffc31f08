from typing import Callable, List, Tuple

from labreader.parsers.models import MeaningEntry

Matcher = Callable[[str], bool]


def contains_any(*tokens: str) -> Matcher:
    return lambda key: any(t in key for t in tokens)


HEMOGLOBIN = MeaningEntry(
    meaning="Hemoglobin, kanın oksijen taşımasına yardım eden temel proteindir.",
    metaphor="Hemoglobin, şehrinize oksijen paketleri taşıyan kargo kamyonlarıdır.",
)

WHITE_CELLS = MeaningEntry(
    meaning="Beyaz kan hücreleri, vücudu mikroplara karşı savunan hücrelerdir.",
    metaphor="Beyaz kan hücreleri, kaleyi koruyan nöbetçi askerlerdir.",
)

GENERIC = MeaningEntry(
    meaning="Bu test, vücudunuzdaki belirli bir işlevi veya dengeyi gösterir.",
    metaphor="Bu değer, vücudunuzun kontrol panelindeki bir gösterge gibidir.",
)

# Orden = prioridad; gana la primera coincidencia.
MEANING_RULES: List[Tuple[Matcher, MeaningEntry]] = [
    (contains_any("hemoglobin", "hgb"), HEMOGLOBIN),
    (contains_any("wbc", "beyaz"), WHITE_CELLS),
]


def resolve(name: str) -> MeaningEntry:
    """Explicacion y metafora para un test (nombre + codigo corto)."""
    key = (name or "").lower()
    for matches, entry in MEANING_RULES:
        if matches(key):
            return entry
    return GENERIC
