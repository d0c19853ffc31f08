from typing import Optional

from labreader.parsers.models import RiskLevel, RiskResult

NORMAL = RiskResult(level=RiskLevel.NORMAL, label="Normal", emoji="🟢")
OUT_OF_RANGE = RiskResult(level=RiskLevel.OUT_OF_RANGE, label="Hafif Düzeyde", emoji="🟡")


def direction(value: Optional[float], low: Optional[float], high: Optional[float]) -> Optional[str]:
    """Devuelve "below", "above" o None (en rango o sin datos)."""
    if value is None or low is None or high is None:
        return None
    if value < low:
        return "below"
    if value > high:
        return "above"
    return None


def classify(value: Optional[float], low: Optional[float], high: Optional[float]) -> RiskResult:
    # Sin rango -> Normal. Un solo nivel para cualquier desvio.
    # TODO: separar leve/severo cuando los reportes traigan limites criticos.
    return OUT_OF_RANGE if direction(value, low, high) else NORMAL
