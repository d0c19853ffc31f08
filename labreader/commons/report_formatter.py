from typing import Optional, Sequence

from labreader.commons.meanings import resolve
from labreader.commons.risk import classify, direction
from labreader.parsers.models import ParsedTest

SUMMARY = (
    "\n🩺 Genel Değerlendirme ve Yol Haritası\n"
    "1. Sade Hasta Özeti:\n"
    "Sonuçlarınız genel bir değerlendirmeden geçirilmiştir. "
    "Referans dışı değerler varsa, ilgili testlerde belirtilmiştir.\n\n"
    "2. Önerilen Adımlar:\n"
    "- Bu raporu doktorunuzla paylaşın ve klinik bulgularla birlikte değerlendirin.\n"
    "- Gerekirse hekim ek testler planlayabilir veya yaşam tarzı önerilerinde bulunabilir.\n\n"
    "Bu analiz tıbbi bir tanı niteliği taşımaz ve yalnızca bilgilendirme amaçlıdır. "
    "Sağlığınızla ilgili tüm kararlar için mutlaka bir hekime danışmanız gerekmektedir."
)

IN_RANGE_LINE = "Değeriniz referans aralığı içinde."
OUT_OF_RANGE_LINE = (
    "Değeriniz referans aralığının {side}. "
    "Bu durumu doktorunuzla daha detaylı değerlendirmeniz önemlidir."
)
_SIDES = {"below": "altında", "above": "üstünde"}


def format_number(num: Optional[float]) -> str:
    # 13.0 -> "13", 10.5 -> "10.5"
    if num is None:
        return "-"
    num = float(num)
    if num.is_integer():
        return str(int(num))
    return repr(num)


def _result_line(t: ParsedTest) -> str:
    unit = f" {t.unit}" if t.unit else ""
    ref = f"{format_number(t.ref_low)} - {format_number(t.ref_high)}{unit}" if t.has_range else "-"
    return f"Sonuç: {format_number(t.value)}{unit} (Referans Aralığı: {ref})"


def _patient_line(t: ParsedTest) -> str:
    side = direction(t.value, t.ref_low, t.ref_high)
    if side is None:
        return IN_RANGE_LINE
    return OUT_OF_RANGE_LINE.format(side=_SIDES[side])


def format_section(t: ParsedTest) -> str:
    risk = classify(t.value, t.ref_low, t.ref_high)
    entry = resolve(t.name + (f" {t.short_code}" if t.short_code else ""))
    return (
        f"{t.display_name}\n"
        f"{_result_line(t)}\n"
        f"Risk Düzeyi: {risk.emoji} {risk.label}\n"
        "Bu Değer Ne Anlama Geliyor?\n"
        f"{entry.meaning}\n"
        "Sizin İçin Anlamı:\n"
        f"{_patient_line(t)}\n"
        "Basitçe Anlatmak Gerekirse:\n"
        f'"{entry.metaphor}"\n'
    )


def format_report(tests: Sequence[ParsedTest]) -> str:
    """Arma el informe para el paciente: una seccion por test y el resumen fijo al final."""
    sections = [format_section(t) for t in tests]
    return "\n".join(sections) + "\n" + SUMMARY
