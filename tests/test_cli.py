# flake8: noqa

import fitz
from typer.testing import CliRunner

from run import app, load_cfg

runner = CliRunner()


def test_parse_command_prints_report(tmp_path):
    txt = tmp_path / "rapor.txt"
    txt.write_text("Hemoglobin (HGB): 10.5 g/dL (13.0-17.0 g/dL)\nAçıklama satırı\n", encoding="utf-8")
    result = runner.invoke(app, ["parse", str(txt), "--report"])
    assert result.exit_code == 0
    assert "Hemoglobin (HGB)" in result.output
    assert "Hafif Düzeyde" in result.output


def test_analyze_rejects_unsupported_document(tmp_path):
    doc = tmp_path / "notas.txt"
    doc.write_text("Glukoz: 95 mg/dL", encoding="utf-8")
    cfg = tmp_path / "settings.yaml"
    cfg.write_text(f"paths:\n  logs_root: {tmp_path / 'logs'}\n", encoding="utf-8")
    result = runner.invoke(app, ["analyze", str(doc), "--config", str(cfg)])
    assert result.exit_code == 1


def test_default_settings_file_loads():
    cfg = load_cfg()
    assert cfg.ocr.lang == "eng+tur"
    assert cfg.upload.max_size_bytes == 10 * 1024 * 1024
    assert "image/png" in cfg.upload.accepted_types
    assert cfg.ocr.pdf_ocr.value == "auto"
    assert cfg.ocr.pdf_dpi == 200


def test_analyze_pdf_without_text_layer_and_ocr_disabled(tmp_path):
    doc = fitz.open()
    doc.new_page()
    pdf = tmp_path / "taranmis.pdf"
    pdf.write_bytes(doc.tobytes())
    doc.close()
    cfg = tmp_path / "settings.yaml"
    cfg.write_text(f"paths:\n  logs_root: {tmp_path / 'logs'}\n", encoding="utf-8")

    result = runner.invoke(app, ["analyze", str(pdf), "--pdf-ocr", "never", "--config", str(cfg)])
    assert result.exit_code == 2
    assert "Metin çıkarılamadı" in result.output
