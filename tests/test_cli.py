"""Tests for the command line interface."""

import json

import pytest

from resume_builder import cli
from resume_builder.domain.models import ResumeDocument


@pytest.fixture
def workdir(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def document_file(workdir, full_resume):
    path = workdir / "resume.json"
    path.write_text(full_resume.to_json(), encoding="utf-8")
    return path


class TestLocalCommands:
    def test_export(self, document_file, workdir, capsys):
        code = cli.main(["export", str(document_file), "--to", "pdf", "--format", "compact", "--out", "out"])
        assert code == 0
        assert (workdir / "out" / "Alex_Rivera_Resume.pdf").read_bytes().startswith(b"%PDF")
        assert "Exported" in capsys.readouterr().out

    def test_export_without_name_fails(self, workdir, capsys):
        path = workdir / "empty.json"
        path.write_text(ResumeDocument(summary="Engineer").to_json(), encoding="utf-8")
        assert cli.main(["export", str(path), "--to", "docx", "--out", "out"]) == 1
        assert "enter your name" in capsys.readouterr().out
        assert not (workdir / "out").exists()

    def test_text(self, document_file, capsys):
        assert cli.main(["text", str(document_file)]) == 0
        out = capsys.readouterr().out
        assert out.startswith("ALEX RIVERA\n")
        assert "PROJECTS" in out

    def test_score(self, document_file, workdir, capsys):
        jd = workdir / "jd.txt"
        jd.write_text("Python engineer with AWS and Kubernetes", encoding="utf-8")
        assert cli.main(["score", str(document_file), "--jd", str(jd)]) == 0
        assert "ATS Score:" in capsys.readouterr().out

    def test_validate_failure_exit_code(self, workdir, capsys):
        path = workdir / "blank.json"
        path.write_text("{}", encoding="utf-8")
        assert cli.main(["validate", str(path)]) == 1
        assert "FAIL" in capsys.readouterr().out

    def test_missing_file(self, workdir, capsys):
        assert cli.main(["text", str(workdir / "missing.json")]) == 1

    def test_malformed_document(self, workdir, capsys):
        path = workdir / "bad.json"
        path.write_text('{"experience": "nope"}', encoding="utf-8")
        assert cli.main(["validate", str(path)]) == 1

    def test_unknown_kind_is_rejected_by_parser(self, document_file):
        with pytest.raises(SystemExit):
            cli.main(["export", str(document_file), "--to", "odt"])


class TestServiceCommands:
    def test_optimize_writes_document(self, document_file, workdir, monkeypatch, fake_provider, ats_payload):
        provider = fake_provider({"optimizedSummary": "Sharper", "atsScore": ats_payload})
        monkeypatch.setattr(cli, "create_provider", lambda **kwargs: provider)

        out = workdir / "optimized.json"
        assert cli.main(["optimize", str(document_file), "--out", str(out)]) == 0
        assert json.loads(out.read_text(encoding="utf-8"))["summary"] == "Sharper"

    def test_import_prints_json(self, workdir, monkeypatch, fake_provider, capsys):
        provider = fake_provider(
            {"parsedResumeData": {"personalInfo": {"fullName": "Jane Doe"}}, "analysis": {"weaknesses": ["No metrics"]}}
        )
        monkeypatch.setattr(cli, "create_provider", lambda **kwargs: provider)
        resume = workdir / "resume.txt"
        resume.write_text("Jane Doe\nEngineer at Acme building billing systems since 2022.\n", encoding="utf-8")

        assert cli.main(["import", str(resume)]) == 0
        out = capsys.readouterr().out
        assert '"fullName": "Jane Doe"' in out
        assert "No metrics" in out

    def test_invalid_config_blocks_service_calls(self, document_file, workdir, capsys):
        config = workdir / "bad.yaml"
        config.write_text("provider: nope\n", encoding="utf-8")
        assert cli.main(["--config", str(config), "optimize", str(document_file)]) == 1
        assert "Unknown provider" in capsys.readouterr().out
