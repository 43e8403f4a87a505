"""
Tests for the command-line interface.
"""

import asyncio
import json
import os
from pathlib import Path
from unittest.mock import patch

import pytest

from domain_resolver.cli import check_names, create_parser, main, read_names_file
from domain_resolver.config import create_default_config, load_config_from_file
from domain_resolver.engine import AvailabilityEngine
from domain_resolver.enums import ProviderName
from domain_resolver.exceptions import ValidationError

from fakes import AVAILABLE, ERROR, TAKEN, FakeProvider, FakeSleep, clean_env


def fake_engine(outcomes: dict, default: str = TAKEN):
    """Factory standing in for AvailabilityEngine with a scripted provider."""
    def factory(config, logger=None):
        provider = FakeProvider(ProviderName.RDAP, default=default, outcomes=outcomes)
        return AvailabilityEngine(config, providers=[provider], logger=logger, sleep=FakeSleep())
    return factory


class TestReadNamesFile:

    def test_skips_blank_lines_and_comments(self, tmp_path: Path) -> None:
        names_file = tmp_path / "names.txt"
        names_file.write_text("# ideas\nalpha\n\n  beta  \n   # later\ngamma.com\n", encoding="utf-8")
        assert read_names_file(names_file) == ["alpha", "beta", "gamma.com"]

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(ValidationError) as exc_info:
            read_names_file(tmp_path / "missing.txt")
        assert exc_info.value.code == "file_not_found"

    def test_file_without_names(self, tmp_path: Path) -> None:
        names_file = tmp_path / "names.txt"
        names_file.write_text("# nothing yet\n\n", encoding="utf-8")
        with pytest.raises(ValidationError) as exc_info:
            read_names_file(names_file)
        assert exc_info.value.code == "empty_input"


class TestCheckNames:

    def test_text_output(self, capsys) -> None:
        with patch("domain_resolver.cli.AvailabilityEngine", fake_engine({"free.com": AVAILABLE})):
            code = asyncio.run(check_names(["free", "Taken"], create_default_config()))

        out = capsys.readouterr().out
        assert code == 0
        assert "free.com: available [rdap]" in out
        assert "taken.com: taken [rdap]" in out
        assert "Summary: 1/2 name(s) available" in out

    def test_json_output(self, capsys) -> None:
        with patch("domain_resolver.cli.AvailabilityEngine", fake_engine({"free.com": AVAILABLE})):
            code = asyncio.run(check_names(["free", "taken"], create_default_config(), as_json=True))

        records = json.loads(capsys.readouterr().out)
        assert code == 0
        assert records == [
            {"domain": "free.com", "available": True, "error": None, "provider": "rdap"},
            {"domain": "taken.com", "available": False, "error": None, "provider": "rdap"},
        ]

    def test_nothing_available_exits_one(self, capsys) -> None:
        with patch("domain_resolver.cli.AvailabilityEngine", fake_engine({})):
            code = asyncio.run(check_names(["taken"], create_default_config()))
        assert code == 1

    def test_failures_are_reported(self, capsys) -> None:
        with patch("domain_resolver.cli.AvailabilityEngine", fake_engine({}, default=ERROR)):
            asyncio.run(check_names(["broken"], create_default_config()))
        assert "broken.com: unknown (All availability checking services failed)" in capsys.readouterr().out

    def test_blank_names_only(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            asyncio.run(check_names(["", "   "], create_default_config()))
        assert exc_info.value.code == "empty_input"

    def test_output_file(self, tmp_path: Path, capsys) -> None:
        output_file = tmp_path / "out" / "results.json"
        with patch("domain_resolver.cli.AvailabilityEngine", fake_engine({"free.com": AVAILABLE})):
            asyncio.run(check_names(["free"], create_default_config(), output_file=output_file))

        records = json.loads(output_file.read_text(encoding="utf-8"))
        assert records[0]["domain"] == "free.com"
        assert records[0]["available"] is True


class TestConfigCommand:

    def test_init_show_validate(self, tmp_path: Path, capsys) -> None:
        config_path = tmp_path / "config.json"

        assert main(["config", "init", "--path", str(config_path)]) == 0
        with patch.dict(os.environ, clean_env(), clear=True):
            assert load_config_from_file(config_path) == create_default_config()

        assert main(["config", "show", "--path", str(config_path)]) == 0
        out = capsys.readouterr().out
        assert "rdap: enabled, 1000 per 3600s" in out
        assert "whoisxml: enabled, 50 per 86400s" in out

        assert main(["config", "validate", "--path", str(config_path)]) == 0

    def test_init_refuses_to_overwrite(self, tmp_path: Path) -> None:
        config_path = tmp_path / "config.json"
        config_path.write_text("{}", encoding="utf-8")

        assert main(["config", "init", "--path", str(config_path)]) == 1
        assert config_path.read_text(encoding="utf-8") == "{}"
        assert main(["config", "init", "--path", str(config_path), "--force"]) == 0

    def test_show_missing(self, tmp_path: Path) -> None:
        assert main(["config", "show", "--path", str(tmp_path / "missing.json")]) == 1

    def test_invalid_config_exits_two(self, tmp_path: Path, capsys) -> None:
        config_path = tmp_path / "config.json"
        config_path.write_text(json.dumps({"batch": {"batch_size": 0}}), encoding="utf-8")

        assert main(["config", "validate", "--path", str(config_path)]) == 2
        assert "Error:" in capsys.readouterr().err


class TestMain:

    def test_no_command_prints_help(self, capsys) -> None:
        assert main([]) == 0
        assert "domain-resolver" in capsys.readouterr().out

    def test_missing_config_file_exits_two(self, tmp_path: Path, capsys) -> None:
        code = main(["check", "example", "--config", str(tmp_path / "missing.json")])
        assert code == 2
        assert "Could not load config" in capsys.readouterr().err

    def test_missing_names_file_exits_two(self, tmp_path: Path) -> None:
        assert main(["check-list", str(tmp_path / "missing.txt")]) == 2

    def test_check_uses_environment_config(self, tmp_path: Path, capsys) -> None:
        env_file = tmp_path / ".env"
        env_file.write_text("RESOLVER_EXTENSION=io\n", encoding="utf-8")

        with patch.dict(os.environ, clean_env(), clear=True):
            with patch("domain_resolver.cli.AvailabilityEngine", fake_engine({"launch.io": AVAILABLE})):
                code = main(["check", "launch", "--env-file", str(env_file), "--json"])

        assert code == 0
        records = json.loads(capsys.readouterr().out)
        assert records == [{"domain": "launch.io", "available": True, "error": None, "provider": "rdap"}]

    def test_blank_names_exit_two(self, tmp_path: Path, capsys) -> None:
        env_file = tmp_path / ".env"
        env_file.write_text("", encoding="utf-8")
        with patch.dict(os.environ, clean_env(), clear=True):
            code = main(["check", "  ", "--env-file", str(env_file)])
        assert code == 2
        assert "No names given" in capsys.readouterr().err

    def test_unknown_log_format_exits_two(self, tmp_path: Path, capsys) -> None:
        env_file = tmp_path / ".env"
        env_file.write_text("LOG_FORMAT=xml\n", encoding="utf-8")
        with patch.dict(os.environ, clean_env(), clear=True):
            code = main(["check", "example", "--verbose", "--env-file", str(env_file)])
        assert code == 2
        assert "Unknown log format" in capsys.readouterr().err

    def test_verbose_uses_configured_level(self, tmp_path: Path, capsys) -> None:
        env_file = tmp_path / ".env"
        env_file.write_text("LOG_LEVEL=debug\n", encoding="utf-8")
        with patch.dict(os.environ, clean_env(), clear=True):
            with patch("domain_resolver.cli.AvailabilityEngine", fake_engine({})):
                main(["check", "example", "--verbose", "--env-file", str(env_file)])
        assert "Resolving group 1/1" in capsys.readouterr().err

    def test_verbose_hides_debug_by_default(self, tmp_path: Path, capsys) -> None:
        env_file = tmp_path / ".env"
        env_file.write_text("", encoding="utf-8")
        with patch.dict(os.environ, clean_env(), clear=True):
            with patch("domain_resolver.cli.AvailabilityEngine", fake_engine({})):
                main(["check", "example", "--verbose", "--env-file", str(env_file)])
        err = capsys.readouterr().err
        assert "Engine ready" in err
        assert "Resolving group" not in err

    def test_parser(self) -> None:
        args = create_parser().parse_args(["check-list", "names.txt", "-o", "out.json", "-v"])
        assert args.file == "names.txt"
        assert args.output == "out.json"
        assert args.verbose is True
        assert args.json is False
