"""Tests for the command-line interface."""

from unittest.mock import Mock, patch

import pytest

from sentimeter import cli
from sentimeter.core.models import ExecutionStatus, ProgressEvent, RunSummary
from sentimeter.utils.data_prep import read_report


def robot_args(**overrides):
    args = cli.build_parser().parse_args(["robot", "in.txt", "out.csv", "--provider", "Chatterbox"])
    for name, value in overrides.items():
        setattr(args, name, value)
    return args


class TestParser:

    def test_robot_arguments(self):
        args = cli.build_parser().parse_args([
            "--debug", "robot", "in.txt", "out.csv", "--provider", "Alchemy", "--provider", "Bitext",
            "--language", "Spanish", "--cut-by", "120", "--format", "xml", "--benchmark", "Alchemy",
        ])
        assert args.debug
        assert args.provider == ["Alchemy", "Bitext"]
        assert (args.language, args.cut_by, args.format, args.benchmark) == ("Spanish", 120, "xml", "Alchemy")

    def test_human_arguments(self):
        args = cli.build_parser().parse_args(["human", "submit", "in.txt", "out.csv", "--settings", "m.yaml"])
        assert (args.phase, args.source, args.output, args.settings) == ("submit", "in.txt", "out.csv", "m.yaml")
        args = cli.build_parser().parse_args(["human", "collect", "out.csv"])
        assert (args.phase, args.report) == ("collect", "out.csv")

    def test_unknown_provider_rejected(self):
        with pytest.raises(SystemExit):
            cli.build_parser().parse_args(["robot", "in.txt", "out.csv", "--provider", "Watson"])


class TestValidation:

    @patch("sentimeter.cli.credentials_for", return_value=("key", ""))
    def test_valid(self, _):
        assert cli.validate_robot(robot_args()) == []

    def test_no_provider(self):
        errors = cli.validate_robot(robot_args(provider=None))
        assert errors == ["You need to select at least one service to process your data!"]

    @patch("sentimeter.cli.credentials_for", return_value=("key", ""))
    def test_cut_by(self, _):
        errors = cli.validate_robot(robot_args(cut_by=5))
        assert errors == ["Text cutting threshold should be at least 10 characters."]

    @patch("sentimeter.cli.credentials_for", return_value=("", ""))
    def test_missing_key(self, _):
        assert cli.validate_robot(robot_args()) == ["Chatterbox API Key is missing."]

    @patch("sentimeter.cli.credentials_for", return_value=("user", ""))
    def test_missing_secret(self, _):
        errors = cli.validate_robot(robot_args(provider=["Bitext"]))
        assert errors == ["Bitext Login or Password is missing."]

    @patch("sentimeter.cli.credentials_for", return_value=("key", "secret"))
    def test_unsupported_language(self, _):
        errors = cli.validate_robot(robot_args(provider=["Viralheat"], language="French"))
        assert errors == [
            "Viralheat doesn't support French language. Please remove Viralheat or select another language."
        ]

    @patch("sentimeter.cli.credentials_for", return_value=("key", ""))
    def test_benchmark_must_be_selected(self, _):
        errors = cli.validate_robot(robot_args(benchmark="Alchemy"))
        assert len(errors) == 1
        assert "Alchemy" in errors[0]


class TestCommands:

    def test_robot_run_writes_report(self, tmp_path):
        source = tmp_path / "in.txt"
        source.write_text("great stuff\nterrible stuff\n", encoding="utf-8")
        output = tmp_path / "out.csv"
        args = robot_args(source=str(source), output=str(output), provider=["Chatterbox", "Viralheat"],
                          benchmark="Viralheat")

        def fake_executor(name):
            executor = Mock()
            executor.is_language_supported.return_value = True

            def execute(context):
                for result in context.results.values():
                    result.add_output(name, 0.9, "positive" if name == "Viralheat" else "negative")
                context.emit(name, ProgressEvent(ExecutionStatus.SUCCESS, context.total, context.total))
                return RunSummary(name, context, context.total, context.total, 0)

            executor.execute.side_effect = execute
            return executor

        with patch("sentimeter.cli.credentials_for", return_value=("key", "")), \
                patch("sentimeter.cli.create_executor", side_effect=fake_executor):
            assert cli.cmd_robot(args) == 0

        lines = output.read_text(encoding="utf-8").splitlines()
        assert lines[0] == ("Document ID,Chatterbox Polarity,Chatterbox Sentiment Score,Chatterbox Agreement,"
                            "Viralheat Polarity,Viralheat Probability Score,Source text")
        assert lines[1].endswith(',negative,0.90,disagrees,positive,0.90,"great stuff"')

    def test_robot_validation_failure(self, capsys):
        assert cli.cmd_robot(robot_args(provider=None)) == 2
        assert "at least one service" in capsys.readouterr().out

    def test_human_submit_then_collect(self, tmp_path):
        source = tmp_path / "in.txt"
        source.write_text("lovely\n", encoding="utf-8")
        report = tmp_path / "hits.csv"
        parser = cli.build_parser()

        def submit(context):
            for number, result in enumerate(context.results.values(), start=1):
                result.add_output("MechanicalTurk", 3, f"HIT{number}")
            return RunSummary("MechanicalTurk", context, 1, 1, 0)

        def collect(context):
            for result in context.results.values():
                result.add_output("MechanicalTurk", float("nan"), "positive", 1.0)
            return RunSummary("MechanicalTurk", context, 1, 1, 0)

        with patch("sentimeter.cli.credentials_for", return_value=("AKIA", "secret")), \
                patch("sentimeter.cli.MechanicalTurkClient") as client_class:
            client_class.return_value.execute.side_effect = submit
            client_class.return_value.collect.side_effect = collect

            assert cli.cmd_human_submit(parser.parse_args(["human", "submit", str(source), str(report)])) == 0
            assert read_report(str(report)).popitem()[1].get_polarity("MechanicalTurk") == "HIT1"

            assert cli.cmd_human_collect(parser.parse_args(["human", "collect", str(report)])) == 0

        assert read_report(str(report)).popitem()[1].get_polarity("MechanicalTurk") == "positive"

    def test_human_submit_aborted(self, tmp_path, capsys):
        source = tmp_path / "in.txt"
        source.write_text("lovely\n", encoding="utf-8")
        args = cli.build_parser().parse_args(["human", "submit", str(source), str(tmp_path / "o.csv")])

        with patch("sentimeter.cli.credentials_for", return_value=("AKIA", "secret")), \
                patch("sentimeter.cli.MechanicalTurkClient") as client_class:
            client_class.return_value.execute.return_value = RunSummary(
                "MechanicalTurk", None, 1, 0, 0, aborted=True, reason="no funds"
            )
            assert cli.cmd_human_submit(args) == 1

        assert "no funds" in capsys.readouterr().out
        assert not (tmp_path / "o.csv").exists()

    def test_main_without_command_prints_help(self, capsys):
        cli.main([])
        assert "usage" in capsys.readouterr().out

    def test_main_exits_on_error(self):
        with patch("sentimeter.cli.cmd_robot", side_effect=RuntimeError("boom")):
            with pytest.raises(SystemExit) as excinfo:
                cli.main(["robot", "in.txt", "out.csv"])
        assert excinfo.value.code == 1


def test_print_progress(capsys):
    assert cli.print_progress("Alchemy", ProgressEvent(ExecutionStatus.PROCESSED, 4, 1)) is False
    assert "Alchemy: 25%" in capsys.readouterr().out
