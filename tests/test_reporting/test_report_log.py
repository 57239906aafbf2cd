"""Tests for ReportLog."""

from pathlib import Path

from portfolio_bot.reporting.report_log import ReportLog


class TestReportLog:
    def test_appends_lines(self, tmp_path: Path) -> None:
        path = tmp_path / "logs" / "report.log"
        report_log = ReportLog(path)

        report_log.log(["AVAX: 10 x $80.00 = $800.00", "Total: $800.00"])
        report_log.log("Portfolio tracker script completed successfully")

        assert path.read_text(encoding="utf-8").splitlines() == [
            "AVAX: 10 x $80.00 = $800.00",
            "Total: $800.00",
            "Portfolio tracker script completed successfully",
        ]

    def test_keeps_existing_content(self, tmp_path: Path) -> None:
        path = tmp_path / "report.log"
        path.write_text("previous run\n", encoding="utf-8")
        ReportLog(path).log("this run")
        assert path.read_text(encoding="utf-8") == "previous run\nthis run\n"

    def test_console_only_without_path(self) -> None:
        report_log = ReportLog()
        assert report_log.path is None
        report_log.log("only on the console")

    def test_write_failure_is_not_raised(self, tmp_path: Path) -> None:
        blocker = tmp_path / "not-a-dir"
        blocker.write_text("", encoding="utf-8")
        ReportLog(blocker / "report.log").log("lost line")
