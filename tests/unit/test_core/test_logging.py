"""Unit tests for logging configuration."""

from pathlib import Path

from loguru import logger

from meta_depot.core.logging import setup_logging


class TestLogging:
    """Tests for Loguru logging setup."""

    def test_setup_logging_does_not_raise(self) -> None:
        """setup_logging with valid log level does not raise."""
        setup_logging("DEBUG")
        setup_logging("INFO")
        setup_logging("WARNING")

    def test_setup_logging_case_insensitive(self) -> None:
        """setup_logging accepts case-insensitive log levels."""
        setup_logging("info")
        setup_logging("debug", serialize=True)

    def test_log_dir_creates_log_file(self, tmp_path: Path) -> None:
        """A log file is written into log_dir when it is set."""
        log_dir = tmp_path / "logs"
        setup_logging("INFO", log_dir=str(log_dir))
        logger.info("hello depot")
        # Reconfiguring removes and closes the file sink
        setup_logging("INFO")

        log_file = log_dir / "meta-depot.log"
        assert log_file.exists()
        assert "hello depot" in log_file.read_text()
