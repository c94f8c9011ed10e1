from __future__ import annotations

from src.office_workflow.office_workflow.common.logging_config import PACKAGE_LOGGER, build_logging_config
from src.office_workflow.office_workflow.database import mysql_base
from src.office_workflow.office_workflow.leave import service


def test_package_logger_entry_matches_module_loggers():
    config = build_logging_config("debug")

    assert config["loggers"][PACKAGE_LOGGER]["level"] == "DEBUG"
    assert service.logger.name.startswith(PACKAGE_LOGGER + ".")
    assert mysql_base.logger.name.startswith(PACKAGE_LOGGER + ".")
