from __future__ import annotations

import logging

from frontdesk.utils.logger import configure_logging, get_logger


def test_get_logger_names_module_and_quiets_urllib3() -> None:
    logger = get_logger("frontdesk.services.auth_service")
    assert logger.name == "frontdesk.services.auth_service"
    assert logging.getLogger("urllib3").level == logging.WARNING


def test_configure_logging_is_idempotent() -> None:
    configure_logging()
    handlers = list(logging.getLogger().handlers)
    configure_logging("DEBUG")
    assert logging.getLogger().handlers == handlers
