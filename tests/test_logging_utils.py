import logging

from shop_api_tester import logging_utils


def test_configure_logging_is_idempotent(monkeypatch):
    root = logging.getLogger()
    monkeypatch.setattr(logging_utils, "_configured", False)
    original_handlers = list(root.handlers)
    original_level = root.level
    try:
        logging_utils.configure_logging("INFO")
        logging_utils.configure_logging("DEBUG")

        added = [handler for handler in root.handlers if handler not in original_handlers]
        assert len(added) == 1
        assert root.level == logging.DEBUG
        assert logging.getLogger("urllib3").level == logging.WARNING
    finally:
        for handler in root.handlers[:]:
            if handler not in original_handlers:
                root.removeHandler(handler)
        root.setLevel(original_level)
