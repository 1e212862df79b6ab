"""Checks that the package can be launched as a module and as a script."""

import importlib.util


def test_package_runs_as_module():
    """Should ship a __main__ module for ``python -m shop_api_tester``."""
    assert importlib.util.find_spec("shop_api_tester.__main__") is not None


def test_console_script_module_exists():
    """Should keep the module the console script points at."""
    assert importlib.util.find_spec("shop_api_tester.ui.main_window") is not None
