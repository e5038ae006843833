import functools
import importlib
import logging
import math
import pkgutil
from collections.abc import Callable


def setup_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=level,
        format='%(asctime)s %(levelname)-8s [%(name)s:%(funcName)s] : %(message)s',
    )


def parse_timeout(s: str) -> int:
    """
    Parse a timeout into milliseconds.

    Accepts "<number>ms", "<number>s" or a bare number of milliseconds.
    """
    s = s.strip().lower()
    if s.endswith("ms"):
        value = float(s[:-2])
    elif s.endswith("s"):
        value = float(s[:-1]) * 1000
    else:
        value = float(s)
    if not math.isfinite(value):
        raise ValueError(f"Timeout must be finite: '{s}'")
    return int(value)


def scan(package: str):
    """
    Decorator that triggers a component scan when the decorated function
    is called.
    """
    def decorator(func: Callable):

        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            # Execute the scan BEFORE calling the function
            py_package = importlib.import_module(package)

            for module_info in pkgutil.iter_modules(py_package.__path__):
                module_name = f"{package}.{module_info.name}"
                importlib.import_module(module_name)

            return func(*args, **kwargs)

        return wrapper

    return decorator
