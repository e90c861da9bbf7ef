"""
Factor Bugs - learn factor pairs by building bugs, bees, and slugs!
"""

from importlib.metadata import PackageNotFoundError, version
from typing import Any

try:
    __version__ = version("factorbugs")
except PackageNotFoundError:
    __version__ = "0+unknown"


def prompt_loop(prompt_text: str = "> ", *args: Any, **kwargs: Any) -> None:
    """Lazy proxy to prompt loop to avoid eager CLI-module import side effects."""
    from factorbugs.cli.main import prompt_loop as main_prompt_loop

    main_prompt_loop(prompt_text, *args, **kwargs)


__all__ = ["prompt_loop"]
