# File: src/mstair/reflection/base/env_helpers.py

import logging
from pathlib import Path
from typing import IO, TypeAlias

import dotenv


__all__ = [
    "env_load_dotenv",
]

StrPath: TypeAlias = str | Path


def env_load_dotenv(
    *,
    logger: logging.Logger | None = None,
    dotenv_path: StrPath | None = None,
    stream: IO[str] | None = None,
    verbose: bool = False,
    override: bool = False,
) -> bool:
    """
    Load variables from a .env file into the process environment.

    Used before log levels are resolved so LOG_LEVEL* and
    MSTAIR_REFLECTION_OUTSIDE_TESTS can live in a project's .env file.
    Variables already set in the environment win unless `override` is True.

    :param logger: Logger for python-dotenv's own messages; supplying one enables verbose.
    :param dotenv_path: Path to the .env file; `find_dotenv()` is used when both this and `stream` are None.
    :param stream: Text stream with .env content, used if `dotenv_path` is None.
    :param verbose: Whether to warn when the .env file is missing.
    :param override: Whether .env values replace existing environment variables.
    :return: True if at least one environment variable is set else False
    """
    if logger is not None and bool(logger):
        dotenv.main.logger = logger
        verbose = True
    if dotenv_path is None and stream is None:
        dotenv_path = dotenv.find_dotenv(usecwd=True)
    return dotenv.load_dotenv(
        dotenv_path=dotenv_path,
        stream=stream,
        verbose=verbose,
        override=override,
    )


# End of file: src/mstair/reflection/base/env_helpers.py
