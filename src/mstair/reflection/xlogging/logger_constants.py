# File: src/mstair/reflection/xlogging/logger_constants.py

import logging


K_KLASS_NAME = "klass_name"

TRACE = logging.DEBUG - 1  # (9) hierarchy-walk steps; LOG.trace() will not output at DEBUG level
SUPPRESS = -1  # Custom level for logs that will never be shown e.g., for internal use only


_logging_constants_initialized = False


def initialize_logger_constants():
    """Register the TRACE and SUPPRESS level names once per process."""
    global _logging_constants_initialized
    if _logging_constants_initialized:
        return
    _logging_constants_initialized = True
    for key, value in {
        "TRACE": TRACE,
        "SUPPRESS": SUPPRESS,
    }.items():
        if key not in logging.getLevelNamesMapping():
            logging.addLevelName(value, key)


# End of file: src/mstair/reflection/xlogging/logger_constants.py
