"""
package: mstair.reflection
"""

# <AUTOGEN_INIT>
from mstair.reflection import (
    accessor,
    base,
    errors,
    lookup,
    members,
    overrides,
    xlogging,
)


__all__ = [
    "accessor",
    "base",
    "errors",
    "lookup",
    "members",
    "overrides",
    "xlogging",
]
# </AUTOGEN_INIT>

__version__ = "0.1.0"
