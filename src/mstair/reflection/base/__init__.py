"""
package: mstair.reflection.base
"""

# <AUTOGEN_INIT>
from mstair.reflection.base import (
    config,
    env_helpers,
)


__all__ = [
    "config",
    "env_helpers",
]
# </AUTOGEN_INIT>
