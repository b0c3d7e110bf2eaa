"""Extension layer — asset-class plugins via pluggy.

Discovery: entry_points (pip-installed) in the ``iotcp.plugins`` group,
plus built-in asset classes enabled in config.
"""

from iotcp.plugins.hookspecs import hookimpl
from iotcp.plugins.manager import PluginManager

__all__ = ["PluginManager", "hookimpl"]
