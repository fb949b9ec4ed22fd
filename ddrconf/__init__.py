# ddrconf/__init__.py
# DDR register-configuration comparison tool.
#
# Packages:
#   ddrconf.engine  -- register-array comparison engine (no I/O).
#   ddrconf.tables  -- TimingConfig model, table loader, dump writer.
#   ddrconf.report  -- section checker, report data models, renderer.
#   ddrconf.cli     -- ddrconfcmp / ddrconfdump entry points and failure policy.

from ddrconf.tool_version import TOOL_VERSION

__version__ = TOOL_VERSION
