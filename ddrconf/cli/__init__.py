# ddrconf/cli/__init__.py
# Command-line entry points.
#
#   ddrconfcmp  -> ddrconf.cli.run_compare:main
#   ddrconfdump -> ddrconf.cli.run_dump:main
#
# Hard failures are raised as RuntimeError("FAILURE_TYPE_ID: detail") and
# converted to an exit code by FailureHandler.
