"""Command-line helpers used by :mod:`specrun.app`.

* :mod:`~specrun.commands.usage` -- profile, operation list and operation
  help screens.
* :mod:`~specrun.commands.form` -- interactive prompt for body values.
"""
