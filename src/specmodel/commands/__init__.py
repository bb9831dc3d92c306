"""Built-in CLI sub-commands for specmodel.

* :mod:`~specmodel.commands.inspect` -- examine the resources, actions and
  bodies of a contract.
* :mod:`~specmodel.commands.validate` -- check request bodies against an
  action's declared bodies.

Each module exports a :class:`typer.Typer` sub-application registered on the
root app in :mod:`specmodel.app`.
"""
