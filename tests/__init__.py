"""PODIUM test suite.

Folder taxonomy
- unit/         : Isolated, fast checks of a single module/class/function.
- contract/     : Behavior every adapter of a port must share (in-memory, SQLite, Postgres).
- integration/  : Real databases, migrations and the bootstrap wiring.
- e2e/          : The ``podium`` command line, driven through click's CliRunner.
- fixtures/     : pytest plugins shared by every layer (engines, data builders).
- helpers/      : Shared utilities (no tests here).

General guidance
- Keep unit tests fast and deterministic; the in-memory unit of work with a
  fixed clock and sequential ids stands in for the database.
- Contract tests parametrize over adapters; Postgres cases skip without Docker.
- Default markers are added per folder by each folder's conftest.
"""
