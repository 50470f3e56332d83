"""CIRCULATION test suite.

Folder taxonomy
- unit/         : Fast checks of one module; in-memory adapters and fakes only.
- contract/     : Behaviour every store/unit-of-work backend must share
                  (memory, SQLite file, PostgreSQL), including concurrency.
- integration/  : Real databases: schema, migrations, SQL unit of work, wiring.
- e2e/          : The ``circulation`` command line through Click's CliRunner.
- fixtures/     : Shared pytest plugins (engines, data factories); no tests.

Markers ``unit``, ``contract``, ``integration`` and ``e2e`` are applied by the
``conftest.py`` of each folder.
"""
