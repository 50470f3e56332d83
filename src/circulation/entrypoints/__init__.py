"""Entry points (outer layer) for CIRCULATION.

Adapters that expose the application to the outside world; today that is the
command-line interface only. Entry points talk to `circulation.bootstrap` and
never reach into adapters or the service layer directly.
"""
