"""Work-log analytics package.

Organized by feature modules (periods, scopes, worklogs, analytics, exports, ...)
with a thin Flask controller layer over service/repository layers.
"""
