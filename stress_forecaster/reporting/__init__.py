"""
CLI reporting.

Modules
-------
formatters  ASCII formatters for reconcile / missing-dates / impute / forecast output.
"""
