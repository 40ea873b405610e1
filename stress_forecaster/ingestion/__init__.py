"""
Backend payload parsing.

Modules
-------
payloads  Response envelope validation and conversion into domain models.
"""
