"""
Forecast gating and expansion.

Modules
-------
advice       Immutable advice pools keyed by status.
eligibility  Eligibility gate, unavailable message and forecast mode.
expander     Compounding-decay multi-day expansion of a single prediction.
"""
