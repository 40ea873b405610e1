"""
Per-day log handling for the stress forecaster.

Modules
-------
reconciler  Merge raw entries into one DayRecord per calendar date.
gaps        Missed days between the latest log and today.
imputation  Nearby-average estimates for restoring a missed day.
restore     Restore prompts, per-date checks, request building and quota.
"""
