"""Financial reconciliation and time-accounting engine.

Turns raw time entries, cost items and finance settings into budget
consumption, commission, time series and ledger figures for task and
project finance views.
"""

__version__ = "1.0.0"
