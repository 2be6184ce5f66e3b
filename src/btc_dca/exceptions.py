# src/btc_dca/exceptions.py
"""Exceptions raised at the engine's input boundary."""


class InvalidInputError(ValueError):
    """
    Raised when a caller passes malformed simulation input
    (non-date start/end, unknown cadence, unusable purchase amount).

    Missing prices are not input errors; those schedule dates are skipped.
    """
    pass
