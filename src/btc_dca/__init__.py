"""
btc_dca: recurring-purchase (DCA) simulation and lexical news sentiment
for a single asset priced in fiat.
"""

__version__ = "1.0.0"
