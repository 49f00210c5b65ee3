"""
Transaction Processor

Applies deposits, withdrawals, disputes, resolutions and chargebacks to
client accounts using exact fixed-point arithmetic and reports the
resulting balances.
"""

__version__ = "1.0.0"
