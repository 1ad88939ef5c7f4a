"""
Store Credit Gateway - Tiered Store-Credit Accrual & Redemption Service

A FastAPI-based microservice that accrues monthly rebate credits from paid
orders and computes how much of a customer's matured balance may be redeemed
at checkout.
"""

__version__ = "0.1.0"
