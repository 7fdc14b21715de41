"""
Document store layer.

SQLite JSON documents for local development and MongoDB for deployed
modes, both exposing the same find/insert/update/count contract.
"""
