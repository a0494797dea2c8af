"""
Exchange Connectors Package

This package contains individual venue adapter modules.
Each exchange (Binance, OKX, Bybit) has its own subfolder with:
- api_client.py: REST API logic and raw payload models
- __init__.py: Venue adapter implementing VenueAdapter (symbol mapping, normalization)

The modular design allows adding new exchanges without modifying existing code.
"""
