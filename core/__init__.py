"""
Core Package

Contains the exchange-agnostic core logic including:
- VenueAdapter: Abstract base class defining the contract for all venue adapters
- ExchangeManager: Ordered registry of the configured venue adapters
- Schemas: Pydantic models for normalized quotes, snapshots, opportunities and funding rates
- BaseAPIClient: Shared aiohttp plumbing with bounded timeouts

This layer ensures all exchanges follow the same interface, making the system modular and scalable.
"""
