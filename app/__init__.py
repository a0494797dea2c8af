"""
FastAPI Application Package

This package contains the FastAPI application exposing the arbitrage scanner's
query interface (arbitrage opportunities and funding rates) over HTTP.
"""
