"""
FastAPI Application Package

This package contains the FastAPI application exposing LATOKEN market data
over REST, normalized to the canonical schemas.
"""
