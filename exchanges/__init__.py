"""
Exchange Connectors Package

Each exchange has its own subpackage with:
- api_client.py: REST transport logic
- __init__.py: Main exchange class implementing ExchangeInterface
- any exchange-specific signing, parsing and error mapping modules

Currently available:
- latoken: LATOKEN spot REST API (v2)
"""
