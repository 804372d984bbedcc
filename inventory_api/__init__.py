"""Inventory System API service.

Run with ``inventory-api`` or ``uvicorn --factory inventory_api.main:create_app``.
"""

__version__ = "1.0.0"
