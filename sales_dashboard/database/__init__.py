"""
Database Module
"""
from .connection import init_database, close_database, get_db, get_db_dependency
from .models import Base, Sale, Customer, Country, Channel, Product, Time, Promotion

__all__ = [
    "init_database",
    "close_database",
    "get_db",
    "get_db_dependency",
    "Base",
    "Sale",
    "Customer",
    "Country",
    "Channel",
    "Product",
    "Time",
    "Promotion",
]
