"""Kraamweek: postpartum and newborn care log with threshold alerts and follow-up tasks.

Modules: config, models, storage, schemas, rules, analytics, filters, data_service.
"""

from .data_service import DataService, create_data_service

__all__ = ["DataService", "create_data_service"]
