# purchases/apps.py

"""
PURCHASES APP CONFIG

Fuel suppliers, deliveries bought on cash/credit, and FIFO settlement of
the amount owed.
"""

from django.apps import AppConfig


class PurchasesConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "purchases"
    verbose_name = "Fuel Purchases"
