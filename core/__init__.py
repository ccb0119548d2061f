# core/__init__.py
"""
Configuración central del sistema.
"""

from .config import get_vehicle_config, get_vehicle_volume, register_vehicle, list_vehicles

__all__ = [
    "get_vehicle_config",
    "get_vehicle_volume",
    "register_vehicle",
    "list_vehicles"
]
