"""
Registro de vehículos disponibles para la planificación.

La clave de cada vehículo es su NOMBRE en minúsculas, de modo que
"Semi 13.6m", "semi 13.6M" o " SEMI 13.6m " resuelven al mismo preset.
"""

from typing import Dict, List, Type

from models.domain import VehicleVolume
from utils.config_helpers import extract_vehicle_volume
from vehicles.base import VehicleConfig
from vehicles.porteur import Porteur75TConfig, Porteur19TConfig
from vehicles.semi import SemiRemolqueConfig


_VEHICLE_REGISTRY: Dict[str, Type[VehicleConfig]] = {}


def _clave(nombre: str) -> str:
    return nombre.strip().lower()


def register_vehicle(config_class: Type[VehicleConfig]) -> Type[VehicleConfig]:
    """
    Registra un preset de vehículo bajo su NOMBRE.

    Se valida el volumen al registrar: un preset con dimensiones faltantes o
    no positivas levanta ValueError aquí y no al planificar.
    """
    nombre = getattr(config_class, "NOMBRE", None)
    if not nombre:
        raise ValueError(f"{config_class.__name__} sin NOMBRE")
    if not isinstance(getattr(config_class, "DIMENSIONES", None), dict):
        raise ValueError(f"Vehículo '{nombre}' sin DIMENSIONES")
    extract_vehicle_volume(config_class)

    _VEHICLE_REGISTRY[_clave(nombre)] = config_class
    return config_class


def get_vehicle_config(nombre: str) -> Type[VehicleConfig]:
    """Preset registrado por nombre (sin distinguir mayúsculas)"""
    config_class = _VEHICLE_REGISTRY.get(_clave(nombre))
    if config_class is None:
        raise ValueError(
            f"Vehículo desconocido: '{nombre}'. "
            f"Vehículos disponibles: {', '.join(list_vehicles())}"
        )
    return config_class


def get_vehicle_volume(nombre: str) -> VehicleVolume:
    """Volumen útil del preset, listo para planificar"""
    return extract_vehicle_volume(get_vehicle_config(nombre))


def list_vehicles() -> List[str]:
    """NOMBRE de cada vehículo registrado, en orden de registro"""
    return [cfg.NOMBRE for cfg in _VEHICLE_REGISTRY.values()]


for _preset in (Porteur75TConfig, Porteur19TConfig, SemiRemolqueConfig):
    register_vehicle(_preset)
