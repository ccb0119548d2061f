# utils/config_helpers.py
"""Helpers para extraer información de configuraciones de vehículo"""

from typing import Any

from models.domain import PlanningOptions, VehicleVolume
from models.enums import ModeloAltura, Orientacion, PoliticaSKU
from services.constants import FACTOR_PESO_APILAMIENTO


def extract_vehicle_volume(vehicle_config) -> VehicleVolume:
    """
    Extrae el volumen útil desde la configuración del vehículo.

    Returns:
        VehicleVolume con las dimensiones en metros
    """
    return VehicleVolume.from_config(
        vehicle_config.DIMENSIONES,
        name=getattr(vehicle_config, "NOMBRE", None)
    )


def build_planning_options(vehicle_config=None, **overrides: Any) -> PlanningOptions:
    """
    Construye las opciones de planificación.

    Args:
        vehicle_config: Configuración del vehículo (None → valores por defecto)
        overrides: Valores que reemplazan los del vehículo (None se ignora)

    Returns:
        PlanningOptions
    """
    opciones = {
        "orientacion": getattr(vehicle_config, "ORIENTACION", Orientacion.LONG),
        "politica_sku": getattr(vehicle_config, "POLITICA_SKU", PoliticaSKU.PERMISIVA),
        "modelo_altura": getattr(vehicle_config, "MODELO_ALTURA", ModeloAltura.LINEAL),
        "permitir_apilamiento": getattr(vehicle_config, "PERMITE_APILAMIENTO", True),
        "factor_peso": FACTOR_PESO_APILAMIENTO,
        "omitir_desconocidos": False,
    }

    for clave, valor in overrides.items():
        if clave not in opciones:
            raise ValueError(f"Opción de planificación desconocida: '{clave}'")
        if valor is not None:
            opciones[clave] = valor

    return PlanningOptions(
        orientacion=Orientacion(opciones["orientacion"]),
        politica_sku=PoliticaSKU(opciones["politica_sku"]),
        modelo_altura=ModeloAltura(opciones["modelo_altura"]),
        permitir_apilamiento=bool(opciones["permitir_apilamiento"]),
        factor_peso=float(opciones["factor_peso"]),
        omitir_desconocidos=bool(opciones["omitir_desconocidos"]),
    )
