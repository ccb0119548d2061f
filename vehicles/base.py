from abc import ABC
from typing import Dict

from models.enums import ModeloAltura, Orientacion, PoliticaSKU


class VehicleConfig(ABC):
    """Clase base para configuraciones de vehículos"""
    NOMBRE: str
    DIMENSIONES: Dict[str, float]  # metros: length, width, height

    # Configuración de planificación
    ORIENTACION: Orientacion = Orientacion.LONG
    POLITICA_SKU: PoliticaSKU = PoliticaSKU.PERMISIVA
    PERMITE_APILAMIENTO: bool = True
    MODELO_ALTURA: ModeloAltura = ModeloAltura.LINEAL
