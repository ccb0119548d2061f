from vehicles.base import VehicleConfig


class SemiRemolqueConfig(VehicleConfig):
    NOMBRE = "Semi 13.6m"

    DIMENSIONES = {'length': 13.6, 'width': 2.4, 'height': 2.7}
