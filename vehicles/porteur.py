from vehicles.base import VehicleConfig


class Porteur75TConfig(VehicleConfig):
    NOMBRE = "7.5T"

    DIMENSIONES = {'length': 6.0, 'width': 2.4, 'height': 2.4}


class Porteur19TConfig(VehicleConfig):
    NOMBRE = "19T"

    DIMENSIONES = {'length': 8.0, 'width': 2.4, 'height': 2.6}
