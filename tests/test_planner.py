"""
Tests de integración del planificador (flujo completo y API de diccionarios).
"""

import pytest

from models.domain import CatalogEntry, ListingRow, PlanningOptions, VehicleVolume
from models.enums import PoliticaSKU
from models.exceptions import UnknownSKUError
from services.catalog import CatalogIndex
from services.planner import planificar_carga, planificar_en_paralelo, procesar


CATALOGO_RAW = [
    {"sku": "A", "qty_per_pallet": 100, "weight_gross": 200,
     "length": 1.2, "width": 0.8, "height": 1.4,
     "stackable": True, "max_stack_weight": 400},
    {"sku": "B", "qty_per_pallet": 50, "weight_gross": 150,
     "length": 1.2, "width": 0.8, "height": 1.2,
     "stackable": True, "max_stack_weight": 600},
]

LISTADO_RAW = [
    {"sscc": "P1", "sku": "A", "quantity": 100},
    {"sscc": "P2", "sku": "A", "quantity": 50},
    {"sscc": "P3", "sku": "A", "quantity": 50},
]

SEMI = VehicleVolume(13.6, 2.4, 2.6, name="Semi")


def _catalogo():
    return CatalogIndex.from_records(CATALOGO_RAW)


class TestPlanificarCarga:

    def test_escenario_basico(self):
        resultado = planificar_carga(_catalogo(), LISTADO_RAW, SEMI)

        assert len(resultado.pallets) == 3
        assert len(resultado.unidades) == 2
        assert resultado.ubicacion.all_placed
        assert resultado.estadisticas.total_pallets == 3
        assert resultado.estadisticas.total_weight == pytest.approx(400.0)
        assert resultado.plan_valido
        assert resultado.fases_ejecutadas == [
            "reconstruccion", "apilamiento", "ubicacion", "estadisticas", "validacion"
        ]
        assert set(resultado.validaciones) == {"catalogo", "listado", "apilamiento", "ubicacion"}
        assert "VALIDACIÓN EXITOSA" in resultado.reporte

    def test_acepta_listing_rows(self):
        filas = [ListingRow(**r) for r in LISTADO_RAW]

        resultado = planificar_carga(_catalogo(), filas, SEMI)

        assert [p.sscc for p in resultado.pallets] == ["P1", "P2", "P3"]

    def test_sku_desconocido_aborta(self):
        listado = LISTADO_RAW + [{"sscc": "P9", "sku": "Z", "quantity": 5}]

        with pytest.raises(UnknownSKUError):
            planificar_carga(_catalogo(), listado, SEMI)

    def test_sku_desconocido_omitido(self):
        listado = LISTADO_RAW + [{"sscc": "P9", "sku": "Z", "quantity": 5}]

        resultado = planificar_carga(
            _catalogo(), listado, SEMI, PlanningOptions(omitir_desconocidos=True)
        )

        assert len(resultado.pallets) == 3
        assert resultado.errores == ["Fila 4 omitida: SKU Z no encontrado en el catálogo (pallet P9)"]
        # La fila omitida se sigue reportando en la validación del listado
        assert not resultado.validaciones["listado"].valid
        assert not resultado.plan_valido

    def test_skus_mezclados_segun_politica(self):
        listado = [
            {"sscc": "P1", "sku": "A", "quantity": 50},
            {"sscc": "P2", "sku": "B", "quantity": 20},
        ]

        permisivo = planificar_carga(_catalogo(), listado, SEMI)
        mismo_sku = planificar_carga(
            _catalogo(), listado, SEMI, PlanningOptions(politica_sku=PoliticaSKU.MISMO_SKU)
        )

        assert len(permisivo.unidades) == 1
        assert not permisivo.validaciones["apilamiento"].valid
        assert not permisivo.plan_valido

        assert len(mismo_sku.unidades) == 2
        assert mismo_sku.plan_valido

    def test_unidades_fuera_invalidan_el_plan(self):
        chico = VehicleVolume(1.2, 0.8, 2.6)

        resultado = planificar_carga(_catalogo(), LISTADO_RAW, chico)

        assert resultado.total_fuera == 1
        assert resultado.estadisticas.total_units == 1
        assert not resultado.validaciones["ubicacion"].valid
        assert not resultado.plan_valido
        assert "4. UBICACIÓN EN VEHÍCULO" in resultado.reporte


class TestProcesar:

    def test_con_vehiculo_registrado(self):
        salida = procesar({"catalog": CATALOGO_RAW, "listing": LISTADO_RAW}, vehicle_name="19T")

        assert "error" not in salida
        assert salida["vehicle"]["name"] == "19T"
        assert salida["vehicle"]["length"] == 8.0
        assert len(salida["unidades"]) == 2
        assert salida["estadisticas"]["total_pallets"] == 3
        assert salida["validaciones"]["apilamiento"]["valid"] is True
        assert salida["opciones"]["politica_sku"] == "permisiva"

    def test_con_dimensiones_y_overrides(self):
        payload = {
            "catalog": CATALOGO_RAW,
            "listing": LISTADO_RAW,
            "vehicle": {"length": 13.6, "width": 2.4, "height": 2.6},
            "permitir_apilamiento": False,
            "orientacion": "wide",
        }

        salida = procesar(payload)

        assert len(salida["unidades"]) == 3
        assert salida["ubicacion"]["orientation"] == "wide"
        assert salida["opciones"]["permitir_apilamiento"] is False

    def test_vehiculo_desconocido_devuelve_error(self):
        salida = procesar({"catalog": CATALOGO_RAW, "listing": LISTADO_RAW}, vehicle_name="Avión")

        assert "Vehículo desconocido" in salida["error"]["message"]
        assert salida["error"]["traceback"]

    def test_sin_vehiculo_devuelve_error(self):
        salida = procesar({"catalog": CATALOGO_RAW, "listing": LISTADO_RAW})

        assert "vehicle" in salida["error"]["message"]

    def test_payload_invalido_devuelve_error(self):
        salida = procesar({"catalog": CATALOGO_RAW, "listing": [{"sscc": "P1"}],
                           "vehicle_name": "19T"})

        assert "error" in salida

    def test_sku_desconocido_devuelve_error(self):
        listado = LISTADO_RAW + [{"sscc": "P9", "sku": "Z", "quantity": 5}]

        salida = procesar({"catalog": CATALOGO_RAW, "listing": listado, "vehicle_name": "19T"})

        assert "SKU Z no encontrado" in salida["error"]["message"]


def test_planificacion_en_paralelo_mantiene_orden():
    trabajos = [
        {"catalog": CATALOGO_RAW, "listing": LISTADO_RAW, "vehicle_name": nombre}
        for nombre in ["7.5T", "19T", "Semi 13.6m", "19T"]
    ]

    resultados = planificar_en_paralelo(trabajos, max_workers=3)

    assert [r["vehicle"]["name"] for r in resultados] == ["7.5T", "19T", "Semi 13.6m", "19T"]
    assert all(r["estadisticas"]["total_pallets"] == 3 for r in resultados)


def test_paralelo_sin_trabajos():
    assert planificar_en_paralelo([]) == []


def test_corrida_no_comparte_estado():
    """Dos corridas seguidas sobre la misma entrada dan el mismo plan"""
    catalogo = _catalogo()
    primera = planificar_carga(catalogo, LISTADO_RAW, SEMI)
    segunda = planificar_carga(catalogo, LISTADO_RAW, SEMI)

    assert primera.unidades == segunda.unidades
    assert primera.ubicacion == segunda.ubicacion
    assert isinstance(catalogo["A"], CatalogEntry)
