"""
Tests para la reconstrucción de pallets desde el listado.
"""

import math

import pytest

from models.domain import CatalogEntry, ListingRow
from models.enums import EstadoPallet, ModeloAltura
from models.exceptions import DataError, UnknownSKUError
from services.reconstructor import reconstruct_pallet, reconstruct_pallets


def _catalogo():
    return {
        "A": CatalogEntry(
            sku="A", qty_per_pallet=100, weight_gross=200,
            length=1.2, width=0.8, height=1.4,
            layer_height=0.2, layer_count=7,
            stackable=True, max_stack_weight=400,
        ),
    }


class TestEscaladoLineal:
    """Altura y peso proporcionales a la fracción de llenado"""

    def test_pallet_medio_lleno(self):
        """50 de 100 unidades → mitad de altura y peso, parcial"""
        pallet = reconstruct_pallet(ListingRow("P1", "A", 50), _catalogo())

        assert math.isclose(pallet.height_actual, 0.7)
        assert math.isclose(pallet.weight_actual, 100.0)
        assert pallet.status == EstadoPallet.PARTIAL
        assert pallet.fill_ratio == 0.5

    def test_pallet_completo(self):
        """Cantidad igual a la capacidad → full"""
        pallet = reconstruct_pallet(ListingRow("P1", "A", 100), _catalogo())

        assert pallet.status == EstadoPallet.FULL
        assert pallet.is_full
        assert math.isclose(pallet.height_actual, 1.4)
        assert math.isclose(pallet.weight_actual, 200.0)

    def test_sobrellenado_no_se_limita(self):
        """La fracción puede superar 1.0 sin recortarse"""
        pallet = reconstruct_pallet(ListingRow("P1", "A", 150), _catalogo())

        assert pallet.status == EstadoPallet.FULL
        assert pallet.fill_ratio == 1.5
        assert math.isclose(pallet.height_actual, 2.1)
        assert math.isclose(pallet.weight_actual, 300.0)


class TestModeloCapas:
    """Altura por capas enteras (redondeo hacia arriba)"""

    def test_capas_redondean_hacia_arriba(self):
        """50% de 7 capas = 3.5 → 4 capas × 0.2m"""
        pallet = reconstruct_pallet(
            ListingRow("P1", "A", 50), _catalogo(), ModeloAltura.CAPAS
        )

        assert math.isclose(pallet.height_actual, 0.8)
        # El peso sigue siendo lineal
        assert math.isclose(pallet.weight_actual, 100.0)

    def test_sin_datos_de_capas_usa_lineal(self):
        """Ficha sin capas → modelo lineal"""
        catalogo = {
            "B": CatalogEntry("B", qty_per_pallet=10, weight_gross=100,
                              length=1.2, width=0.8, height=1.0),
        }
        pallet = reconstruct_pallet(ListingRow("P1", "B", 5), catalogo, ModeloAltura.CAPAS)

        assert math.isclose(pallet.height_actual, 0.5)


class TestErrores:

    def test_sku_desconocido(self):
        """SKU fuera del catálogo levanta UnknownSKUError"""
        with pytest.raises(UnknownSKUError, match="SKU ZZZ no encontrado") as exc:
            reconstruct_pallet(ListingRow("P9", "ZZZ", 10), _catalogo())

        assert exc.value.sku == "ZZZ"
        assert exc.value.sscc == "P9"
        assert isinstance(exc.value, DataError)

    def test_capacidad_invalida(self):
        """Ficha con qty_per_pallet = 0 no permite reconstruir"""
        catalogo = {
            "C": CatalogEntry("C", qty_per_pallet=0, weight_gross=100,
                              length=1.2, width=0.8, height=1.0),
        }
        with pytest.raises(DataError, match="qty_per_pallet"):
            reconstruct_pallet(ListingRow("P1", "C", 5), catalogo)

    def test_lote_aborta_en_primer_desconocido(self):
        listado = [ListingRow("P1", "A", 100), ListingRow("P2", "X", 10)]

        with pytest.raises(UnknownSKUError):
            reconstruct_pallets(listado, _catalogo())


def test_reconstruccion_mantiene_orden():
    """El lote conserva el orden del listado"""
    listado = [ListingRow("P3", "A", 30), ListingRow("P1", "A", 100), ListingRow("P2", "A", 60)]

    pallets = reconstruct_pallets(listado, _catalogo())

    assert [p.sscc for p in pallets] == ["P3", "P1", "P2"]
    assert [p.status for p in pallets] == [
        EstadoPallet.PARTIAL, EstadoPallet.FULL, EstadoPallet.PARTIAL
    ]
