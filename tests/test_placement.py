"""
Tests de ubicación de unidades en el vehículo.
"""

import pytest

from models.domain import PalletInstance, StackedUnit, VehicleVolume
from models.enums import EstadoPallet, Orientacion
from services.placement import PlacementEngine, place_units


SEMI = VehicleVolume(13.6, 2.4, 2.7, name="Semi 13.6m")


def _unidad(sscc, altura=1.4, length=1.2, width=0.8):
    pallet = PalletInstance(
        sscc=sscc, sku="A", quantity=100, status=EstadoPallet.FULL,
        fill_ratio=1.0, height_actual=altura, weight_actual=200,
    )
    return StackedUnit(base_pallet=pallet, length=length, width=width)


def _unidades(n, **kwargs):
    return [_unidad(f"U{i:02d}", **kwargs) for i in range(n)]


class TestFilas:

    def test_primera_fila_coordenadas(self):
        """Tres pallets 1.2×0.8 llenan el ancho de 2.4m"""
        resultado = place_units(_unidades(4), SEMI)

        centros = [(p.x, p.y, p.z) for p in resultado.placed]
        assert centros[0] == pytest.approx((0.6, 0.7, 0.4))
        assert centros[1] == pytest.approx((0.6, 0.7, 1.2))
        assert centros[2] == pytest.approx((0.6, 0.7, 2.0))
        # Cuarta unidad abre nueva fila
        assert centros[3] == pytest.approx((1.8, 0.7, 0.4))
        assert [p.row for p in resultado.placed] == [0, 0, 0, 1]

    def test_excedente_queda_fuera(self):
        """11 filas de 3 caben en 13.6m; la unidad 34 no"""
        unidades = _unidades(34)

        resultado = place_units(unidades, SEMI)

        assert len(resultado.placed) == 33
        assert [u.base_pallet.sscc for u in resultado.unplaced] == ["U33"]
        assert not resultado.all_placed

    def test_orientacion_ancha_intercambia_dimensiones(self):
        """WIDE: huella 0.8×1.2, dos por fila"""
        resultado = place_units(_unidades(3), SEMI, Orientacion.WIDE)

        primero, segundo, tercero = resultado.placed
        assert (primero.length, primero.width) == (0.8, 1.2)
        assert (primero.x, primero.z) == pytest.approx((0.4, 0.6))
        assert (segundo.x, segundo.z) == pytest.approx((0.4, 1.8))
        assert (tercero.x, tercero.z) == pytest.approx((1.2, 0.6))
        assert resultado.orientation == Orientacion.WIDE

    def test_altura_centro_es_mitad_de_unidad(self):
        resultado = place_units([_unidad("U1", altura=2.2)], SEMI)

        assert resultado.placed[0].y == pytest.approx(1.1)


class TestMonotonia:

    def test_x_no_decrece_y_sin_solape_en_fila(self):
        unidades = [
            _unidad(f"U{i}", length=1.2 if i % 2 else 1.0, width=0.8 if i % 3 else 1.0)
            for i in range(20)
        ]

        resultado = place_units(unidades, SEMI)

        xs_inicio = [p.x - p.length / 2 for p in resultado.placed]
        for anterior, siguiente in zip(xs_inicio, xs_inicio[1:]):
            assert siguiente >= anterior - 1e-9

        por_fila = {}
        for p in resultado.placed:
            por_fila.setdefault(p.row, []).append((p.z - p.width / 2, p.z + p.width / 2))
        for intervalos in por_fila.values():
            for (_, fin), (inicio, _) in zip(intervalos, intervalos[1:]):
                assert inicio >= fin - 1e-9
            assert intervalos[-1][1] <= SEMI.width + 1e-9

    def test_todas_dentro_del_largo(self):
        resultado = place_units(_unidades(40), SEMI)

        for p in resultado.placed:
            assert p.x + p.length / 2 <= SEMI.length + 1e-9


class TestNoUbicables:

    def test_unidad_mas_ancha_que_vehiculo(self):
        ancha = _unidad("ANCHA", length=1.0, width=3.0)

        resultado = place_units([ancha, _unidad("U1")], SEMI)

        assert [u.base_pallet.sscc for u in resultado.unplaced] == ["ANCHA"]
        # No mueve el cursor: la siguiente queda en el origen
        assert resultado.placed[0].x == pytest.approx(0.6)
        assert resultado.placed[0].z == pytest.approx(0.4)

    def test_unidad_sin_huella(self):
        sin_huella = _unidad("SH", length=None, width=None)

        resultado = PlacementEngine().place([sin_huella], SEMI)

        assert resultado.placed == ()
        assert resultado.unplaced == (sin_huella,)

    def test_unidad_fuera_no_impide_las_siguientes(self):
        """Tras descartar una unidad larga, una más corta aún puede entrar"""
        vehiculo = VehicleVolume(2.0, 2.4, 2.7)
        unidades = [_unidad("U1"), _unidad("LARGA", length=2.5, width=2.4), _unidad("U2", length=0.8)]

        resultado = place_units(unidades, vehiculo)

        assert [p.unit.base_pallet.sscc for p in resultado.placed] == ["U1", "U2"]
        assert [u.base_pallet.sscc for u in resultado.unplaced] == ["LARGA"]


def test_total_de_unidades_se_conserva():
    unidades = _unidades(40)

    resultado = place_units(unidades, SEMI)

    assert len(resultado.placed) + len(resultado.unplaced) == len(unidades)
