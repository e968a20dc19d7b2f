"""
Unit tests for the legacy payload compatibility shim
"""

import pytest

from pole_viewer.client.compat import PayloadShapeError, normalize_page_payload

CANONICAL = {
    'id': 7,
    'municipality': 'Taubaté',
    'neighborhood': 'Centro',
    'street': 'Rua A',
    'material': 'Concreto',
    'height': '11',
    'mechanicalTension': '300 daN',
    'latitude': -23.2,
    'longitude': -45.9,
    'companies': ['Claro', 'Vivo'],
    'companyCount': 2,
}

LEGACY = {
    'id': 8,
    'nome_municipio': 'Taubaté',
    'nome_bairro': 'Centro',
    'nome_logradouro': 'Rua B',
    'material': 'Madeira',
    'altura': 9,
    'tensao_mecanica': 150,
    'coordenadas': '-23.21, -45.91',
    'empresas': ['Tim'],
    'qtd_empresas': 1,
}


class TestNormalizePagePayload:
    def test_canonical(self):
        payload = normalize_page_payload({'total': 10, 'page': 1, 'limit': 100, 'data': [CANONICAL]})
        assert payload.total == 10
        record = payload.items[0]
        assert record.id == 7
        assert record.mechanical_tension == '300 daN'
        assert record.companies == ['Claro', 'Vivo']
        assert record.company_count == 2

    def test_bare_array(self):
        payload = normalize_page_payload([CANONICAL, CANONICAL])
        assert payload.total == 2
        assert len(payload.items) == 2

    @pytest.mark.parametrize('key', ['data', 'rows', 'postes'])
    def test_keyed_variants(self, key):
        payload = normalize_page_payload({key: [CANONICAL], 'total': 5})
        assert payload.total == 5
        assert payload.items[0].id == 7

    def test_missing_total_falls_back_to_item_count(self):
        payload = normalize_page_payload({'rows': [CANONICAL]})
        assert payload.total == 1

    def test_legacy_column_names(self):
        record = normalize_page_payload({'data': [LEGACY], 'total': 1}).items[0]
        assert record.municipality == 'Taubaté'
        assert record.street == 'Rua B'
        assert record.height == '9'
        assert record.mechanical_tension == '150'
        assert record.latitude == pytest.approx(-23.21)
        assert record.longitude == pytest.approx(-45.91)
        assert record.companies == ['Tim']
        assert record.company_count == 1

    def test_single_company_column(self):
        raw = {'id': 1, 'coordenadas': '-23.2,-45.9', 'empresa': 'Vivo'}
        record = normalize_page_payload([raw]).items[0]
        assert record.companies == ['Vivo']
        assert record.company_count == 1

    def test_geojson_feature_collection(self):
        payload = normalize_page_payload({
            'type': 'FeatureCollection',
            'total': 40,
            'features': [{
                'type': 'Feature',
                'id': 7,
                'geometry': {'type': 'Point', 'coordinates': [-45.9, -23.2]},
                'properties': {k: v for k, v in CANONICAL.items() if k not in ('id', 'latitude', 'longitude')},
            }],
        })
        assert payload.total == 40
        record = payload.items[0]
        assert record.id == 7
        assert record.latitude == -23.2
        assert record.longitude == -45.9

    @pytest.mark.parametrize('payload', [
        None,
        'error',
        {'error': 'area too large'},
        {'data': 'nope'},
        {'data': [{'id': 1}]},
        {'data': [CANONICAL], 'total': 'many'},
        [1, 2],
    ])
    def test_unreadable_payloads(self, payload):
        with pytest.raises(PayloadShapeError):
            normalize_page_payload(payload)
