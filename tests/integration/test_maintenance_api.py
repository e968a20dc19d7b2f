"""
HTTP tests for the maintenance loader
"""

from pole_viewer.core.settings import Settings
from pole_viewer.main import internal_only

POLES_CSV = """id,nome_municipio,nome_bairro,nome_logradouro,material,altura,tensao_mecanica,coordenadas
10,Caçapava,Vila A,Rua 1,Concreto,11,300 daN,"-23.10,-45.70"
11,Caçapava,Vila A,Rua 2,Concreto,11,300 daN,"-23.11,-45.71"
12,Caçapava,Vila A,Rua 3,Concreto,11,300 daN,
"""

COMPANIES_CSV = """id_poste,empresa
10,Vivo
10,Claro
11,Vivo
12,Tim
"""


def test_requires_internal_caller(client):
    response = client.post('/maintenance/load/poles')
    assert response.status_code == 403


def test_missing_export(client, tmp_path, monkeypatch):
    monkeypatch.setattr(Settings, 'POLES_CSV_PATH', str(tmp_path / 'missing.csv'))
    client.app.dependency_overrides[internal_only] = lambda: None
    try:
        response = client.post('/maintenance/load/poles')
    finally:
        client.app.dependency_overrides.clear()
    assert response.status_code == 404


def test_load_replaces_poles(client, tmp_path, monkeypatch):
    poles_path = tmp_path / 'dados_poste.csv'
    poles_path.write_text(POLES_CSV, encoding='utf-8')
    companies_path = tmp_path / 'empresa_poste.csv'
    companies_path.write_text(COMPANIES_CSV, encoding='utf-8')
    monkeypatch.setattr(Settings, 'POLES_CSV_PATH', str(poles_path))
    monkeypatch.setattr(Settings, 'POLE_COMPANIES_CSV_PATH', str(companies_path))

    client.app.dependency_overrides[internal_only] = lambda: None
    try:
        response = client.post('/maintenance/load/poles')
    finally:
        client.app.dependency_overrides.clear()

    assert response.status_code == 200
    assert response.json() == {'pole': 2, 'pole_company': 3, 'skipped': 1}

    # Seeded poles are gone, only the export remains
    old = client.get('/api/poles', params={'bbox': '-46.7,-23.3,-46.5,-23.1'})
    assert old.json()['total'] == 0

    loaded = client.get('/api/poles', params={'bbox': '-45.8,-23.2,-45.6,-23.0'}).json()
    assert loaded['total'] == 2
    assert [record['id'] for record in loaded['data']] == [10, 11]
    assert loaded['data'][0]['companies'] == ['Claro', 'Vivo']
    assert loaded['data'][0]['municipality'] == 'Caçapava'
