import random

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session

from pole_viewer.core.models import Base, Pole, PoleCompany
from pole_viewer.core.settings import Settings

# Scenario viewport: west, south, east, north
SCENARIO_BBOX = (-46.7, -23.3, -46.5, -23.1)
INSIDE_COUNT = 250
OUTSIDE_IDS = list(range(1001, 1021))


def _companies_for(pole_id: int) -> list[str]:
    if pole_id % 3 == 0:
        # Duplicate row on purpose, the API must report it once
        return ['Vivo', 'Claro', 'Vivo']
    if pole_id % 3 == 1:
        return ['Tim']
    return []


def seed_poles(session: Session) -> None:
    ids = list(range(1, INSIDE_COUNT + 1))
    random.Random(7).shuffle(ids)
    for pole_id in ids:
        session.add(Pole(
            id=pole_id,
            municipality='São José dos Campos',
            neighborhood=f'Bairro {pole_id % 5}',
            street=f'Rua {pole_id}',
            material='Concreto' if pole_id % 2 else 'Madeira',
            height='11',
            mechanical_tension='300 daN',
            latitude=-23.29 + (pole_id % 50) * 0.0035,
            longitude=-46.69 + (pole_id // 50) * 0.035,
        ))
        for company in _companies_for(pole_id):
            session.add(PoleCompany(pole_id=pole_id, company=company))
    for pole_id in OUTSIDE_IDS:
        session.add(Pole(id=pole_id, municipality='Jacareí', latitude=-22.0, longitude=-45.0))
    session.commit()


@pytest.fixture
def database_path(tmp_path):
    path = tmp_path / 'poles.db'
    engine = create_engine(f'sqlite:///{path}')
    Base.metadata.create_all(engine)
    with Session(engine) as session:
        seed_poles(session)
    engine.dispose()
    return path


@pytest.fixture
def client(database_path, monkeypatch):
    monkeypatch.setattr(Settings, 'DATABASE_URL', f'sqlite+aiosqlite:///{database_path}')
    monkeypatch.setattr(Settings, 'DEBUG', False)

    from pole_viewer.main import create_app

    with TestClient(create_app()) as test_client:
        yield test_client
