import csv
import logging
from pole_viewer.core.models import Pole, PoleCompany
from pole_viewer.utils import is_null_or_whitespace, parse_coordinates
from typing import Iterator


log = logging.getLogger(__name__)

# Column names of the legacy `dados_poste` / `empresa_poste` exports
POLE_COLUMNS = {
    'id': 'id',
    'nome_municipio': 'municipality',
    'nome_bairro': 'neighborhood',
    'nome_logradouro': 'street',
    'material': 'material',
    'altura': 'height',
    'tensao_mecanica': 'mechanical_tension',
}


def _clean(value: str | None) -> str | None:
    if is_null_or_whitespace(value):
        return None
    return value.strip()


def _read_coordinates(row: dict[str, str]) -> tuple[float, float] | None:
    coordinates = parse_coordinates(row.get('coordenadas'))
    if coordinates is not None:
        return coordinates
    # Some exports already carry split columns
    if not is_null_or_whitespace(row.get('latitude')) and not is_null_or_whitespace(row.get('longitude')):
        return parse_coordinates(f"{row['latitude']},{row['longitude']}")
    return None


def read_poles(path: str, skipped: list[str]) -> Iterator[Pole]:
    """
    Yield poles from a legacy CSV export.

    Rows without a usable id or coordinates are not yielded; their raw id is
    appended to `skipped`.
    """
    seen: set[int] = set()
    with open(path, newline='', encoding='utf-8') as f:
        for row in csv.DictReader(f):
            raw_id = _clean(row.get('id'))
            try:
                pole_id = int(raw_id) if raw_id is not None else None
            except ValueError:
                pole_id = None

            coordinates = _read_coordinates(row)
            if pole_id is None or coordinates is None or pole_id in seen:
                skipped.append(raw_id or '')
                continue
            seen.add(pole_id)

            values = {attribute: _clean(row.get(column)) for column, attribute in POLE_COLUMNS.items() if attribute != 'id'}
            yield Pole(
                id=pole_id,
                latitude=coordinates[0],
                longitude=coordinates[1],
                **values,
            )

    log.info('Read %s poles from %s, skipped %s', len(seen), path, len(skipped))


def read_pole_companies(path: str, pole_ids: set[int]) -> Iterator[PoleCompany]:
    """Yield distinct (pole, company) pairs for poles present in `pole_ids`."""
    seen: set[tuple[int, str]] = set()
    with open(path, newline='', encoding='utf-8') as f:
        for row in csv.DictReader(f):
            company = _clean(row.get('empresa'))
            try:
                pole_id = int(row.get('id_poste') or '')
            except ValueError:
                continue
            if company is None or pole_id not in pole_ids or (pole_id, company) in seen:
                continue
            seen.add((pole_id, company))
            yield PoleCompany(pole_id=pole_id, company=company)
