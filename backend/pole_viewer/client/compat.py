"""
Compatibility shim for page payloads from older deployments.

The canonical response is `PolePage` (`{total, page, limit, data}`). Earlier
servers answered with a bare array, `{data, total}`, `{rows, total}`,
`{postes, total}` or a GeoJSON FeatureCollection, and with the Portuguese
column names of the legacy table. Everything here exists only to read those;
nothing else in the package depends on the legacy shapes.
"""
from dataclasses import dataclass
from pole_viewer.schemas.responses import PoleRecord
from pole_viewer.utils import parse_coordinates
from pydantic import ValidationError
from typing import Any


class PayloadShapeError(ValueError):
    pass


@dataclass
class PagePayload:
    items: list[PoleRecord]
    total: int


_LIST_KEYS = ('data', 'rows', 'postes')

_LEGACY_FIELDS = {
    'nome_municipio': 'municipality',
    'nome_bairro': 'neighborhood',
    'nome_logradouro': 'street',
    'altura': 'height',
    'tensao_mecanica': 'mechanicalTension',
    'tensao': 'mechanicalTension',
    'empresas': 'companies',
    'qtd_empresas': 'companyCount',
}


def _text(value: Any) -> Any:
    # Legacy servers returned numeric height/tension
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return value


def _canonical_fields(raw: dict[str, Any]) -> dict[str, Any]:
    fields = {}
    for key, value in raw.items():
        fields[_LEGACY_FIELDS.get(key, key)] = value

    if fields.get('latitude') is None or fields.get('longitude') is None:
        coordinates = parse_coordinates(fields.get('coordenadas'))
        if coordinates is not None:
            fields['latitude'], fields['longitude'] = coordinates

    # Single `empresa` column of the first server version
    if 'companies' not in fields and fields.get('empresa'):
        fields['companies'] = [fields['empresa']]
    if 'companyCount' not in fields and 'company_count' not in fields:
        fields['companyCount'] = len(fields.get('companies') or [])

    for key in ('height', 'mechanicalTension', 'mechanical_tension'):
        if key in fields:
            fields[key] = _text(fields[key])
    return fields


def _feature_fields(feature: dict[str, Any]) -> dict[str, Any]:
    fields = dict(feature.get('properties') or {})
    geometry = feature.get('geometry') or {}
    coordinates = geometry.get('coordinates')
    if geometry.get('type') == 'Point' and isinstance(coordinates, (list, tuple)) and len(coordinates) >= 2:
        fields['longitude'], fields['latitude'] = coordinates[0], coordinates[1]
    if 'id' not in fields and feature.get('id') is not None:
        fields['id'] = feature['id']
    return fields


def to_record(raw: Any) -> PoleRecord:
    if not isinstance(raw, dict):
        raise PayloadShapeError(f'pole record must be an object, got {type(raw).__name__}')
    if raw.get('type') == 'Feature':
        raw = _feature_fields(raw)
    try:
        return PoleRecord.model_validate(_canonical_fields(raw))
    except ValidationError as e:
        raise PayloadShapeError(f'invalid pole record: {e}') from e


def _read_total(payload: dict[str, Any], count: int) -> int:
    total = payload.get('total')
    if total is None:
        return count
    try:
        return int(total)
    except (TypeError, ValueError) as e:
        raise PayloadShapeError(f'invalid total: {total!r}') from e


def normalize_page_payload(payload: Any) -> PagePayload:
    """
    Normalize any known page payload to `PagePayload`.

    All records are converted before anything is returned, so a page that
    cannot be fully read raises PayloadShapeError and is never partially
    rendered. A missing total falls back to the number of items.
    """
    if isinstance(payload, list):
        items = [to_record(raw) for raw in payload]
        return PagePayload(items=items, total=len(items))

    if not isinstance(payload, dict):
        raise PayloadShapeError(f'unexpected payload type {type(payload).__name__}')

    if payload.get('type') == 'FeatureCollection':
        raw_items = payload.get('features')
    else:
        raw_items = next((payload[key] for key in _LIST_KEYS if isinstance(payload.get(key), list)), None)

    if not isinstance(raw_items, list):
        raise PayloadShapeError(f'no record list in payload with keys {sorted(payload)}')

    items = [to_record(raw) for raw in raw_items]
    return PagePayload(items=items, total=_read_total(payload, len(items)))
