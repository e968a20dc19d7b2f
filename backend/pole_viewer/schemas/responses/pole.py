from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class PoleRecord(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: int
    municipality: str | None = None
    neighborhood: str | None = None
    street: str | None = None
    material: str | None = None
    height: str | None = None
    mechanical_tension: str | None = None
    latitude: float
    longitude: float
    companies: list[str] = Field(default_factory=list)
    company_count: int = 0


class PolePage(BaseModel):
    total: int
    page: int
    limit: int
    data: list[PoleRecord]
