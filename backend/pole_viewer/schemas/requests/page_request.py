from pydantic import BaseModel, Field


class PageRequest(BaseModel):
    page: int = Field(1, ge=1)
    limit: int = Field(..., ge=1)

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit

    @classmethod
    def clamped(cls, page: int | None, limit: int | None, default_limit: int, min_limit: int, max_limit: int) -> 'PageRequest':
        page = max(page if page is not None else 1, 1)
        limit = default_limit if limit is None else limit
        limit = min(max(limit, min_limit), max_limit)
        return cls(page=page, limit=limit)
