from sqlalchemy import ForeignKey, Index
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    pass


class Pole(Base):
    __tablename__ = 'pole'
    __table_args__ = (
        Index('pole_latitude_longitude', 'latitude', 'longitude'),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=False)
    municipality: Mapped[str | None] = mapped_column()
    neighborhood: Mapped[str | None] = mapped_column()
    street: Mapped[str | None] = mapped_column()
    material: Mapped[str | None] = mapped_column()
    # Kept as the text of the legacy export (e.g. '11', '300 daN')
    height: Mapped[str | None] = mapped_column()
    mechanical_tension: Mapped[str | None] = mapped_column()
    latitude: Mapped[float] = mapped_column()
    longitude: Mapped[float] = mapped_column()


class PoleCompany(Base):
    __tablename__ = 'pole_company'

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    pole_id: Mapped[int] = mapped_column(ForeignKey('pole.id', ondelete='CASCADE'), index=True)
    company: Mapped[str] = mapped_column()
