from sqlalchemy import Column, String, Index

from models.base_model import BaseModel, Base, SoftDeleteMixin


class Genre(SoftDeleteMixin, BaseModel, Base):
    __tablename__ = "genres"

    name = Column(String(64), nullable=False)

    __table_args__ = (
        Index("ix_genres_name", "name"),
    )
