from sqlalchemy import Column, String, Text, JSON, Index
from sqlalchemy.orm import relationship

from models.base_model import BaseModel, Base


class Region(BaseModel, Base):
    __tablename__ = "regions"

    name = Column(String(255), nullable=False)
    slug = Column(String(255), nullable=False, unique=True, index=True)
    description = Column(Text, nullable=False)
    image = Column(String(1024), nullable=False)
    keywords = Column(JSON, nullable=False, default=list)

    # RESTRICT: a region with treks cannot be deleted (checked in the route too)
    treks = relationship("Trek", back_populates="region", passive_deletes=True)

    __table_args__ = (
        Index("ix_regions_name", "name"),
    )
