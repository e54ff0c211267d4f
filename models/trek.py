from sqlalchemy import Column, String, Text, JSON, ForeignKey, Index, UniqueConstraint
from sqlalchemy.orm import relationship

from models.base_model import BaseModel, Base


class Trek(BaseModel, Base):
    __tablename__ = "treks"

    region_id = Column(String(36), ForeignKey("regions.id", ondelete="RESTRICT"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    slug = Column(String(255), nullable=False, index=True)
    description = Column(Text, nullable=False)
    image = Column(String(1024), nullable=False, default="")

    # Nested lists, stored as JSON documents
    overview = Column(JSON, nullable=False, default=list)     # [{icon, heading, description}]
    itinerary = Column(JSON, nullable=False, default=list)    # [{heading, description}]
    inclusions = Column(JSON, nullable=False, default=list)   # [str]
    exclusions = Column(JSON, nullable=False, default=list)   # [str]
    pricing = Column(JSON, nullable=False, default=list)      # [{minPersons, maxPersons, price}]
    gallery = Column(JSON, nullable=False, default=list)      # [{src, alt, caption}]
    faqs = Column(JSON, nullable=False, default=list)         # [{question, answer}]
    keywords = Column(JSON, nullable=False, default=list)     # [str]

    region = relationship("Region", back_populates="treks")

    # Slugs are unique within a region only
    __table_args__ = (
        UniqueConstraint("region_id", "slug", name="uq_treks_region_slug"),
        Index("ix_treks_name", "name"),
    )

    @property
    def lowest_price(self):
        """Cheapest price across the pricing tiers, or None without pricing."""
        if not self.pricing:
            return None
        return min(float(tier["price"]) for tier in self.pricing)

    def gallery_urls(self) -> list:
        return [item.get("src") for item in (self.gallery or []) if item.get("src")]
