"""Business listing model — maps to the 'businesses' table."""

import enum

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    Enum,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
)
from sqlalchemy.orm import relationship, validates
from sqlalchemy.sql import func

from listindia.infrastructure.database import Base


class BusinessCategory(str, enum.Enum):
    RESTAURANT = "restaurant"
    RETAIL = "retail"
    HEALTHCARE = "healthcare"
    EDUCATION = "education"
    TECHNOLOGY = "technology"
    FINANCE = "finance"
    AUTOMOTIVE = "automotive"
    BEAUTY = "beauty"
    HOME = "home"
    PROFESSIONAL = "professional"


class Business(Base):
    __tablename__ = "businesses"
    __table_args__ = (
        CheckConstraint("rating >= 0 AND rating <= 5", name="ck_businesses_rating_range"),
        CheckConstraint("review_count >= 0", name="ck_businesses_review_count"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    category = Column(
        Enum(BusinessCategory, name="business_category", values_callable=lambda cats: [c.value for c in cats]),
        nullable=False,
        index=True,
    )

    # Address / contact
    address = Column(Text, nullable=False)
    city = Column(String(100), nullable=False, index=True)
    state = Column(String(100), nullable=False)
    zip_code = Column(String(20), nullable=False)
    phone = Column(String(20), nullable=False)
    email = Column(String(255), nullable=False)
    website = Column(String(255), nullable=True)
    image_url = Column(String(500), nullable=True)

    # Derived from reviews; written only by the rating aggregator
    rating = Column(Numeric(2, 1, asdecimal=False), nullable=False, default=0.0)
    review_count = Column(Integer, nullable=False, default=0)

    is_featured = Column(Boolean, nullable=False, default=False, index=True)
    is_approved = Column(Boolean, nullable=False, default=False, index=True)
    owner_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=True, index=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    owner = relationship("User", back_populates="businesses")
    reviews = relationship("Review", back_populates="business", passive_deletes=True)

    @validates("email")
    def normalize_email(self, key, value):
        return value.strip().lower() if value else value

    def __repr__(self):
        return f"<Business {self.id} - {self.name}>"
