from sqlalchemy import (
    Column,
    Integer,
    String,
    ForeignKey,
    DateTime,
    Date,
    Boolean,
    Float,
    Enum,
    JSON,
    UniqueConstraint,
    Text,
)
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from portal.db.base import Base


# =========================================================
# SHARED ENUMS (centralised to avoid duplication issues):
# =========================================================


#Workflow state for event registrations
RegistrationStatusEnum = Enum(
    "pending", "confirmed", "cancelled", name="registration_status_enum"
)


#Actor type used in audit logging
ActorTypeEnum = Enum("system", "member", "admin", name="actor_type_enum")


#Member account type
JobTypeEnum = Enum("agency", "freelancer", name="job_type_enum")


# =========================================================
# MEMBERS (portal accounts):
# =========================================================


#Represents a registered portal member
class Member(Base):
    __tablename__ = "members"

    #Primary member identity fields
    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)
    email = Column(String, unique=True, nullable=False, index=True)
    agency_name = Column(String, nullable=True)
    country = Column(String, nullable=True)
    job_type = Column(JobTypeEnum, nullable=False, default="agency")

    #Raw tier label as stored; normalised on every read
    selected_tier = Column(String, nullable=False, default="Free Member")
    hashed_password = Column(String, nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)

    #Password reset state
    password_reset_code = Column(String, nullable=True, index=True)
    password_reset_expires = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    registrations = relationship(
        "EventRegistration",
        back_populates="member",
        cascade="all, delete-orphan",
    )
    hub_registrations = relationship(
        "AccessHubRegistration",
        back_populates="member",
        cascade="all, delete-orphan",
    )


# =========================================================
# ADMINS (platform administrators):
# =========================================================


class Admin(Base):
    __tablename__ = "admins"

    id = Column(Integer, primary_key=True)
    email = Column(String, unique=True, nullable=False, index=True)
    hashed_password = Column(String, nullable=False)


# =========================================================
# TIERED CONTENT (shared columns):
# =========================================================


#Columns every tier-gated content table carries
class TieredContentMixin:
    id = Column(Integer, primary_key=True)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=True)

    #Raw tier label, empty meaning unrestricted
    tier_restriction = Column(String, nullable=True, index=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())


class Opportunity(TieredContentMixin, Base):
    __tablename__ = "opportunities"

    location = Column(String, nullable=True, index=True)
    service_type = Column(String, nullable=True)
    industry = Column(String, nullable=True)
    project_type = Column(String, nullable=True)
    budget = Column(String, nullable=True)
    deadline = Column(Date, nullable=True)
    application_link = Column(String, nullable=True)


class Event(TieredContentMixin, Base):
    __tablename__ = "events"

    event_type = Column(String, nullable=True, index=True)
    date = Column(DateTime(timezone=True), nullable=False)
    location = Column(String, nullable=True)
    is_virtual = Column(Boolean, nullable=False, default=False)
    registration_link = Column(String, nullable=True)

    registrations = relationship(
        "EventRegistration",
        back_populates="event",
        cascade="all, delete-orphan",
    )


#A member's registration for an event
class EventRegistration(Base):
    __tablename__ = "event_registrations"

    id = Column(Integer, primary_key=True)
    event_id = Column(Integer, ForeignKey("events.id", ondelete="CASCADE"), nullable=False, index=True)
    member_id = Column(Integer, ForeignKey("members.id", ondelete="CASCADE"), nullable=False, index=True)

    status = Column(RegistrationStatusEnum, nullable=False, default="pending")
    registered_at = Column(DateTime(timezone=True), server_default=func.now())

    event = relationship("Event", back_populates="registrations")
    member = relationship("Member", back_populates="registrations")

    __table_args__ = (
        UniqueConstraint("event_id", "member_id", name="uq_registration_event_member"),
    )


class Resource(TieredContentMixin, Base):
    __tablename__ = "resources"

    resource_type = Column(String, nullable=True, index=True)
    url = Column(String, nullable=True)
    file_path = Column(String, nullable=True)
    video_url = Column(String, nullable=True)


class MarketIntel(TieredContentMixin, Base):
    __tablename__ = "market_intel"

    region = Column(String, nullable=True, index=True)
    type = Column(String, nullable=True)
    url = Column(String, nullable=True)
    icon_url = Column(String, nullable=True)
    downloadable = Column(Boolean, nullable=False, default=False)
    chart_data = Column(JSON, nullable=True)


class Offer(TieredContentMixin, Base):
    __tablename__ = "offers"

    url = Column(String, nullable=True)
    icon_url = Column(String, nullable=True)


class Update(TieredContentMixin, Base):
    __tablename__ = "updates"

    category = Column(String, nullable=True, index=True)
    cta_text = Column(String, nullable=True)
    cta_url = Column(String, nullable=True)
    tags = Column(JSON, nullable=False, default=list)



#Bookable workspace (coworking, boardroom, virtual office) offered to members
class AccessHub(TieredContentMixin, Base):
    __tablename__ = "access_hubs"

    space_type = Column(String, nullable=True, index=True)
    city = Column(String, nullable=True, index=True)
    country = Column(String, nullable=True, index=True)
    is_available = Column(Boolean, nullable=False, default=True)
    capacity = Column(Integer, nullable=True)
    pricing_per_day = Column(Float, nullable=True)
    amenities = Column(JSON, nullable=False, default=list)
    booking_link = Column(String, nullable=True)

    registrations = relationship(
        "AccessHubRegistration",
        back_populates="access_hub",
        cascade="all, delete-orphan",
    )


#A member's request to use an access hub
class AccessHubRegistration(Base):
    __tablename__ = "access_hub_registrations"

    id = Column(Integer, primary_key=True)
    access_hub_id = Column(Integer, ForeignKey("access_hubs.id", ondelete="CASCADE"), nullable=False, index=True)
    member_id = Column(Integer, ForeignKey("members.id", ondelete="CASCADE"), nullable=False, index=True)

    status = Column(RegistrationStatusEnum, nullable=False, default="pending")
    registered_at = Column(DateTime(timezone=True), server_default=func.now())

    access_hub = relationship("AccessHub", back_populates="registrations")
    member = relationship("Member", back_populates="hub_registrations")

    __table_args__ = (
        UniqueConstraint("access_hub_id", "member_id", name="uq_registration_hub_member"),
    )


# =========================================================
# AUDIT LOGS (immutable security trail):
# =========================================================


#Immutable audit log entry for security-sensitive actions
class AuditLog(Base):
    __tablename__ = "audit_logs"

    id = Column(Integer, primary_key=True)
    actor_type = Column(ActorTypeEnum, nullable=False)
    actor_id = Column(Integer, nullable=True, index=True)
    action = Column(String, nullable=False)
    details = Column(String, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)
