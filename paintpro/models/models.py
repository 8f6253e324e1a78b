from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional, List

from sqlalchemy import (
    String,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    JSON,
    Text,
    Index,
)
from sqlalchemy.orm import relationship, Mapped, mapped_column

from ..db import Base


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def int_pk() -> Mapped[int]:
    return mapped_column(Integer, primary_key=True, autoincrement=True)


def money_column(**kwargs) -> Mapped[Optional[Decimal]]:
    # Fixed precision decimal, never float
    return mapped_column(Numeric(12, 2), **kwargs)


class User(Base):
    __tablename__ = "users"

    id: Mapped[int] = int_pk()
    username: Mapped[str] = mapped_column(String(100), unique=True, nullable=False, index=True)
    password: Mapped[str] = mapped_column(String(255), nullable=False)  # pbkdf2 hash
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[str] = mapped_column(String(50), nullable=False, default="user")  # user|admin|superadmin

    payments = relationship("Payment", back_populates="creator", passive_deletes="all")


class SessionRecord(Base):
    """Generic session store: opaque JSON blob keyed by session id."""

    __tablename__ = "sessions"

    sid: Mapped[str] = mapped_column(String(128), primary_key=True)
    sess: Mapped[dict] = mapped_column(JSON, nullable=False)
    expire: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, index=True)


class Client(Base):
    __tablename__ = "clients"

    id: Mapped[int] = int_pk()
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    phone: Mapped[str] = mapped_column(String(50), nullable=False)
    address: Mapped[str] = mapped_column(String(500), nullable=False)
    classification: Mapped[str] = mapped_column(String(50), nullable=False, default="residential")  # residential|commercial|industrial
    type: Mapped[str] = mapped_column(String(50), nullable=False, default="client")  # client|prospect
    notes: Mapped[Optional[str]] = mapped_column(Text)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)

    projects = relationship("Project", back_populates="client", passive_deletes="all")
    invoices = relationship("Invoice", back_populates="client", passive_deletes="all")


class Project(Base):
    __tablename__ = "projects"

    id: Mapped[int] = int_pk()
    client_id: Mapped[int] = mapped_column(Integer, ForeignKey("clients.id"), nullable=False, index=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    address: Mapped[str] = mapped_column(String(500), nullable=False)
    service_type: Mapped[str] = mapped_column(String(100), nullable=False)
    # pending|quoted|approved|preparing|in_progress|reviewing|completed|archived
    status: Mapped[str] = mapped_column(String(50), nullable=False, default="pending", index=True)
    priority: Mapped[str] = mapped_column(String(20), nullable=False, default="medium")  # low|medium|high
    # Visual progress percentage 0-100
    progress: Mapped[Optional[int]] = mapped_column(Integer, default=0)
    start_date: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))
    due_date: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))
    completed_date: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))
    total_cost: Mapped[Optional[Decimal]] = money_column()
    assigned_staff: Mapped[Optional[list]] = mapped_column(JSON)  # staff ids, not a FK
    images: Mapped[Optional[list]] = mapped_column(JSON)
    documents: Mapped[Optional[list]] = mapped_column(JSON)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)

    client = relationship("Client", back_populates="projects")
    quotes = relationship("Quote", back_populates="project", passive_deletes="all")
    service_orders = relationship("ServiceOrder", back_populates="project", passive_deletes="all")
    invoices = relationship("Invoice", back_populates="project", passive_deletes="all")


class Quote(Base):
    __tablename__ = "quotes"

    id: Mapped[int] = int_pk()
    project_id: Mapped[int] = mapped_column(Integer, ForeignKey("projects.id"), nullable=False, index=True)
    materials_estimate: Mapped[Optional[list]] = mapped_column(JSON)
    labor_estimate: Mapped[Optional[list]] = mapped_column(JSON)
    total_estimate: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="draft")  # draft|sent|approved|rejected
    sent_date: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))
    valid_until: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))
    approved_date: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))
    rejected_date: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))
    notes: Mapped[Optional[str]] = mapped_column(Text)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)

    project = relationship("Project", back_populates="quotes")
    purchase_orders = relationship("PurchaseOrder", back_populates="quote", passive_deletes="all")


class Staff(Base):
    __tablename__ = "staff"

    id: Mapped[int] = int_pk()
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[Optional[str]] = mapped_column(String(255))
    phone: Mapped[str] = mapped_column(String(50), nullable=False)
    availability: Mapped[str] = mapped_column(String(20), nullable=False, default="available")  # available|assigned|on_leave
    skills: Mapped[Optional[list]] = mapped_column(JSON)
    avatar: Mapped[Optional[str]] = mapped_column(String(500))
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)

    supervised_orders = relationship("ServiceOrder", back_populates="supervisor", passive_deletes="all")


class Subcontractor(Base):
    __tablename__ = "subcontractors"

    id: Mapped[int] = int_pk()
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    company: Mapped[Optional[str]] = mapped_column(String(255))
    specialty: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[Optional[str]] = mapped_column(String(255))
    phone: Mapped[str] = mapped_column(String(50), nullable=False)
    address: Mapped[Optional[str]] = mapped_column(String(500))
    tax_id: Mapped[Optional[str]] = mapped_column(String(100))
    insurance_info: Mapped[Optional[str]] = mapped_column(Text)
    rate: Mapped[Optional[Decimal]] = money_column()
    rate_type: Mapped[Optional[str]] = mapped_column(String(20), default="hourly")  # hourly|daily|fixed
    notes: Mapped[Optional[str]] = mapped_column(Text)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="active")  # active|inactive|blacklisted
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)


class ServiceOrder(Base):
    __tablename__ = "service_orders"

    id: Mapped[int] = int_pk()
    project_id: Mapped[int] = mapped_column(Integer, ForeignKey("projects.id"), nullable=False, index=True)
    details: Mapped[str] = mapped_column(Text, nullable=False)
    assigned_staff: Mapped[Optional[list]] = mapped_column(JSON)
    assigned_subcontractors: Mapped[Optional[list]] = mapped_column(JSON)
    supervisor_id: Mapped[Optional[int]] = mapped_column(Integer, ForeignKey("staff.id"))
    start_date: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))
    end_date: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))
    due_date: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="pending")  # pending|in_progress|completed
    before_images: Mapped[Optional[list]] = mapped_column(JSON)
    after_images: Mapped[Optional[list]] = mapped_column(JSON)
    client_signature: Mapped[Optional[str]] = mapped_column(Text)  # data URL of the signature pad
    signed_date: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))
    materials_required: Mapped[Optional[str]] = mapped_column(Text)
    special_instructions: Mapped[Optional[str]] = mapped_column(Text)
    safety_requirements: Mapped[Optional[str]] = mapped_column(Text)
    language: Mapped[str] = mapped_column(String(20), nullable=False, default="english")  # english|spanish
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)

    project = relationship("Project", back_populates="service_orders")
    supervisor = relationship("Staff", back_populates="supervised_orders")


class Supplier(Base):
    __tablename__ = "suppliers"

    id: Mapped[int] = int_pk()
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    company: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[Optional[str]] = mapped_column(String(255))
    phone: Mapped[Optional[str]] = mapped_column(String(50))
    address: Mapped[Optional[str]] = mapped_column(String(500))
    category: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    contact_name: Mapped[Optional[str]] = mapped_column(String(255))
    payment_terms: Mapped[Optional[str]] = mapped_column(String(100))
    notes: Mapped[Optional[str]] = mapped_column(Text)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="active")  # active|inactive
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)

    purchase_orders = relationship("PurchaseOrder", back_populates="supplier", passive_deletes="all")


class Invoice(Base):
    __tablename__ = "invoices"

    id: Mapped[int] = int_pk()
    project_id: Mapped[int] = mapped_column(Integer, ForeignKey("projects.id"), nullable=False, index=True)
    client_id: Mapped[int] = mapped_column(Integer, ForeignKey("clients.id"), nullable=False, index=True)
    invoice_number: Mapped[str] = mapped_column(String(50), unique=True, nullable=False, index=True)
    amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    tax: Mapped[Optional[Decimal]] = money_column(default=Decimal("0"))
    total_amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="draft")  # draft|sent|paid|overdue|cancelled
    issue_date: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), default=utcnow)
    due_date: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))
    paid_date: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))
    payment_method: Mapped[Optional[str]] = mapped_column(String(50))
    items: Mapped[Optional[list]] = mapped_column(JSON)
    notes: Mapped[Optional[str]] = mapped_column(Text)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)

    project = relationship("Project", back_populates="invoices")
    client = relationship("Client", back_populates="invoices")

    __table_args__ = (Index("ix_invoices_issue_date", "issue_date"),)


class PurchaseOrder(Base):
    __tablename__ = "purchase_orders"

    id: Mapped[int] = int_pk()
    supplier_id: Mapped[int] = mapped_column(Integer, ForeignKey("suppliers.id"), nullable=False, index=True)
    order_number: Mapped[str] = mapped_column(String(50), unique=True, nullable=False)
    project_id: Mapped[Optional[int]] = mapped_column(Integer, ForeignKey("projects.id"))
    quote_id: Mapped[Optional[int]] = mapped_column(Integer, ForeignKey("quotes.id"))
    delivery_address: Mapped[Optional[str]] = mapped_column(String(500))
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="draft")  # draft|sent|received|cancelled
    issue_date: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), default=utcnow)
    expected_delivery_date: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))
    total_amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=Decimal("0"))
    notes: Mapped[Optional[str]] = mapped_column(Text)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)

    supplier = relationship("Supplier", back_populates="purchase_orders")
    project = relationship("Project")
    quote = relationship("Quote", back_populates="purchase_orders")
    items: Mapped[List["PurchaseOrderItem"]] = relationship(
        "PurchaseOrderItem",
        back_populates="purchase_order",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="PurchaseOrderItem.id",
    )


class PurchaseOrderItem(Base):
    __tablename__ = "purchase_order_items"

    id: Mapped[int] = int_pk()
    purchase_order_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("purchase_orders.id", ondelete="CASCADE"), nullable=False, index=True
    )
    description: Mapped[str] = mapped_column(String(500), nullable=False)
    unit: Mapped[Optional[str]] = mapped_column(String(50))
    quantity: Mapped[Decimal] = mapped_column(Numeric(12, 3), nullable=False, default=Decimal("0"))
    unit_price: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=Decimal("0"))
    total_price: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)

    purchase_order = relationship("PurchaseOrder", back_populates="items")


class Payment(Base):
    __tablename__ = "payments"

    id: Mapped[int] = int_pk()
    amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow, index=True)
    recipient_type: Mapped[str] = mapped_column(String(20), nullable=False)  # subcontractor|staff|supplier
    recipient_id: Mapped[int] = mapped_column(Integer, nullable=False)
    payment_type: Mapped[Optional[str]] = mapped_column(String(50))
    category: Mapped[Optional[str]] = mapped_column(String(100))
    payment_method: Mapped[Optional[str]] = mapped_column(String(50))
    reference: Mapped[Optional[str]] = mapped_column(String(255))
    description: Mapped[Optional[str]] = mapped_column(Text)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="pending")  # pending|completed|cancelled
    project_id: Mapped[Optional[int]] = mapped_column(Integer, ForeignKey("projects.id"))
    service_order_id: Mapped[Optional[int]] = mapped_column(Integer, ForeignKey("service_orders.id"))
    invoice_id: Mapped[Optional[int]] = mapped_column(Integer, ForeignKey("invoices.id"))
    purchase_order_id: Mapped[Optional[int]] = mapped_column(Integer, ForeignKey("purchase_orders.id"))
    created_by: Mapped[Optional[int]] = mapped_column(Integer, ForeignKey("users.id"))
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)

    creator = relationship("User", back_populates="payments")
    project = relationship("Project")


class Activity(Base):
    """Append-only log. user/project/client ids are plain integers, not foreign keys."""

    __tablename__ = "activities"

    id: Mapped[int] = int_pk()
    type: Mapped[str] = mapped_column(String(50), nullable=False)  # project_created, quote_sent, ...
    description: Mapped[str] = mapped_column(Text, nullable=False)
    user_id: Mapped[Optional[int]] = mapped_column(Integer, index=True)
    project_id: Mapped[Optional[int]] = mapped_column(Integer, index=True)
    client_id: Mapped[Optional[int]] = mapped_column(Integer, index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow, index=True)
