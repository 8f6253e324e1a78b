"""
Seed the local database with sample clients, projects, quotes, invoices and
payments.

Usage:
  python scripts/seed_test_data.py

This script is idempotent: running it multiple times will upsert the same
records based on natural keys (email for clients, title for projects,
invoice number for invoices, reference for payments).
"""
import os
import sys
from datetime import datetime, timedelta, timezone
from decimal import Decimal

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from dotenv import load_dotenv

load_dotenv()

from paintpro.db import SessionLocal, Base, engine
from paintpro.models.models import Client, Invoice, Payment, Project, Quote, Subcontractor, Supplier
from paintpro.services.bootstrap import seed_initial_data


def _upsert(session, model, lookup: dict, **fields):
    row = session.query(model).filter_by(**lookup).first()
    if row is None:
        row = model(**lookup, **fields)
    else:
        for k, v in fields.items():
            setattr(row, k, v)
    session.add(row)
    session.flush()
    return row


def ensure_client(session, email: str, name: str, **kwargs) -> Client:
    return _upsert(session, Client, {"email": email}, name=name, **kwargs)


def ensure_project(session, client: Client, title: str, **kwargs) -> Project:
    return _upsert(session, Project, {"title": title}, client_id=client.id, **kwargs)


def ensure_quote(session, project: Project, total: Decimal, **kwargs) -> Quote:
    return _upsert(session, Quote, {"project_id": project.id}, total_estimate=total, **kwargs)


def ensure_invoice(session, number: str, project: Project, total: Decimal, **kwargs) -> Invoice:
    return _upsert(
        session,
        Invoice,
        {"invoice_number": number},
        project_id=project.id,
        client_id=project.client_id,
        amount=total,
        tax=Decimal("0"),
        total_amount=total,
        **kwargs,
    )


def ensure_payment(session, reference: str, amount: Decimal, **kwargs) -> Payment:
    return _upsert(session, Payment, {"reference": reference}, amount=amount, **kwargs)


def main() -> None:
    # Ensure tables exist (safe for SQLite dev)
    Base.metadata.create_all(bind=engine)

    session = SessionLocal()
    try:
        seed_initial_data(session)
        now = datetime.now(timezone.utc)

        smith = ensure_client(
            session,
            "jane.smith@example.com",
            "Jane Smith",
            phone="555-0100",
            address="12 Maple St",
            classification="residential",
            type="client",
        )
        harbor = ensure_client(
            session,
            "facilities@harbor.example",
            "Harbor Office Park",
            phone="555-0200",
            address="400 Harbor Blvd",
            classification="commercial",
            type="client",
        )

        kitchen = ensure_project(
            session,
            smith,
            "Smith kitchen repaint",
            description="Walls, ceiling and cabinets.",
            address=smith.address,
            service_type="interior",
            status="approved",
            priority="medium",
            progress=20,
            start_date=now - timedelta(days=10),
        )
        lobby = ensure_project(
            session,
            harbor,
            "Harbor lobby refresh",
            description="Lobby and hallway walls, two coats.",
            address=harbor.address,
            service_type="commercial",
            status="in_progress",
            priority="high",
            progress=60,
            start_date=now - timedelta(days=20),
        )

        ensure_quote(session, kitchen, Decimal("3200.00"), status="approved", approved_date=now - timedelta(days=12))
        ensure_quote(session, lobby, Decimal("12500.00"), status="sent", sent_date=now - timedelta(days=25))

        ensure_invoice(session, "INV-SEED-0001", kitchen, Decimal("1600.00"), status="paid", issue_date=now - timedelta(days=7), paid_date=now - timedelta(days=3))
        ensure_invoice(session, "INV-SEED-0002", lobby, Decimal("6250.00"), status="sent", issue_date=now - timedelta(days=5))

        crew = _upsert(session, Subcontractor, {"name": "Rivera Drywall"}, specialty="drywall", phone="555-0300", status="active")
        paint_store = _upsert(session, Supplier, {"name": "Coastal Paint Supply"}, company="Coastal Paint Supply", category="paint", status="active")

        ensure_payment(
            session,
            "SEED-PAY-0001",
            Decimal("850.00"),
            date=now - timedelta(days=6),
            recipient_type="supplier",
            recipient_id=paint_store.id,
            category="materials",
            status="completed",
            project_id=kitchen.id,
        )
        ensure_payment(
            session,
            "SEED-PAY-0002",
            Decimal("2400.00"),
            date=now - timedelta(days=4),
            recipient_type="subcontractor",
            recipient_id=crew.id,
            category="labor",
            status="completed",
            project_id=lobby.id,
        )

        session.commit()
        print("Seed completed: clients, projects, quotes, invoices and payments upserted.")
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


if __name__ == "__main__":
    main()
