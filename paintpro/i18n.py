"""
Message catalog keyed by locale.

Every user-facing literal (validation messages, badge labels, report headings)
is looked up here instead of being inlined where it is shown.
"""
from typing import Optional

from .config import settings


SUPPORTED_LOCALES = ("en", "es")

MESSAGES = {
    "en": {
        # Validation
        "error.invalid_payload": "Invalid {entity} data",
        "error.missing": "{field} is required",
        "error.invalid_date": "Invalid date for {field}",
        "error.invalid_decimal": "{field} must be a number",
        "error.too_precise": "{field} must have at most {places} decimal places",
        "error.invalid_choice": "{field} must be one of: {choices}",
        "error.too_small": "{field} must be at least {limit}",
        "error.too_large": "{field} must be at most {limit}",
        "error.invalid_type": "{field} has an invalid value",
        "error.not_found": "{entity} not found",
        "error.conflict": "{entity} conflicts with an existing record",
        "error.in_use": "{entity} is still referenced by other records",
        # Entities
        "entity.client": "client",
        "entity.project": "project",
        "entity.quote": "quote",
        "entity.service_order": "service order",
        "entity.staff": "staff",
        "entity.subcontractor": "subcontractor",
        "entity.supplier": "supplier",
        "entity.invoice": "invoice",
        "entity.payment": "payment",
        "entity.purchase_order": "purchase order",
        "entity.activity": "activity",
        "entity.user": "user",
        "entity.request": "request",
        # Project status
        "status.project.pending": "Pending Visit",
        "status.project.quoted": "Quote Sent",
        "status.project.approved": "Quote Approved",
        "status.project.preparing": "In Preparation",
        "status.project.in_progress": "In Progress",
        "status.project.reviewing": "Final Review",
        "status.project.completed": "Completed",
        "status.project.archived": "Archived",
        "priority.high": "High",
        "priority.medium": "Medium",
        "priority.low": "Low",
        "priority.unknown": "Normal",
        "status.quote.draft": "Draft",
        "status.quote.sent": "Sent",
        "status.quote.approved": "Approved",
        "status.quote.rejected": "Rejected",
        "status.service_order.pending": "Pending",
        "status.service_order.in_progress": "In Progress",
        "status.service_order.completed": "Completed",
        "status.invoice.draft": "Draft",
        "status.invoice.sent": "Sent",
        "status.invoice.paid": "Paid",
        "status.invoice.overdue": "Overdue",
        "status.invoice.cancelled": "Cancelled",
        "status.payment.pending": "Pending",
        "status.payment.completed": "Completed",
        "status.payment.cancelled": "Cancelled",
        "status.purchase_order.draft": "Draft",
        "status.purchase_order.sent": "Sent",
        "status.purchase_order.received": "Received",
        "status.purchase_order.cancelled": "Cancelled",
        "status.staff.available": "Available",
        "status.staff.assigned": "Assigned",
        "status.staff.on_leave": "On Leave",
        "status.subcontractor.active": "Active",
        "status.subcontractor.inactive": "Inactive",
        "status.subcontractor.blacklisted": "Blacklisted",
        "status.supplier.active": "Active",
        "status.supplier.inactive": "Inactive",
        # Recipient types
        "recipient.subcontractor": "Subcontractors",
        "recipient.employee": "Employees",
        "recipient.supplier": "Suppliers",
        "recipient.other": "Other",
        # Relative dates
        "date.none": "Not set",
        "date.today": "today",
        "date.yesterday": "yesterday",
        "date.tomorrow": "tomorrow",
        "date.days_ago": "{n} days ago",
        "date.in_days": "in {n} days",
        # Financial report
        "report.title": "Financial Report",
        "report.period": "Period: {start} - {end}",
        "report.total_income": "Total Income",
        "report.total_expenses": "Total Expenses",
        "report.net_benefit": "Net Benefit",
        "report.date": "Date",
        "report.income": "Income",
        "report.expense": "Expenses",
        "report.profit": "Profit",
        "report.by_category": "Expenses by Category",
        "report.by_recipient": "Expenses by Recipient Type",
        "report.page": "Page {page} of {pages}",
        "report.no_data": "No data for this period",
    },
    "es": {
        "error.invalid_payload": "Datos de {entity} inválidos",
        "error.missing": "{field} es requerido",
        "error.invalid_date": "Fecha inválida para {field}",
        "error.invalid_decimal": "{field} debe ser un número",
        "error.too_precise": "{field} debe tener como máximo {places} decimales",
        "error.invalid_choice": "{field} debe ser uno de: {choices}",
        "error.too_small": "{field} debe ser al menos {limit}",
        "error.too_large": "{field} debe ser como máximo {limit}",
        "error.invalid_type": "{field} tiene un valor inválido",
        "error.not_found": "{entity} no encontrado",
        "error.conflict": "{entity} entra en conflicto con un registro existente",
        "error.in_use": "{entity} sigue referenciado por otros registros",
        "entity.client": "cliente",
        "entity.project": "proyecto",
        "entity.quote": "cotización",
        "entity.service_order": "orden de servicio",
        "entity.staff": "personal",
        "entity.subcontractor": "subcontratista",
        "entity.supplier": "proveedor",
        "entity.invoice": "factura",
        "entity.payment": "pago",
        "entity.purchase_order": "orden de compra",
        "entity.activity": "actividad",
        "entity.user": "usuario",
        "entity.request": "solicitud",
        "status.project.pending": "Visita Pendiente",
        "status.project.quoted": "Cotización Enviada",
        "status.project.approved": "Cotización Aprobada",
        "status.project.preparing": "En Preparación",
        "status.project.in_progress": "En Progreso",
        "status.project.reviewing": "Revisión Final",
        "status.project.completed": "Terminado",
        "status.project.archived": "Archivado",
        "priority.high": "Alta",
        "priority.medium": "Media",
        "priority.low": "Baja",
        "priority.unknown": "Normal",
        "status.quote.draft": "Borrador",
        "status.quote.sent": "Enviada",
        "status.quote.approved": "Aprobada",
        "status.quote.rejected": "Rechazada",
        "status.service_order.pending": "Pendiente",
        "status.service_order.in_progress": "En Progreso",
        "status.service_order.completed": "Completada",
        "status.invoice.draft": "Borrador",
        "status.invoice.sent": "Enviada",
        "status.invoice.paid": "Pagada",
        "status.invoice.overdue": "Vencida",
        "status.invoice.cancelled": "Cancelada",
        "status.payment.pending": "Pendiente",
        "status.payment.completed": "Completado",
        "status.payment.cancelled": "Cancelado",
        "status.purchase_order.draft": "Borrador",
        "status.purchase_order.sent": "Enviada",
        "status.purchase_order.received": "Recibida",
        "status.purchase_order.cancelled": "Cancelada",
        "status.staff.available": "Disponible",
        "status.staff.assigned": "Asignado",
        "status.staff.on_leave": "De Permiso",
        "status.subcontractor.active": "Activo",
        "status.subcontractor.inactive": "Inactivo",
        "status.subcontractor.blacklisted": "Lista Negra",
        "status.supplier.active": "Activo",
        "status.supplier.inactive": "Inactivo",
        "recipient.subcontractor": "Subcontratistas",
        "recipient.employee": "Empleados",
        "recipient.supplier": "Proveedores",
        "recipient.other": "Otros",
        "date.none": "No definida",
        "date.today": "hoy",
        "date.yesterday": "ayer",
        "date.tomorrow": "mañana",
        "date.days_ago": "hace {n} días",
        "date.in_days": "en {n} días",
        "report.title": "Reporte Financiero",
        "report.period": "Periodo: {start} - {end}",
        "report.total_income": "Ingresos Totales",
        "report.total_expenses": "Gastos Totales",
        "report.net_benefit": "Beneficio Neto",
        "report.date": "Fecha",
        "report.income": "Ingresos",
        "report.expense": "Gastos",
        "report.profit": "Beneficio",
        "report.by_category": "Gastos por Categoría",
        "report.by_recipient": "Gastos por Tipo de Destinatario",
        "report.page": "Página {page} de {pages}",
        "report.no_data": "Sin datos para este periodo",
    },
}


def normalize_locale(locale: Optional[str]) -> str:
    if locale:
        tag = locale.strip().lower().replace("_", "-").split("-")[0]
        if tag in SUPPORTED_LOCALES:
            return tag
    default = (settings.default_locale or "en").lower()
    return default if default in SUPPORTED_LOCALES else "en"


def resolve_locale(accept_language: Optional[str]) -> str:
    """Pick the first supported language from an Accept-Language header."""
    if accept_language:
        ranked = []
        for index, part in enumerate(accept_language.split(",")):
            piece = part.strip()
            if not piece:
                continue
            tag, _, params = piece.partition(";")
            quality = 1.0
            if params.strip().startswith("q="):
                try:
                    quality = float(params.strip()[2:])
                except ValueError:
                    quality = 0.0
            ranked.append((-quality, index, tag.strip()))
        for _, _, tag in sorted(ranked):
            short = tag.lower().split("-")[0]
            if short in SUPPORTED_LOCALES:
                return short
    return normalize_locale(None)


def translate(key: str, locale: Optional[str] = None, **params) -> str:
    loc = normalize_locale(locale)
    template = MESSAGES.get(loc, {}).get(key)
    if template is None:
        template = MESSAGES.get(normalize_locale(None), {}).get(key)
    if template is None:
        template = MESSAGES["en"].get(key, key)
    try:
        return template.format(**params)
    except (KeyError, IndexError):
        return template
