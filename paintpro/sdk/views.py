"""
List/detail view state: a cached collection plus client-side filters and
badge/format helpers for rendering rows.
"""
from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Any, Callable, Dict, List, Optional, Tuple

from ..i18n import translate
from ..services.labels import Badge, format_currency, priority_badge, status_badge
from .cache import QueryCache
from .forms import RESOURCES


__all__ = ["ListView", "ViewConfig", "VIEWS", "format_currency", "relative_date"]


@dataclass(frozen=True)
class ViewConfig:
    search_fields: Tuple[str, ...]
    status_field: Optional[str] = "status"
    category_field: Optional[str] = None


VIEWS: Dict[str, ViewConfig] = {
    "clients": ViewConfig(("name", "email", "phone", "address"), status_field=None, category_field="classification"),
    "projects": ViewConfig(("title", "description", "address"), category_field="serviceType"),
    "quotes": ViewConfig(("notes",)),
    "service_orders": ViewConfig(("details", "specialInstructions", "materialsRequired")),
    "staff": ViewConfig(("name", "role", "email", "phone"), status_field="availability", category_field="role"),
    "subcontractors": ViewConfig(("name", "company", "specialty", "email"), category_field="specialty"),
    "suppliers": ViewConfig(("name", "company", "category", "contactName", "email"), category_field="category"),
    "invoices": ViewConfig(("invoiceNumber", "notes")),
    "payments": ViewConfig(("description", "reference", "category"), category_field="category"),
    "purchase_orders": ViewConfig(("orderNumber", "notes")),
}


def _as_datetime(value: Any) -> Optional[datetime]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    else:
        try:
            parsed = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
        except ValueError:
            return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def relative_date(value: Any, now: Optional[datetime] = None, locale: Optional[str] = None) -> str:
    """Calendar-day distance from ``now``: "today", "3 days ago", "in 2 days"."""
    moment = _as_datetime(value)
    if moment is None:
        return translate("date.none", locale)
    now = now or datetime.now(timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    days = (now.astimezone(timezone.utc).date() - moment.astimezone(timezone.utc).date()).days
    if days == 0:
        return translate("date.today", locale)
    if days == 1:
        return translate("date.yesterday", locale)
    if days == -1:
        return translate("date.tomorrow", locale)
    if days > 0:
        return translate("date.days_ago", locale, n=days)
    return translate("date.in_days", locale, n=-days)


class ListView:
    def __init__(
        self,
        cache: QueryCache,
        resource: str,
        params: Optional[dict] = None,
        locale: Optional[str] = None,
        on_change: Optional[Callable[[List[dict]], None]] = None,
    ):
        self.cache = cache
        self.resource = resource
        self.entity = RESOURCES[resource].entity
        self.path = RESOURCES[resource].path
        self.config = VIEWS[resource]
        self.params = params
        self.locale = locale
        self.on_change = on_change
        self.items: List[dict] = []
        self.search = ""
        self.status: Optional[str] = None
        self.category: Optional[str] = None
        self._unsubscribe = cache.subscribe(self.path, params, self._refresh)

    def _refresh(self, data: Any) -> None:
        self.items = list(data or [])
        if self.on_change is not None:
            self.on_change(self.visible())

    async def load(self, force: bool = False) -> List[dict]:
        self.items = list(await self.cache.fetch(self.path, self.params, force=force) or [])
        return self.visible()

    def close(self) -> None:
        self._unsubscribe()

    def _matches_search(self, item: dict) -> bool:
        needle = self.search.strip().lower()
        if not needle:
            return True
        for field in self.config.search_fields:
            value = item.get(field)
            if value is not None and needle in str(value).lower():
                return True
        return False

    def visible(self) -> List[dict]:
        rows = []
        for item in self.items:
            if not self._matches_search(item):
                continue
            if self.status and self.config.status_field and item.get(self.config.status_field) != self.status:
                continue
            if self.category and self.config.category_field and item.get(self.config.category_field) != self.category:
                continue
            rows.append(item)
        return rows

    def badge(self, item: dict) -> Optional[Badge]:
        if not self.config.status_field:
            return None
        return status_badge(self.entity, item.get(self.config.status_field), self.locale)

    def priority(self, item: dict) -> Badge:
        return priority_badge(item.get("priority"), self.locale)

    def detail(self, record_id: int) -> Optional[dict]:
        for item in self.items:
            if item.get("id") == record_id:
                return item
        return None
