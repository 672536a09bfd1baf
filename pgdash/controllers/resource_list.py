"""Generic list/detail/form controller for one remote resource.

Holds the session's copy of a collection and the current view mode:

    LISTING ──add_new──▶ EDITING(None)
    LISTING ──view_details(x)──▶ VIEWING(x)
    LISTING/VIEWING ──edit(x)──▶ EDITING(x)
    EDITING ──submit ok / cancel──▶ LISTING
    VIEWING ──back──▶ LISTING

The cache is never patched locally: every successful write reloads the whole
collection. Remote failures are logged and surfaced as messages; the previous
collection and any entered form values are kept.
"""

import logging
import math
from collections.abc import Awaitable, Callable
from datetime import date
from enum import Enum
from typing import Any, ClassVar, Generic, Protocol, TypeVar

from pydantic import BaseModel, ValidationError

from pgdash.api.resources import ResourceAPI
from pgdash.exceptions import ApiRequestError, InvalidTransition
from pgdash.schemas.common import field_errors

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


class ViewMode(str, Enum):
    LISTING = "listing"
    VIEWING = "viewing"
    EDITING = "editing"


class FormSchema(Protocol[ModelT]):
    """What a form schema must provide (see ``pgdash.schemas``)."""

    @classmethod
    def model_validate(cls, obj: Any) -> "FormSchema[ModelT]": ...

    @classmethod
    def from_model(cls, model: ModelT) -> dict[str, Any]: ...

    def to_model(self, record_id: str | None = None, previous: ModelT | None = None) -> ModelT: ...


class ResourceListController(Generic[ModelT]):
    """List/detail/form state for one resource type."""

    resource_name: ClassVar[str] = "record"
    search_fields: ClassVar[tuple[str, ...]] = ()
    form_schema: ClassVar[type[FormSchema]]

    def __init__(self, api: ResourceAPI[ModelT], page_size: int | None = None) -> None:
        self.api = api
        self.page_size = page_size

        self.items: list[ModelT] = []
        self.loading = False
        self.error: str | None = None

        self.mode = ViewMode.LISTING
        self.selected: ModelT | None = None
        self.draft: dict[str, Any] = {}
        self.field_errors: dict[str, str] = {}
        self.form_error: str | None = None
        self.submitting = False

        self.search_term = ""
        self.page = 1
        self._closed = False

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    async def load(self) -> list[ModelT]:
        """Fetch the full collection. On failure the previous items stay."""
        self.loading = True
        try:
            items = await self.api.list()
        except ApiRequestError:
            logger.error("Failed to load %s records", self.resource_name, exc_info=True)
            if not self._closed:
                self.error = f"Failed to load {self.resource_name} records."
            return self.items
        finally:
            if not self._closed:
                self.loading = False

        if self._closed:
            return items
        self.items = items
        self.error = None
        self._clamp_page()
        return self.items

    # ------------------------------------------------------------------
    # View-mode transitions
    # ------------------------------------------------------------------

    def add_new(self) -> None:
        self._require(ViewMode.LISTING)
        self._enter_form(None, {})

    async def view_details(self, item: ModelT) -> bool:
        """Re-fetch ``item`` by id and show it. Stays in LISTING on failure."""
        self._require(ViewMode.LISTING)
        try:
            full = await self.api.get(item.id)
        except ApiRequestError:
            logger.error("Failed to load %s %s", self.resource_name, item.id, exc_info=True)
            if not self._closed:
                self.error = f"Failed to load {self.resource_name} details."
            return False

        # Ignore the response if the view moved on while it was in flight.
        if self._closed or full is None or self.mode is not ViewMode.LISTING:
            return False
        self.selected = full
        self.mode = ViewMode.VIEWING
        return True

    def edit(self, item: ModelT | None = None) -> None:
        """Open the form for ``item`` (defaults to the record being viewed)."""
        self._require(ViewMode.LISTING, ViewMode.VIEWING)
        target = item if item is not None else self.selected
        if target is None:
            raise InvalidTransition(f"No {self.resource_name} selected to edit")
        self._enter_form(target, self.form_schema.from_model(target))

    def cancel(self) -> None:
        self._require(ViewMode.EDITING)
        self._to_listing()

    def back(self) -> None:
        self._require(ViewMode.VIEWING)
        self._to_listing()

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    async def submit(self, data: dict[str, Any]) -> bool:
        """Create or update depending on what the form was opened for."""
        self._require(ViewMode.EDITING)
        if self.selected is None:
            return await self.create(data)
        return await self.update(self.selected.id, data)

    async def create(self, data: dict[str, Any]) -> bool:
        self._require(ViewMode.EDITING)
        form = self._validate(data)
        if form is None:
            return False
        model = form.to_model()
        saved = await self._save(lambda: self.api.create(model))
        if saved and not self._closed:
            self._after_add()
        return saved

    async def update(self, record_id: str, data: dict[str, Any]) -> bool:
        self._require(ViewMode.EDITING)
        form = self._validate(data)
        if form is None:
            return False
        previous = self.selected if self.selected is not None and self.selected.id == record_id else None
        model = form.to_model(record_id, previous)
        return await self._save(lambda: self.api.update(record_id, model))

    async def delete(self, record_id: str) -> bool:
        """Delete remotely, then reload."""
        if self.mode is ViewMode.EDITING:
            raise InvalidTransition(f"Cannot delete a {self.resource_name} while the form is open")
        try:
            await self.api.delete(record_id)
        except ApiRequestError:
            logger.error("Failed to delete %s %s", self.resource_name, record_id, exc_info=True)
            if not self._closed:
                self.error = f"Failed to delete {self.resource_name}."
            return False
        if self._closed:
            return True
        if self.selected is not None and self.selected.id == record_id:
            self._to_listing()
        await self.load()
        return True

    # ------------------------------------------------------------------
    # Filtering & pagination (local only)
    # ------------------------------------------------------------------

    def filter(self, term: str) -> list[ModelT]:
        if term != self.search_term:
            self.search_term = term
            self.page = 1
        return self.filtered

    @property
    def filtered(self) -> list[ModelT]:
        term = self.search_term.lower()
        if not term:
            return list(self.items)
        return [item for item in self.items if self._matches(item, term)]

    @property
    def total_pages(self) -> int:
        if not self.page_size:
            return 1
        return math.ceil(len(self.filtered) / self.page_size)

    @property
    def page_items(self) -> list[ModelT]:
        items = self.filtered
        if not self.page_size:
            return items
        start = (self.page - 1) * self.page_size
        return items[start : start + self.page_size]

    def go_to_page(self, page: int) -> bool:
        """Move to ``page``. Out-of-range requests are ignored."""
        if 1 <= page <= self.total_pages:
            self.page = page
            return True
        return False

    # ------------------------------------------------------------------
    # Teardown
    # ------------------------------------------------------------------

    def close(self) -> None:
        """Detach the view. Requests still in flight will not touch state."""
        self._closed = True

    @property
    def closed(self) -> bool:
        return self._closed

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _after_add(self) -> None:
        """Hook run after a successful create."""

    def _matches(self, item: ModelT, term: str) -> bool:
        return any(term in self._search_text(getattr(item, name, None)).lower() for name in self.search_fields)

    @staticmethod
    def _search_text(value: Any) -> str:
        if value is None:
            return ""
        if isinstance(value, date):
            return value.isoformat()
        if isinstance(value, Enum):
            return str(value.value)
        return str(value)

    def _require(self, *modes: ViewMode) -> None:
        if self.mode not in modes:
            allowed = ", ".join(m.value for m in modes)
            raise InvalidTransition(f"{self.resource_name}: expected mode {allowed}, got {self.mode.value}")

    def _enter_form(self, target: ModelT | None, values: dict[str, Any]) -> None:
        self.selected = target
        self.draft = values
        self.field_errors = {}
        self.form_error = None
        self.mode = ViewMode.EDITING

    def _to_listing(self) -> None:
        self.mode = ViewMode.LISTING
        self.selected = None
        self.draft = {}
        self.field_errors = {}
        self.form_error = None

    def _clamp_page(self) -> None:
        if self.page > max(self.total_pages, 1):
            self.page = max(self.total_pages, 1)

    def _validate(self, data: dict[str, Any]) -> FormSchema | None:
        self.draft = dict(data)
        self.form_error = None
        try:
            form = self.form_schema.model_validate(data)
        except ValidationError as exc:
            self.field_errors = field_errors(exc)
            return None
        self.field_errors = {}
        return form

    async def _save(self, call: Callable[[], Awaitable[Any]]) -> bool:
        self.submitting = True
        try:
            await call()
        except ApiRequestError:
            logger.error("Failed to save %s", self.resource_name, exc_info=True)
            if not self._closed:
                self.form_error = f"Failed to save {self.resource_name}. Please try again."
            return False
        finally:
            if not self._closed:
                self.submitting = False

        if self._closed:
            return True
        await self.load()
        if not self._closed:
            self._to_listing()
        return True
