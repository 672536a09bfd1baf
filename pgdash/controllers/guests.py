"""Guest directory: paginated list, detail view and the registration form."""

from pgdash.api.resources import ResourceAPI
from pgdash.config import Settings
from pgdash.controllers.resource_list import ResourceListController
from pgdash.models.guest import Guest
from pgdash.schemas.guest import GuestForm


class GuestListController(ResourceListController[Guest]):
    resource_name = "guest"
    search_fields = ("name", "email", "id")
    form_schema = GuestForm

    def __init__(self, api: ResourceAPI[Guest], page_size: int = 6) -> None:
        super().__init__(api, page_size=page_size)

    @classmethod
    def from_settings(cls, api: ResourceAPI[Guest], settings: Settings) -> "GuestListController":
        return cls(api, page_size=settings.guest_page_size)

    def _after_add(self) -> None:
        # New guests land on the first page.
        self.page = 1
