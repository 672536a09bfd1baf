"""View controllers for the dashboard pages."""

from pgdash.controllers.guests import GuestListController
from pgdash.controllers.rent import RentListController, RentSummary
from pgdash.controllers.resource_list import ResourceListController, ViewMode
from pgdash.controllers.reviews import ReviewListController

__all__ = [
    "GuestListController",
    "RentListController",
    "RentSummary",
    "ResourceListController",
    "ReviewListController",
    "ViewMode",
]
