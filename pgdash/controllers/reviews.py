"""Guest reviews: list, detail, form and the average rating."""

from pgdash.controllers.resource_list import ResourceListController
from pgdash.models.review import Review
from pgdash.schemas.review import ReviewForm


class ReviewListController(ResourceListController[Review]):
    resource_name = "review"
    search_fields = ("guest_name", "comment")
    form_schema = ReviewForm

    def average_rating(self) -> float:
        """Mean rating rounded to one decimal; 0.0 with no reviews."""
        if not self.items:
            return 0.0
        return round(sum(review.rating for review in self.items) / len(self.items), 1)
