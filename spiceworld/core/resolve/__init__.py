from .changes import has_changes, has_image_changes, has_product_changes, has_variant_changes
from .publish import (
    PublishDecision,
    determine_publish_status,
    publish_violations,
    status_after_category_change,
)
from .thumbnail import ThumbnailResolution, ThumbnailWinner, assign_thumbnail

__all__ = [
    "PublishDecision",
    "ThumbnailResolution",
    "ThumbnailWinner",
    "assign_thumbnail",
    "determine_publish_status",
    "has_changes",
    "has_image_changes",
    "has_product_changes",
    "has_variant_changes",
    "publish_violations",
    "status_after_category_change",
]
