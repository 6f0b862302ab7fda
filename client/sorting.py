from typing import Literal

SortType = Literal["priority", "age"]
SortOrder = Literal["asc", "desc"]


class SortController:
    """Presentation order: manual priority, or age in either direction"""

    def __init__(self):
        self.sort_type: SortType = "priority"
        self.sort_order: SortOrder = "asc"

    def toggle(self) -> None:
        # Leaving priority always starts with newest first
        if self.sort_type == "priority":
            self.sort_type = "age"
            self.sort_order = "desc"
        else:
            self.sort_order = "desc" if self.sort_order == "asc" else "asc"

    def select_priority(self) -> None:
        self.sort_type = "priority"
        self.sort_order = "asc"

    @property
    def order_field(self) -> str:
        return "priority" if self.sort_type == "priority" else "created_at"

    @property
    def ascending(self) -> bool:
        return self.sort_order == "asc"

    @property
    def label(self) -> str:
        if self.sort_type == "priority":
            return "Sort by age"
        return "Oldest first" if self.sort_order == "asc" else "Newest first"
