# tests/test_sorting.py

from client.sorting import SortController


def test_starts_on_priority_ascending():
    sort = SortController()

    assert (sort.order_field, sort.ascending) == ("priority", True)
    assert sort.label == "Sort by age"


def test_leaving_priority_lands_on_newest_first():
    sort = SortController()
    sort.toggle()

    assert sort.sort_type == "age"
    assert sort.order_field == "created_at"
    assert sort.ascending is False
    assert sort.label == "Newest first"


def test_age_toggles_direction_without_returning_to_priority():
    sort = SortController()
    sort.toggle()
    sort.toggle()
    assert (sort.sort_type, sort.sort_order, sort.label) == ("age", "asc", "Oldest first")

    sort.toggle()
    assert (sort.sort_type, sort.sort_order) == ("age", "desc")


def test_priority_after_asc_age_still_goes_to_desc():
    sort = SortController()
    sort.toggle()
    sort.toggle()
    sort.select_priority()
    sort.toggle()

    assert (sort.sort_type, sort.sort_order) == ("age", "desc")
