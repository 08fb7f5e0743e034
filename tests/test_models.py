import pytest

from relax_search.models import Rating, SearchQuery, ValidationError


def test_search_query_strips_term_and_freezes_locations():
    query = SearchQuery.build("  pizza ", ["Омск", "Томск"])
    assert query.term == "pizza"
    assert query.locations == ("Омск", "Томск")


@pytest.mark.parametrize("term", ["", " ", None])
def test_search_query_rejects_empty_term(term):
    with pytest.raises(ValidationError):
        SearchQuery.build(term, ["Омск"])


@pytest.mark.parametrize(
    "value, positive",
    [(None, False), (0.0, False), (-1.0, False), (float("nan"), False), (0.1, True), (5.0, True)],
)
def test_rating_is_positive(value, positive):
    assert Rating("1", value).is_positive is positive
