import pytest
from pydantic import ValidationError

from storefront.db import models, schemas
from storefront.db.repositories import reviews as reviews_repo
from storefront.services import review_import


def test_get_field_matches_case_and_space_insensitive():
    row = {"First Name": "Jane", "Review Text": "Lovely"}
    assert review_import.get_field(row, review_import.FIRST_NAME_COLUMNS) == "Jane"
    assert review_import.get_field(row, review_import.TEXT_COLUMNS) == "Lovely"
    assert review_import.get_field(row, review_import.RATING_COLUMNS) is None


@pytest.mark.parametrize(
    "value,expected",
    [(None, True), (True, True), (False, False), (1, True), (0, False), ("Yes", True), ("verified", True), ("no", False)],
)
def test_parse_verified(value, expected):
    assert review_import.parse_verified(value) is expected


def test_parse_tags():
    assert review_import.parse_tags("soothing, gentle ,") == ["soothing", "gentle"]
    assert review_import.parse_tags(["a", " ", "b"]) == ["a", "b"]
    assert review_import.parse_tags(None) == []


def test_parse_review_row_collects_errors():
    parsed = review_import.parse_review_row({"rating": "7"})
    assert parsed.errors == ["Missing name", "Missing review text", "Invalid rating (must be 1-5)"]

    ok = review_import.parse_review_row({"name": "Jane", "last": "Doe", "stars": "4.6", "review": "Great drops"})
    assert ok.errors == []
    assert ok.rating == 5
    assert ok.last_name == "Doe"


@pytest.mark.parametrize("raw,expected", [("4.5", 5), ("2.5", 3), ("1.4", 1), ("1", 1), ("5.0", 5)])
def test_half_star_ratings_round_up(raw, expected):
    parsed = review_import.parse_review_row({"name": "Jane", "text": "Lovely", "rating": raw})
    assert parsed.errors == []
    assert parsed.rating == expected


def test_import_requires_an_owner():
    with pytest.raises(ValidationError):
        schemas.ReviewImportRequest(csv_data=[])


def test_import_appends_and_counts_keywords(db_session, product_factory):
    product = product_factory()
    request = schemas.ReviewImportRequest(
        product_id=product.id,
        collection_name="ignored",
        csv_data=[
            {"first_name": "Jane", "last_name": "Doe", "rating": 5, "text": "No sting", "tags": "gentle, soothing"},
            {"first_name": "Sam", "text": "Works", "tags": "gentle"},
            {"first_name": "", "text": ""},
        ],
    )
    result = review_import.import_reviews(db_session, request)

    assert result.imported == 2
    assert result.errors == [{"row": 3, "errors": ["Missing name", "Missing review text"]}]
    reviews = reviews_repo.get_reviews(db_session, product_id=product.id)
    assert {r.author_initial for r in reviews} == {"Jane D.", "Sam"}
    assert all(r.collection_name is None for r in reviews)
    keywords = {k.keyword: k.count for k in reviews_repo.get_keywords(db_session, product_id=product.id)}
    assert keywords == {"gentle": 2, "soothing": 1}

    body = result.to_response()
    assert body["success"] is True and body["imported"] == 2 and "errors" in body


def test_import_replace_mode_resets_owner(db_session):
    owner = {"collection_name": "Eye Wipes"}
    first = schemas.ReviewImportRequest(csv_data=[{"name": "Jane", "text": "Soft", "tags": "soft"}], **owner)
    review_import.import_reviews(db_session, first)
    db_session.add(models.Review(collection_name="Other", author_name="Keep Me", text="Untouched"))
    db_session.commit()

    second = schemas.ReviewImportRequest(
        mode="replace", csv_data=[{"name": "Sam", "text": "Fresh", "tags": "fresh"}], **owner,
    )
    result = review_import.import_reviews(db_session, second)

    assert result.imported == 1
    assert [r.author_name for r in reviews_repo.get_reviews(db_session, collection_name="Eye Wipes")] == ["Sam"]
    assert [k.keyword for k in reviews_repo.get_keywords(db_session, collection_name="Eye Wipes")] == ["fresh"]
    assert reviews_repo.get_reviews(db_session, collection_name="Other")[0].author_name == "Keep Me"
    assert "errors" not in result.to_response()
