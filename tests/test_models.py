import pytest
from pydantic import ValidationError

from app.models import CatalogItem, PersonItem


def test_catalog_item_reads_api_field_names():
    item = CatalogItem.model_validate(
        {
            "id": 27205,
            "title": "Inception",
            "overview": "A thief who steals corporate secrets",
            "release_date": "2010-07-15",
            "poster_path": "/poster.jpg",
            "backdrop_path": "/backdrop.jpg",
            "vote_average": 8.4,
            "popularity": 99.1,
        }
    )

    assert item.title == "Inception"
    assert item.release_date == "2010-07-15"
    assert item.poster_url == "/poster.jpg"
    assert item.backdrop_url == "/backdrop.jpg"
    assert item.vote_average == 8.4


def test_tv_records_use_name_and_first_air_date():
    item = CatalogItem.model_validate(
        {"id": 1399, "name": "Game of Thrones", "first_air_date": "2011-04-17"}
    )

    assert item.title == "Game of Thrones"
    assert item.release_date == "2011-04-17"


def test_missing_optional_fields_default_to_none():
    item = CatalogItem.model_validate({"id": 1, "title": "X"})

    assert item.overview is None
    assert item.release_date is None
    assert item.poster_url is None
    assert item.backdrop_url is None
    assert item.vote_average is None


@pytest.mark.parametrize(
    ("raw", "expected"),
    [("7.25", 7.25), ("n/a", None), (None, None), (12, 10.0), (-3, 0.0), (True, None)],
)
def test_vote_average_is_coerced_into_range(raw, expected):
    item = CatalogItem.model_validate({"id": 1, "vote_average": raw})
    assert item.vote_average == expected


def test_blank_strings_become_missing():
    item = CatalogItem.model_validate(
        {"id": 1, "title": "X", "release_date": "", "poster_path": "  "}
    )

    assert item.release_date is None
    assert item.poster_url is None


def test_catalog_item_requires_id():
    with pytest.raises(ValidationError):
        CatalogItem.model_validate({"title": "No id"})


def test_catalog_items_are_immutable():
    item = CatalogItem(id=1, title="X")
    with pytest.raises(ValidationError):
        item.title = "Y"


def test_with_artwork_resolves_relative_paths():
    item = CatalogItem.model_validate(
        {"id": 1, "poster_path": "/p.jpg", "backdrop_path": "https://cdn.example.com/b.jpg"}
    )

    resolved = item.with_artwork("https://image.example.com/w500")

    assert resolved.poster_url == "https://image.example.com/w500/p.jpg"
    assert resolved.backdrop_url == "https://cdn.example.com/b.jpg"
    assert item.poster_url == "/p.jpg"


def test_person_item_reads_api_field_names():
    person = PersonItem.model_validate(
        {
            "id": 31,
            "name": "Tom Hanks",
            "profile_path": "/hanks.jpg",
            "known_for_department": "Acting",
        }
    )

    assert person.name == "Tom Hanks"
    assert person.known_for_department == "Acting"
    assert person.with_artwork("https://img.example.com").profile_url == (
        "https://img.example.com/hanks.jpg"
    )
