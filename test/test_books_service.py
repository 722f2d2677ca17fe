from unittest.mock import MagicMock

import pytest

from services.books_service import BooksService
from services.errors import BookNotFoundError, InvalidRequestError


def _service_returning(response):
    service = MagicMock()
    service.volumes.return_value.list.return_value.execute.return_value = response
    return service


def test_lookup_fills_missing_fields_with_defaults():
    google = _service_returning({"items": [{"volumeInfo": {
        "title": "Nexus",
        "authors": ["Yuval Noah Harari"],
        "pageCount": 528,
        "averageRating": 4.2,
        "imageLinks": {"thumbnail": "http://books.example/nexus.jpg"},
    }}]})

    book = BooksService(api_key="key", service=google).lookup_isbn("978-0-525-52002-4")

    google.volumes.return_value.list.assert_called_once_with(q="isbn:9780525520024")
    assert book.isbn == "9780525520024"
    assert book.title == "Nexus"
    assert book.publisher == "Unknown Publisher"
    assert book.categories == ["Uncategorized"]
    assert book.image_links["thumbnail"] == "http://books.example/nexus.jpg"
    assert book.image_links["large"] == ""


def test_lookup_without_items_is_not_found():
    with pytest.raises(BookNotFoundError):
        BooksService(api_key="key", service=_service_returning({"totalItems": 0})).lookup_isbn("123")


def test_lookup_requires_isbn():
    with pytest.raises(InvalidRequestError):
        BooksService(api_key="key", service=MagicMock()).lookup_isbn(" - ")


def test_metadata_converts_to_summary_request():
    google = _service_returning({"items": [{"volumeInfo": {
        "title": "Nexus", "authors": ["Yuval Noah Harari"], "language": "en",
    }}]})
    book = BooksService(api_key="key", service=google).lookup_isbn("9780525520024")

    request = book.to_summary_request("es")
    assert request.translation_applied is True
    assert request.authors == ("Yuval Noah Harari",)
