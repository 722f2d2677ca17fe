from typing import Optional

from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from config import GOOGLE_BOOKS_API_KEY
from models.book import BookMetadata
from services.errors import BookNotFoundError, InvalidRequestError, UpstreamError
from services.logging_service import get_logger


class BooksService:
    """Looks book metadata up in the Google Books API."""

    def __init__(self, api_key: Optional[str] = None, service=None):
        self.api_key = api_key if api_key is not None else GOOGLE_BOOKS_API_KEY
        self._service = service

    @property
    def service(self):
        if self._service is None:
            self._service = build(
                "books", "v1",
                developerKey=self.api_key or None,
                cache_discovery=False,
            )
        return self._service

    def lookup_isbn(self, isbn: str) -> BookMetadata:
        """Returns the first volume matching `isbn`, with defaults for missing fields."""
        isbn = (isbn or "").replace("-", "").strip()
        if not isbn:
            raise InvalidRequestError("Invalid request. ISBN is required.")

        try:
            response = self.service.volumes().list(q=f"isbn:{isbn}").execute()
        except HttpError as e:
            get_logger().error("Google Books lookup failed", isbn=isbn, status=e.resp.status)
            raise UpstreamError("Failed to fetch book information.") from e

        items = response.get("items") or []
        if not items:
            raise BookNotFoundError("Book not found. Please check the ISBN and try again.")

        volume_info = items[0].get("volumeInfo", {})
        image_links = volume_info.get("imageLinks") or {}

        return BookMetadata(
            isbn=isbn,
            title=volume_info.get("title") or "Unknown Title",
            authors=volume_info.get("authors") or ["Unknown Author"],
            publisher=volume_info.get("publisher") or "Unknown Publisher",
            published_date=volume_info.get("publishedDate") or "Unknown Date",
            description=volume_info.get("description") or "No description available.",
            page_count=volume_info.get("pageCount") or 0,
            categories=volume_info.get("categories") or ["Uncategorized"],
            average_rating=volume_info.get("averageRating") or 0.0,
            ratings_count=volume_info.get("ratingsCount") or 0,
            image_links={
                key: image_links.get(key, "")
                for key in ("thumbnail", "small", "medium", "large")
            },
            language=volume_info.get("language") or "en",
        )
