from dataclasses import dataclass, field
from typing import List, Dict, Any

from models.summary import SummaryRequest


@dataclass
class BookMetadata:
    isbn: str
    title: str = "Unknown Title"
    authors: List[str] = field(default_factory=lambda: ["Unknown Author"])
    publisher: str = "Unknown Publisher"
    published_date: str = "Unknown Date"
    description: str = "No description available."
    page_count: int = 0
    categories: List[str] = field(default_factory=lambda: ["Uncategorized"])
    average_rating: float = 0.0
    ratings_count: int = 0
    image_links: Dict[str, str] = field(default_factory=dict)
    language: str = "en"

    def to_summary_request(self, target_language: str = "en") -> SummaryRequest:
        return SummaryRequest(
            title=self.title,
            authors=tuple(self.authors),
            isbn=self.isbn,
            description=self.description,
            categories=tuple(self.categories),
            publisher=self.publisher,
            published_date=self.published_date,
            page_count=self.page_count,
            source_language=self.language,
            target_language=target_language,
            average_rating=self.average_rating,
            ratings_count=self.ratings_count,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "isbn": self.isbn,
            "title": self.title,
            "authors": list(self.authors),
            "publisher": self.publisher,
            "publishedDate": self.published_date,
            "description": self.description,
            "pageCount": self.page_count,
            "categories": list(self.categories),
            "averageRating": self.average_rating,
            "ratingsCount": self.ratings_count,
            "imageLinks": dict(self.image_links),
            "language": self.language,
        }
