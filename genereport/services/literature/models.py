"""Literature search models"""

from typing import List, Optional

from pydantic import BaseModel


class LiteratureArticle(BaseModel):
    title: str
    pmid: Optional[str] = None
    journal: Optional[str] = None
    year: Optional[str] = None
    authors: Optional[str] = None
    url: str
    why_relevant: str


class LiteratureResponse(BaseModel):
    query: str
    articles: List[LiteratureArticle]
    disclaimer: str

    def to_dict(self) -> dict:
        return self.model_dump(exclude_none=True)
