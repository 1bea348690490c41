"""Request and error envelopes for the inbound operations"""
from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, Field, ValidationError, field_validator

from genereport.settings import settings


TranslateMode = Literal['auto', 'prebuilt_only']


class TranslateRequest(BaseModel):
    """Text submission: report excerpt plus optional tier preference"""
    text: str
    mode: TranslateMode = 'auto'

    @field_validator('text')
    @classmethod
    def _check_length(cls, v: str) -> str:
        if len(v.strip()) < settings.min_text_length:
            raise ValueError(
                f"Report text is too short to analyze (minimum {settings.min_text_length} characters)"
            )
        if len(v) > settings.max_text_length:
            raise ValueError(
                f"Report text must not exceed {settings.max_text_length:,} characters"
            )
        return v


class ClinvarRequest(BaseModel):
    query: str = Field(min_length=1, max_length=500)


class LiteratureRequest(BaseModel):
    genes: List[str] = Field(min_length=1, max_length=3)
    topics: Optional[List[str]] = Field(default=None, max_length=3)
    max_results: int = Field(default=5, ge=1, le=10)

    @field_validator('genes')
    @classmethod
    def _check_genes(cls, v: List[str]) -> List[str]:
        for g in v:
            if not 2 <= len(g.strip()) <= 20:
                raise ValueError('Each gene must be 2-20 characters')
        return v

    @field_validator('topics')
    @classmethod
    def _check_topics(cls, v: Optional[List[str]]) -> Optional[List[str]]:
        for t in v or []:
            if not 2 <= len(t.strip()) <= 80:
                raise ValueError('Each topic must be 2-80 characters')
        return v


class ErrorResponse(BaseModel):
    """Structured, user-facing failure"""
    error: str
    code: Optional[str] = None
    details: Optional[str] = None


class RateLimitedResponse(ErrorResponse):
    """Rate-limit exhaustion with quota metadata for retry timing"""
    error: str = 'Rate limit exceeded'
    code: Optional[str] = 'rate_limited'
    limit: int
    remaining: int
    reset_ms: int

    @property
    def retry_after_seconds(self) -> int:
        return max(1, -(-self.reset_ms // 1000))


def validation_details(exc: ValidationError) -> str:
    """Join pydantic error messages the way they are reported to callers"""
    messages = []
    for err in exc.errors():
        msg = err.get('msg', 'invalid value')
        # field_validator errors are prefixed with "Value error, "
        if msg.startswith('Value error, '):
            msg = msg[len('Value error, '):]
        loc = '.'.join(str(p) for p in err.get('loc', ()))
        messages.append(f"{loc}: {msg}" if loc else msg)
    return ', '.join(messages)


__all__ = [
    'TranslateMode',
    'TranslateRequest',
    'ClinvarRequest',
    'LiteratureRequest',
    'ErrorResponse',
    'RateLimitedResponse',
    'validation_details',
]
