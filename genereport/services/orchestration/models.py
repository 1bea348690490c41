"""Orchestration data models"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from genereport.models.translation import TranslationResult
from genereport.services.admission import RateLimitResult
from genereport.services.classification import PrebuiltMatch


class TierRoute(Enum):
    """Which tier produced (or refused to produce) the result"""

    PREBUILT = "prebuilt"  # template match, no network
    PREBUILT_ONLY = "prebuilt_only"  # no template, external calls disabled
    GENERATIVE = "generative"  # validated provider output
    FALLBACK = "fallback"  # provider output failed the contract
    RATE_LIMITED = "rate_limited"  # generative call rejected by admission control


@dataclass
class RoutedResult:
    """Router outcome"""

    route: TierRoute
    result: Optional[TranslationResult] = None
    match: Optional[PrebuiltMatch] = None
    disallowed_intents: list[str] = field(default_factory=list)
    rate_limit: Optional[RateLimitResult] = None  # set when admission control was consulted

    @property
    def is_rate_limited(self) -> bool:
        return self.route == TierRoute.RATE_LIMITED
