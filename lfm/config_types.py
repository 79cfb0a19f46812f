"""Typed configuration dataclasses for lostfound-matcher.

Provides strongly-typed configuration objects that can be used throughout
the library for better type safety and IDE support.
"""
from __future__ import annotations
from dataclasses import dataclass, field, asdict, fields
from typing import Dict, Any, Optional, TYPE_CHECKING

if TYPE_CHECKING:  # pragma: no cover
    from .match.scoring import ScoringConfig


@dataclass
class MatchingConfig:
    """Ranking thresholds and candidate pool safeguards."""
    default_min_score: float = 0.30
    min_cross_enterprise_score: float = 0.40
    min_same_enterprise_score: float = 0.30
    max_candidates_per_item: Optional[int] = None  # None = score the whole pool
    progress_interval: int = 100

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for backward compatibility."""
        return asdict(self)


@dataclass
class ReportingConfig:
    """Batch report configuration."""
    top_matches: int = 10
    system_sample_size: int = 50  # open LOST items scanned by find_best_matches_across_system
    progress_enabled: bool = True

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for backward compatibility."""
        return asdict(self)


@dataclass
class AppConfig:
    """Root configuration with all subsections."""
    log_level: str = "INFO"
    matching: MatchingConfig = field(default_factory=MatchingConfig)
    reporting: ReportingConfig = field(default_factory=ReportingConfig)
    scoring: Dict[str, Any] = field(default_factory=dict)  # overrides for ScoringConfig fields

    def to_dict(self) -> Dict[str, Any]:
        """Convert to nested dictionary.

        Returns:
            Nested dict structure matching config format
        """
        return {
            "log_level": self.log_level,
            "matching": self.matching.to_dict(),
            "reporting": self.reporting.to_dict(),
            "scoring": dict(self.scoring),
        }

    def scoring_config(self) -> ScoringConfig:
        """Build the immutable ScoringConfig from defaults plus overrides.

        Unknown keys are ignored so that stale environment variables do not
        break startup. Tuple-valued fields accept JSON lists.
        """
        from .match.scoring import ScoringConfig
        known = {f.name for f in fields(ScoringConfig)}
        kwargs: Dict[str, Any] = {}
        for key, value in self.scoring.items():
            if key not in known:
                continue
            if isinstance(value, list):
                value = tuple(tuple(v) if isinstance(v, list) else v for v in value)
            kwargs[key] = value
        return ScoringConfig(**kwargs)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> AppConfig:
        """Create typed config from dictionary.

        Args:
            data: Dictionary config (from load_config)

        Returns:
            Typed AppConfig instance
        """
        return cls(
            log_level=data.get("log_level", "INFO"),
            matching=MatchingConfig(**data.get("matching", {})),
            reporting=ReportingConfig(**data.get("reporting", {})),
            scoring=dict(data.get("scoring", {})),
        )


__all__ = [
    "AppConfig",
    "MatchingConfig",
    "ReportingConfig",
]
