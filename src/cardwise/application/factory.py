"""
Review Service Factory
Centralizes wiring the configured store into a ReviewService.
"""

from cardwise.application.config import AppConfig
from cardwise.application.review_service import ReviewService
from cardwise.domain.scheduling.ports import KeyValueStore
from cardwise.infrastructure.adapters.json_store import JsonFileStore


def get_store(config: AppConfig) -> KeyValueStore:
    """
    Returns the store backing the configured card file.
    """
    return JsonFileStore(config.store_path)


def get_review_service(config: AppConfig, strict: bool | None = None) -> ReviewService:
    """
    Returns a ReviewService over the configured store.

    ``strict`` overrides config.strict_outcomes for a single invocation.
    """
    return ReviewService(
        get_store(config),
        strict_outcomes=config.strict_outcomes if strict is None else strict,
    )
