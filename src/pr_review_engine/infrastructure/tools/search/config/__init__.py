from pr_review_engine.infrastructure.tools.search.config.search_settings import SearchSettings

__all__ = ["SearchSettings"]
