from daily_briefing.infrastructure.cache.memory_cache import BriefingCache, CacheEntry

__all__ = ["BriefingCache", "CacheEntry"]
