"""
Small in-process cache for API reads.

Purely an optimisation: every entry can be dropped at any time and the
caller falls back to the loader.
"""
import json
import logging
import time

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 300


class TTLCache:
    def __init__(self, default_ttl=DEFAULT_TTL_SECONDS, clock=time.monotonic):
        self.default_ttl = default_ttl
        self._clock = clock
        self._values = {}
        self._expiry = {}

    @staticmethod
    def make_key(name, params=None):
        # sorted so that {"a": 1, "b": 2} and {"b": 2, "a": 1} share an entry
        return f"{name}_{json.dumps(params or {}, sort_keys=True, default=str)}"

    def _is_valid(self, key):
        expiry = self._expiry.get(key)
        return expiry is not None and self._clock() < expiry

    def get(self, key, default=None):
        if self._is_valid(key):
            logger.debug("cache hit: %s", key)
            return self._values[key]
        logger.debug("cache miss: %s", key)
        self._values.pop(key, None)
        self._expiry.pop(key, None)
        return default

    def set(self, key, value, ttl=None):
        ttl = self.default_ttl if ttl is None else ttl
        self._values[key] = value
        self._expiry[key] = self._clock() + ttl

    def delete(self, key):
        self._values.pop(key, None)
        self._expiry.pop(key, None)

    def cleanup(self):
        """Drop expired entries; returns how many were removed."""
        now = self._clock()
        expired = [key for key, expiry in self._expiry.items() if now >= expiry]
        for key in expired:
            self.delete(key)
        return len(expired)

    def clear(self):
        self._values.clear()
        self._expiry.clear()

    def invalidate_pattern(self, pattern):
        for key in [k for k in self._values if pattern in k]:
            self.delete(key)

    def get_or_load(self, name, loader, params=None, ttl=None):
        key = self.make_key(name, params)
        if self._is_valid(key):
            return self._values[key]

        # loader errors propagate and nothing is cached
        value = loader()
        self.set(key, value, ttl)
        return value

    def stats(self):
        return {"size": len(self._values), "keys": sorted(self._values)}

    def __len__(self):
        return len(self._values)
