"""
Configuration Loader Service - Loads config from GCS with caching.

Summary limits, model selection and CORS origins can be changed by
uploading a new JSON document to the config bucket, without redeploying
the function. Environment variables remain the fallback.
"""
import json
import time
from typing import Any
from google.cloud import storage

from services.logging_service import get_logger


class ConfigLoader:
    """Loads configuration from GCS with local cache and fallback."""

    def __init__(self, bucket_name: str, config_path: str = "config/summary_config.json", cache_ttl: int = 300):
        """
        Initialize the config loader.

        Args:
            bucket_name: GCS bucket name
            config_path: Path to config file in GCS (default: config/summary_config.json)
            cache_ttl: Cache TTL in seconds. 0 disables caching.
        """
        self.bucket_name = bucket_name
        self.config_path = config_path
        self._cache = None
        self._cache_time = None
        self.CACHE_TTL = cache_ttl
        self._client = None

    def _get_storage_client(self):
        """Lazy initialization of storage client."""
        if self._client is None:
            self._client = storage.Client()
        return self._client

    def get_config(self, force_refresh: bool = False) -> dict:
        """
        Returns cached or fresh config from GCS.

        Args:
            force_refresh: If True, bypasses cache and reloads from GCS
        """
        if not force_refresh and self.CACHE_TTL > 0 and self._cache is not None:
            if self._cache_time and (time.time() - self._cache_time) < self.CACHE_TTL:
                return self._cache

        try:
            client = self._get_storage_client()
            bucket = client.bucket(self.bucket_name)
            blob = bucket.blob(self.config_path)

            if not blob.exists():
                get_logger().warning("Config file not found in GCS, using defaults",
                                     config_path=self.config_path)
                return self._get_default_config()

            config = json.loads(blob.download_as_text())

            self._cache = config
            self._cache_time = time.time()

            get_logger().info("Config loaded from GCS", config_path=self.config_path)
            return config

        except Exception as e:
            # Config storage outages must not take the function down
            get_logger().error("Error loading config from GCS", error=str(e))
            return self._cache if self._cache else self._get_default_config()

    def get(self, key_path: str, default: Any = None) -> Any:
        """
        Get nested config value using dot notation.

        Example:
            >>> loader.get('limits.max_requests_per_hour', 10)
        """
        config = self.get_config()
        keys = key_path.split('.')

        value = config
        for key in keys:
            if isinstance(value, dict) and key in value:
                value = value[key]
            else:
                return default

        return value

    def _get_default_config(self) -> dict:
        """Default configuration used when GCS config is unavailable."""
        return {
            "version": "1.0",
            "openai": {
                "model": "gpt-3.5-turbo",
                "timeout_seconds": 60
            },
            "limits": {
                "max_requests_per_hour": 10,
                "max_requests_per_month": 1000
            },
            "retry": {
                "max_attempts": 3,
                "base_delay_seconds": 0.5,
                "backoff_multiplier": 2.0
            },
            "throttle": {
                "min_spacing_seconds": 0.5
            }
        }
