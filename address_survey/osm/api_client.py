"""
Overpass API client

Handles communication with Overpass API including:
- Rate limiting
- Retry logic for overloaded servers
- Error handling
"""

import time
import requests
from typing import Dict, Any
from loguru import logger

from ..config import APIConfig
from ..exceptions import FetchFailure


class OverpassAPIClient:
    """Client for interacting with Overpass API"""
    
    def __init__(self, api_config: APIConfig):
        self.api_config = api_config
        self.overpass_url = api_config.overpass_url
        self.timeout = api_config.request_timeout
        self._last_request_time = 0.0
        self._min_request_interval = 2.0
    
    def _rate_limit(self):
        """Ensure we don't exceed rate limits"""
        elapsed = time.time() - self._last_request_time
        if elapsed < self._min_request_interval:
            time.sleep(self._min_request_interval - elapsed)
        self._last_request_time = time.time()
    
    def query(self, query: str) -> Dict[str, Any]:
        """
        Execute Overpass API query
        
        Only 429/504 responses are retried, and only when max_retries > 1.
        
        Args:
            query: Overpass QL query string
            
        Returns:
            JSON response from Overpass API
            
        Raises:
            FetchFailure: If the request fails or the response is not an element document
        """
        self._rate_limit()
        
        headers = {
            "User-Agent": self.api_config.user_agent,
            "Content-Type": "application/x-www-form-urlencoded"
        }
        max_retries = self.api_config.max_retries
        
        for attempt in range(max_retries):
            try:
                response = requests.post(
                    self.overpass_url,
                    data={"data": query},
                    headers=headers,
                    timeout=self.timeout
                )
                response.raise_for_status()
                data = response.json()
            except requests.exceptions.HTTPError as e:
                status = e.response.status_code if e.response is not None else None
                if status in [429, 504] and attempt < max_retries - 1:
                    wait_time = self.api_config.retry_delay * (attempt + 1)
                    logger.warning(f"Overpass {status} (attempt {attempt + 1}/{max_retries}). Retrying in {wait_time}s...")
                    time.sleep(wait_time)
                    continue
                logger.error(f"Overpass query failed: HTTP {status}")
                raise FetchFailure(f"Overpass API HTTP error {status}") from e
            except requests.exceptions.Timeout as e:
                logger.error(f"Overpass query timed out after {self.timeout}s")
                raise FetchFailure(f"Overpass API timeout after {self.timeout}s") from e
            except requests.exceptions.RequestException as e:
                logger.error(f"Overpass request failed: {e}")
                raise FetchFailure(f"Overpass API request failed: {e}") from e
            except ValueError as e:
                logger.error(f"Overpass returned invalid JSON: {e}")
                raise FetchFailure("Overpass API returned invalid JSON") from e
            
            if not isinstance(data, dict) or not isinstance(data.get("elements"), list):
                raise FetchFailure("Overpass API response has no 'elements' array")
            return data
        
        raise FetchFailure(f"Overpass API unavailable after {max_retries} attempts")
