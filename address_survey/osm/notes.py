"""
OSM notes client

Publishes survey results as public map notes
"""

from typing import Any

import requests
from loguru import logger

from ..config import APIConfig
from ..exceptions import SubmissionFailure
from ..models import Note


class NotesAPIClient:
    """Posts notes to the OpenStreetMap notes API"""
    
    def __init__(self, api_config: APIConfig):
        self.api_config = api_config
        self.notes_url = api_config.notes_url
        self.timeout = api_config.request_timeout
    
    def post_note(self, note: Note) -> Any:
        """
        Publish a note
        
        Args:
            note: Location and text of the note
            
        Returns:
            Parsed JSON body when the server sends JSON, raw text otherwise
            
        Raises:
            SubmissionFailure: On any transport or HTTP error
        """
        headers = {"User-Agent": self.api_config.user_agent}
        logger.info(f"Posting note at ({note.lat:.6f}, {note.lon:.6f}): {note.text!r}")
        
        try:
            response = requests.post(
                self.notes_url,
                data=note.model_dump(),
                headers=headers,
                timeout=self.timeout
            )
            response.raise_for_status()
        except requests.exceptions.HTTPError as e:
            status = e.response.status_code if e.response is not None else None
            logger.error(f"Note submission failed: HTTP {status}")
            raise SubmissionFailure(f"Notes API HTTP error {status}") from e
        except requests.exceptions.RequestException as e:
            logger.error(f"Note submission failed: {e}")
            raise SubmissionFailure(f"Notes API request failed: {e}") from e
        
        if "json" in response.headers.get("Content-Type", ""):
            try:
                return response.json()
            except ValueError:
                logger.warning("Notes API declared JSON but body did not parse")
        return response.text
