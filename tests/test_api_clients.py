"""
Tests for the Overpass and notes HTTP clients
"""

from unittest.mock import Mock, patch

import pytest
import requests

from address_survey.config import APIConfig
from address_survey.exceptions import FetchFailure, SubmissionFailure
from address_survey.models import Note
from address_survey.osm.api_client import OverpassAPIClient
from address_survey.osm.notes import NotesAPIClient


def json_response(payload, content_type="application/json"):
    response = Mock()
    response.raise_for_status.return_value = None
    response.json.return_value = payload
    response.headers = {"Content-Type": content_type}
    response.text = str(payload)
    return response


def http_error(status):
    response = Mock()
    response.status_code = status
    response.raise_for_status.side_effect = requests.exceptions.HTTPError(response=response)
    return response


class TestOverpassAPIClient:

    @patch("address_survey.osm.api_client.requests.post")
    def test_posts_query_as_form_data(self, mock_post):
        mock_post.return_value = json_response({"elements": []})
        api = APIConfig()
        
        data = OverpassAPIClient(api).query("[out:json];out;")
        
        assert data == {"elements": []}
        mock_post.assert_called_once()
        args, kwargs = mock_post.call_args
        assert args[0] == api.overpass_url
        assert kwargs["data"] == {"data": "[out:json];out;"}
        assert kwargs["timeout"] == api.request_timeout
        assert kwargs["headers"]["User-Agent"] == api.user_agent

    @patch("address_survey.osm.api_client.requests.post")
    def test_http_error_raises_fetch_failure(self, mock_post):
        mock_post.return_value = http_error(500)
        with pytest.raises(FetchFailure, match="500"):
            OverpassAPIClient(APIConfig()).query("q")
        assert mock_post.call_count == 1

    @patch("address_survey.osm.api_client.time.sleep")
    @patch("address_survey.osm.api_client.requests.post")
    def test_overload_retried_when_configured(self, mock_post, mock_sleep):
        mock_post.side_effect = [http_error(429), json_response({"elements": []})]
        data = OverpassAPIClient(APIConfig(max_retries=2)).query("q")
        assert data == {"elements": []}
        assert mock_post.call_count == 2

    @patch("address_survey.osm.api_client.requests.post")
    def test_overload_not_retried_by_default(self, mock_post):
        mock_post.return_value = http_error(504)
        with pytest.raises(FetchFailure):
            OverpassAPIClient(APIConfig()).query("q")
        assert mock_post.call_count == 1

    @patch("address_survey.osm.api_client.requests.post")
    def test_connection_error_raises_fetch_failure(self, mock_post):
        mock_post.side_effect = requests.exceptions.ConnectionError("no route")
        with pytest.raises(FetchFailure):
            OverpassAPIClient(APIConfig()).query("q")

    @patch("address_survey.osm.api_client.requests.post")
    def test_invalid_json_raises_fetch_failure(self, mock_post):
        response = json_response(None)
        response.json.side_effect = ValueError("Expecting value")
        mock_post.return_value = response
        with pytest.raises(FetchFailure):
            OverpassAPIClient(APIConfig()).query("q")

    @patch("address_survey.osm.api_client.requests.post")
    def test_document_without_elements_raises_fetch_failure(self, mock_post):
        mock_post.return_value = json_response({"remark": "runtime error"})
        with pytest.raises(FetchFailure, match="elements"):
            OverpassAPIClient(APIConfig()).query("q")


class TestNotesAPIClient:

    @patch("address_survey.osm.notes.requests.post")
    def test_posts_form_encoded_note(self, mock_post):
        mock_post.return_value = json_response({"type": "Feature"})
        api = APIConfig()
        
        result = NotesAPIClient(api).post_note(Note(lat=55.5, lon=37.5, text="Lenina, дом № 5"))
        
        assert result == {"type": "Feature"}
        args, kwargs = mock_post.call_args
        assert args[0] == api.notes_url
        assert kwargs["data"] == {"lat": 55.5, "lon": 37.5, "text": "Lenina, дом № 5"}

    @patch("address_survey.osm.notes.requests.post")
    def test_text_response_returned_as_text(self, mock_post):
        mock_post.return_value = json_response(None, content_type="application/xml")
        mock_post.return_value.text = "<osm/>"
        assert NotesAPIClient(APIConfig()).post_note(Note(lat=0, lon=0, text="x")) == "<osm/>"

    @patch("address_survey.osm.notes.requests.post")
    def test_http_error_raises_submission_failure(self, mock_post):
        mock_post.return_value = http_error(409)
        with pytest.raises(SubmissionFailure, match="409"):
            NotesAPIClient(APIConfig()).post_note(Note(lat=0, lon=0, text="x"))

    @patch("address_survey.osm.notes.requests.post")
    def test_timeout_raises_submission_failure(self, mock_post):
        mock_post.side_effect = requests.exceptions.Timeout()
        with pytest.raises(SubmissionFailure):
            NotesAPIClient(APIConfig()).post_note(Note(lat=0, lon=0, text="x"))
