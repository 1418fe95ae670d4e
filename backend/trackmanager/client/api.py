"""HTTP client for the track manager API"""
from typing import Any, Dict, List, Mapping, Optional, Sequence
import logging

import requests

from trackmanager.config import settings

logger = logging.getLogger(__name__)

# Filter keys as the API expects them in the query string
FILTER_PARAMS = ("search", "bpmMin", "bpmMax", "key", "genre")


class ApiError(Exception):
    """Non-2xx response or transport failure talking to the API"""

    def __init__(self, status_code: Optional[int], detail: Any):
        self.status_code = status_code
        self.detail = detail
        prefix = f"HTTP {status_code}" if status_code is not None else "Request failed"
        super().__init__(f"{prefix}: {detail}")


class TrackManagerClient:
    """Thin wrapper over the REST API; every method returns decoded JSON"""

    def __init__(
        self,
        base_url: Optional[str] = None,
        session: Optional[requests.Session] = None,
        timeout: Optional[float] = None,
    ):
        self.base_url = (base_url or settings.api_url).rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout if timeout is not None else settings.request_timeout

    # Tracks

    def list_tracks(self, filters: Optional[Mapping[str, Any]] = None) -> List[dict]:
        params = {
            name: value
            for name, value in (filters or {}).items()
            if name in FILTER_PARAMS and value not in (None, "")
        }
        return self._request("GET", "/tracks", params=params)

    def get_track(self, track_id: str) -> dict:
        return self._request("GET", f"/tracks/{track_id}")

    def create_track(self, fields: Mapping[str, Any]) -> dict:
        return self._request("POST", "/tracks", json=dict(fields))

    def update_track(self, track_id: str, fields: Mapping[str, Any]) -> dict:
        return self._request("PUT", f"/tracks/{track_id}", json=dict(fields))

    def delete_track(self, track_id: str) -> dict:
        return self._request("DELETE", f"/tracks/{track_id}")

    # Sets

    def list_sets(self) -> List[dict]:
        return self._request("GET", "/sets")

    def get_set(self, set_id: str) -> dict:
        return self._request("GET", f"/sets/{set_id}")

    def create_set(self, fields: Mapping[str, Any]) -> dict:
        return self._request("POST", "/sets", json=dict(fields))

    def update_set(self, set_id: str, fields: Mapping[str, Any]) -> dict:
        return self._request("PUT", f"/sets/{set_id}", json=dict(fields))

    def delete_set(self, set_id: str) -> dict:
        return self._request("DELETE", f"/sets/{set_id}")

    def add_track_to_set(self, set_id: str, track_id: str) -> dict:
        return self._request("POST", f"/sets/{set_id}/tracks", json={"trackId": track_id})

    def remove_track_from_set(self, set_id: str, track_id: str) -> dict:
        return self._request("DELETE", f"/sets/{set_id}/tracks/{track_id}")

    def reorder_tracks(self, set_id: str, track_ids: Sequence[str]) -> dict:
        return self._request("PUT", f"/sets/{set_id}/reorder", json={"trackIds": list(track_ids)})

    def _request(self, method: str, path: str, **kwargs) -> Any:
        url = f"{self.base_url}{path}"
        try:
            response = self.session.request(method, url, timeout=self.timeout, **kwargs)
            response.raise_for_status()
        except requests.HTTPError as e:
            raise ApiError(e.response.status_code, _error_detail(e.response)) from e
        except requests.RequestException as e:
            logger.error(f"{method} {url} failed: {e}")
            raise ApiError(None, str(e)) from e
        try:
            return response.json()
        except ValueError as e:
            logger.error(f"{method} {url} returned a non-JSON body: {e}")
            raise ApiError(response.status_code, "Response body is not JSON") from e


def _error_detail(response: requests.Response) -> Any:
    try:
        body: Dict[str, Any] = response.json()
    except ValueError:
        return response.text or response.reason
    return body.get("detail", body) if isinstance(body, dict) else body
