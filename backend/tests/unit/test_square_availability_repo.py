"""
Unit tests for the Square availability repository with a mocked HTTP session.
"""

from datetime import date, datetime, timezone
from unittest.mock import Mock

import pytest
import requests

from barberbook.core.exceptions import ExternalAvailabilityError
from barberbook.repositories.square_availability_repo import SquareAvailabilityRepository

DAY = date(2025, 1, 6)


def _response(payload=None, status_code=200, json_error=False) -> Mock:
    response = Mock()
    response.status_code = status_code
    response.text = "error body"
    if json_error:
        response.json.side_effect = ValueError("not json")
    else:
        response.json.return_value = payload
    return response


def _availability(start_at: str, team_member_id: str = "square-team-1") -> dict:
    return {
        "start_at": start_at,
        "location_id": "square-location-1",
        "appointment_segments": [
            {"service_variation_id": "square-catalog-1", "team_member_id": team_member_id}
        ],
    }


@pytest.fixture
def http_session() -> Mock:
    return Mock(spec=requests.Session)


@pytest.fixture
def repo(http_session) -> SquareAvailabilityRepository:
    return SquareAvailabilityRepository(
        access_token="token-123",
        base_url="https://square.test/v2",
        max_pages=3,
        timeout=5,
        session=http_session,
    )


@pytest.mark.unit
@pytest.mark.repositories
class TestSquareAvailabilitySearch:
    def test_single_page_maps_slots(self, repo, http_session):
        http_session.post.return_value = _response(
            {"availabilities": [_availability("2025-01-06T17:00:00Z")]}
        )

        slots = repo.search("square-location-1", "square-catalog-1", None, DAY)

        assert len(slots) == 1
        assert slots[0].start_at == datetime(2025, 1, 6, 17, 0, tzinfo=timezone.utc)
        assert slots[0].team_member_ref == "square-team-1"

    def test_request_shape(self, repo, http_session):
        http_session.post.return_value = _response({"availabilities": []})

        repo.search("square-location-1", "square-catalog-1", "square-team-1", DAY)

        args, kwargs = http_session.post.call_args
        assert args[0] == "https://square.test/v2/bookings/availability/search"
        assert kwargs["headers"]["Authorization"] == "Bearer token-123"
        assert "Square-Version" in kwargs["headers"]
        assert kwargs["timeout"] == 5
        query_filter = kwargs["json"]["query"]["filter"]
        assert query_filter["location_id"] == "square-location-1"
        assert query_filter["segment_filters"] == [
            {
                "service_variation_id": "square-catalog-1",
                "team_member_id_filter": {"any": ["square-team-1"]},
            }
        ]
        assert query_filter["start_at_range"] == {
            "start_at": "2025-01-06T00:00:00Z",
            "end_at": "2025-01-07T00:00:00Z",
        }
        assert "cursor" not in kwargs["json"]

    def test_staff_filter_omitted_without_staff(self, repo, http_session):
        http_session.post.return_value = _response({})

        repo.search("square-location-1", "square-catalog-1", None, DAY)

        segment = http_session.post.call_args.kwargs["json"]["query"]["filter"]["segment_filters"][0]
        assert segment == {"service_variation_id": "square-catalog-1"}

    def test_follows_cursor_across_pages(self, repo, http_session):
        http_session.post.side_effect = [
            _response({"availabilities": [_availability("2025-01-06T17:00:00Z")], "cursor": "c1"}),
            _response({"availabilities": [_availability("2025-01-06T17:30:00Z")]}),
        ]

        slots = repo.search("loc", "svc", None, DAY)

        assert [s.start_at.minute for s in slots] == [0, 30]
        assert http_session.post.call_count == 2
        assert http_session.post.call_args_list[1].kwargs["json"]["cursor"] == "c1"

    def test_stops_at_max_pages(self, repo, http_session):
        http_session.post.return_value = _response(
            {"availabilities": [_availability("2025-01-06T17:00:00Z")], "cursor": "more"}
        )

        slots = repo.search("loc", "svc", None, DAY)

        assert http_session.post.call_count == 3
        assert len(slots) == 3

    def test_stops_when_page_is_empty_even_with_cursor(self, repo, http_session):
        http_session.post.return_value = _response({"availabilities": [], "cursor": "dangling"})

        assert repo.search("loc", "svc", None, DAY) == []
        assert http_session.post.call_count == 1


@pytest.mark.unit
@pytest.mark.repositories
class TestSquareAvailabilityErrors:
    def test_transport_error(self, repo, http_session):
        http_session.post.side_effect = requests.ConnectionError("down")

        with pytest.raises(ExternalAvailabilityError, match="Request error"):
            repo.search("loc", "svc", None, DAY)

    def test_non_200_status(self, repo, http_session):
        http_session.post.return_value = _response({}, status_code=401)

        with pytest.raises(ExternalAvailabilityError, match="status 401"):
            repo.search("loc", "svc", None, DAY)

    def test_malformed_json(self, repo, http_session):
        http_session.post.return_value = _response(json_error=True)

        with pytest.raises(ExternalAvailabilityError, match="Malformed"):
            repo.search("loc", "svc", None, DAY)

    def test_entry_without_start_at(self, repo, http_session):
        http_session.post.return_value = _response({"availabilities": [{"location_id": "loc"}]})

        with pytest.raises(ExternalAvailabilityError, match="start_at"):
            repo.search("loc", "svc", None, DAY)

    def test_later_page_failure_keeps_earlier_slots(self, repo, http_session):
        http_session.post.side_effect = [
            _response({"availabilities": [_availability("2025-01-06T17:00:00Z")], "cursor": "c1"}),
            requests.ConnectionError("reset"),
        ]

        slots = repo.search("loc", "svc", None, DAY)

        assert [s.start_at.hour for s in slots] == [17]
        assert http_session.post.call_count == 2

    def test_later_page_error_status_keeps_earlier_slots(self, repo, http_session):
        http_session.post.side_effect = [
            _response({"availabilities": [_availability("2025-01-06T17:00:00Z")], "cursor": "c1"}),
            _response({}, status_code=500),
        ]

        assert len(repo.search("loc", "svc", None, DAY)) == 1
