import uuid

import pytest

from vidtube.web.app.errors import InvalidInput
from vidtube.web.app.services import queries


class TestPagination:

    def test_second_page_skips_first_page(self):
        assert queries.pagination(2, 10) == (10, 10)

    def test_first_page(self):
        assert queries.pagination(1, 25) == (0, 25)

    @pytest.mark.parametrize("page,limit", [(0, 10), (-1, 10), (1, 0), (1, 101)])
    def test_rejects_out_of_range_values(self, page, limit):
        with pytest.raises(InvalidInput):
            queries.pagination(page, limit, max_limit=100)


class TestVideoListingQuery:

    def test_no_ordering_without_sort_field(self):
        sql = str(queries.video_listing_query(0, 10))
        assert "ORDER BY" not in sql

    def test_ascending_sort(self):
        sql = str(queries.video_listing_query(0, 10, sort_by="title", sort_type="asc"))
        assert "ORDER BY videos.title ASC" in sql

    def test_any_other_sort_type_descends(self):
        sql = str(queries.video_listing_query(0, 10, sort_by="views", sort_type="whatever"))
        assert "ORDER BY videos.views DESC" in sql

    def test_sort_field_whitelist(self):
        with pytest.raises(InvalidInput):
            queries.video_listing_query(0, 10, sort_by="password_hash")

    def test_filters_and_projection(self):
        sql = str(queries.video_listing_query(0, 10, query="cats", owner_id=uuid.uuid4()))
        assert "lower(videos.title) LIKE" in sql
        assert "videos.owner_id =" in sql
        assert "users.password_hash" not in sql
        assert "users.email" not in sql


class TestRowShapes:

    def test_playlist_row_counts_videos(self):
        row = {
            "id": uuid.uuid4(), "name": "Favorites", "description": "d",
            "created_at": None, "updated_at": None,
            "owner_id": uuid.uuid4(), "owner_username": "alice", "owner_avatar": None,
        }
        shaped = queries.playlist_row(row, [{"id": 1}, {"id": 2}])
        assert shaped["totalVideos"] == 2
        assert shaped["owner"]["username"] == "alice"
