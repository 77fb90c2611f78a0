"""Tests for listarr/models.py"""

import pytest

from listarr.models import (
    AddDefaults,
    CandidateRecord,
    ExternalIds,
    ListItem,
    Reason,
    Source,
    SyncOutcome,
    Target,
    normalize_imdb_id,
    parse_id_spec,
)


class TestTargetParse:
    """Tests for Target.parse()"""

    @pytest.mark.parametrize("value,expected", [
        ("radarr", Target.RADARR),
        ("Movies", Target.RADARR),
        (" sonarr ", Target.SONARR),
        ("tv", Target.SONARR),
    ])
    def test_aliases(self, value, expected):
        assert Target.parse(value) is expected

    def test_unknown_target_raises(self):
        with pytest.raises(ValueError, match="Unknown target"):
            Target.parse("lidarr")


class TestParseIdSpec:
    """Tests for parse_id_spec()"""

    def test_imdb_prefix(self):
        item = parse_id_spec("imdb:tt0111161")
        assert item.source is Source.IMDB
        assert item.external_id == "tt0111161"

    def test_tmdb_prefix(self):
        item = parse_id_spec("TMDB:278")
        assert item.source is Source.TMDB
        assert item.external_id == "278"

    def test_bare_id_is_imdb(self):
        assert parse_id_spec("tt0903747").source is Source.IMDB

    def test_unknown_prefix_raises(self):
        with pytest.raises(ValueError, match="Unknown id source"):
            parse_id_spec("tvdb:81189")

    def test_empty_id_raises(self):
        with pytest.raises(ValueError):
            parse_id_spec("imdb:")


class TestListItem:
    """Tests for ListItem serialization"""

    def test_string_source_is_coerced(self):
        item = ListItem(source="tmdb", external_id=" 550 ")
        assert item.source is Source.TMDB
        assert item.external_id == "550"
        assert item.spec == "tmdb:550"

    def test_to_dict_omits_empty_added_by(self):
        item = ListItem(source=Source.IMDB, external_id="tt0111161", added_at="2024-01-01T00:00:00+00:00")
        assert item.to_dict() == {
            'source': 'imdb', 'id': 'tt0111161', 'added_at': '2024-01-01T00:00:00+00:00'
        }

    def test_from_dict_reads_legacy_keys(self):
        item = ListItem.from_dict({'source': 'imdb', 'id': 'tt1', 'date': '2023-05-01', 'addedBy': 'ana'})
        assert item.added_at == '2023-05-01'
        assert item.added_by == 'ana'

    def test_from_dict_round_trip(self):
        original = ListItem(source=Source.TMDB, external_id="278", added_by="sam")
        assert ListItem.from_dict(original.to_dict()) == original

    def test_from_dict_unknown_source_raises(self):
        with pytest.raises(ValueError):
            ListItem.from_dict({'source': 'netflix', 'id': '1'})


class TestNormalizeImdbId:
    def test_adds_prefix(self):
        assert normalize_imdb_id("0111161") == "tt0111161"

    def test_keeps_prefix(self):
        assert normalize_imdb_id("tt0111161") == "tt0111161"


class TestCandidateRecord:
    """Tests for CandidateRecord helpers"""

    def test_display_title_with_year(self):
        record = CandidateRecord(title="Fight Club", year=1999)
        assert record.display_title == "Fight Club (1999)"

    def test_display_title_without_title(self):
        assert CandidateRecord(title=None).display_title == "Unknown"

    def test_image_url_is_first(self):
        record = CandidateRecord(title="x", image_urls=["https://a/1.jpg", "https://a/2.jpg"])
        assert record.image_url == "https://a/1.jpg"

    def test_to_dict(self):
        record = CandidateRecord(title="Fight Club", year=1999,
                                 external_ids=ExternalIds(tmdb_id=550, imdb_id="tt0137523"),
                                 service_id=12)
        data = record.to_dict()
        assert data['tmdbId'] == 550
        assert data['imdbId'] == "tt0137523"
        assert data['id'] == 12
        assert data['imageUrl'] is None
        assert 'tvdbId' not in data


class TestAddDefaults:
    def test_requires_root(self):
        with pytest.raises(ValueError):
            AddDefaults("", 1)

    @pytest.mark.parametrize("profile", [0, -1, "1", None])
    def test_requires_positive_int_profile(self, profile):
        with pytest.raises(ValueError):
            AddDefaults("/movies", profile)


class TestSyncOutcome:
    """Tests for SyncOutcome.status and to_dict()"""

    def test_added_status(self):
        assert SyncOutcome(item=None, ok=True).status == 'added'

    def test_reason_status(self):
        outcome = SyncOutcome(item=None, ok=False, reason=Reason.EXISTS)
        assert outcome.status == 'exists'

    def test_failure_without_reason_is_error(self):
        assert SyncOutcome(item=None, ok=False).status == 'error'

    def test_to_dict(self):
        item = ListItem(source=Source.IMDB, external_id="tt1", added_at="t")
        outcome = SyncOutcome(item=item, ok=False, reason=Reason.NOT_FOUND, message="Not found")
        assert outcome.to_dict() == {
            'item': {'source': 'imdb', 'id': 'tt1', 'added_at': 't'},
            'ok': False,
            'reason': 'not_found',
            'record': None,
            'message': 'Not found',
        }
