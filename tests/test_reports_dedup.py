"""
Tests for proximity-based deduplication
"""
from api.reports.reports_dedup import find_merge_target, nearest_pending_report
from api.reports.reports_model import ReportStatus

LAT, LNG = 12.9716, 77.5946


class TestFindMergeTarget:
    """Merge target selection."""

    def test_no_reports(self, db):
        assert find_merge_target(db, LAT, LNG) is None

    def test_match_within_radius(self, db, make_report):
        existing = make_report(lat=LAT, lng=LNG)
        # ~11 m north
        match = find_merge_target(db, LAT + 0.0001, LNG)
        assert match is not None
        assert match.id == existing.id

    def test_no_match_outside_radius(self, db, make_report):
        make_report(lat=LAT, lng=LNG)
        # ~111 m north
        assert find_merge_target(db, LAT + 0.001, LNG) is None

    def test_radius_edges(self, db, make_report):
        make_report(lat=LAT, lng=LNG)
        assert find_merge_target(db, LAT + 0.00044, LNG) is not None  # ~48.9 m
        assert find_merge_target(db, LAT + 0.00046, LNG) is None      # ~51.2 m

    def test_radius_is_strict(self, db, make_report):
        make_report(lat=LAT, lng=LNG)
        _, dist = nearest_pending_report(db, LAT + 0.0003, LNG)
        assert find_merge_target(db, LAT + 0.0003, LNG, radius_km=dist) is None
        assert find_merge_target(db, LAT + 0.0003, LNG, radius_km=dist + 1e-9) is not None

    def test_only_pending_reports_absorb(self, db, make_report):
        make_report(lat=LAT, lng=LNG, status=ReportStatus.in_progress)
        make_report(lat=LAT, lng=LNG, status=ReportStatus.cleaned)
        assert find_merge_target(db, LAT, LNG) is None

    def test_picks_nearest(self, db, make_report):
        make_report(lat=LAT + 0.0003, lng=LNG)
        closer = make_report(lat=LAT + 0.0001, lng=LNG)
        match = find_merge_target(db, LAT, LNG)
        assert match.id == closer.id

    def test_tie_goes_to_lowest_id(self, db, make_report):
        first = make_report(lat=LAT, lng=LNG)
        make_report(lat=LAT, lng=LNG)
        match = find_merge_target(db, LAT, LNG)
        assert match.id == first.id
