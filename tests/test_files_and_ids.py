"""Tests for the archive, identifier and name checks."""

from feed_canon import RawFeed
from feed_canon.codebook.generic import ObjectType
from feed_validator.checks.files import check_file_presence
from feed_validator.checks.identifiers import (
    check_duplicate_ids,
    check_ids_ascii,
    check_missing_ids,
)
from feed_validator.checks.names import check_names
from feed_validator.index import ModelIndex
from feed_validator.issues import IssueKind
from feed_validator.rules import RuleConfig
from tests.fixtures import (
    build_feed,
    create_agency,
    create_feed_info,
    create_route,
    create_stop,
    default_tables,
    frame,
)

FEED_FILES = [
    "agency.txt",
    "routes.txt",
    "trips.txt",
    "stops.txt",
    "stop_times.txt",
    "calendar.txt",
]


def _run(check, feed):
    return check(ModelIndex.build(feed), RuleConfig())


class TestFilePresence:
    """Mandatory and foreign files."""

    def test_complete_archive(self):
        """An archive with every mandatory file has no issue."""
        assert _run(check_file_presence, build_feed(files=FEED_FILES)) == []

    def test_missing_mandatory_file(self):
        """Each missing mandatory file is reported."""
        files = [f for f in FEED_FILES if f != "stop_times.txt"]
        issues = _run(check_file_presence, build_feed(files=files))

        assert len(issues) == 1
        assert issues[0].kind == IssueKind.MISSING_MANDATORY_FILE
        assert issues[0].object_id == "stop_times.txt"
        assert issues[0].object_type == ObjectType.FILE
        assert issues[0].details == "The mandatory file was not found"

    def test_feed_built_from_tables(self):
        """Without a file list, the tables present stand for the files."""
        frames = {
            name: frame(records)
            for name, records in default_tables().items()
            if records is not None
        }
        assert _run(check_file_presence, RawFeed(**frames)) == []

    def test_extra_file(self):
        """Files foreign to the format are reported."""
        issues = _run(
            check_file_presence,
            build_feed(files=[*FEED_FILES, "notes.pdf", "shapes.txt"]),
        )

        assert [(i.kind, i.object_id) for i in issues] == [
            (IssueKind.EXTRA_FILE, "notes.pdf")
        ]

    def test_files_in_sub_folder(self):
        """Files inside a folder of the archive are recognized."""
        files = ["gtfs/", *(f"gtfs/{f}" for f in FEED_FILES)]
        assert _run(check_file_presence, build_feed(files=files)) == []


class TestDuplicateIds:
    """Identifiers shared by several records."""

    def test_one_issue_per_identifier(self):
        """A duplicated id is reported once with its multiplicity."""
        stops = default_tables()["stops"]
        stops.extend([create_stop("B", 48.9, 2.4), create_stop("B", 48.9, 2.5)])
        issues = _run(check_duplicate_ids, build_feed(stops=stops))

        assert len(issues) == 1
        assert issues[0].kind == IssueKind.DUPLICATE_OBJECT_ID
        assert issues[0].object_id == "B"
        assert issues[0].object_type == ObjectType.STOP
        assert issues[0].details == "3 objects share this identifier"

    def test_empty_ids_ignored(self):
        """Missing ids are not duplicates of each other."""
        routes = [create_route(""), create_route(""), create_route("R1")]
        assert _run(check_duplicate_ids, build_feed(routes=routes)) == []


class TestMissingIds:
    """Records without identifier."""

    def test_missing_stop_id(self):
        """A stop without id is reported."""
        stops = [*default_tables()["stops"], create_stop("", 48.9, 2.4)]
        issues = _run(check_missing_ids, build_feed(stops=stops))

        assert [(i.kind, i.object_type) for i in issues] == [
            (IssueKind.MISSING_ID, ObjectType.STOP)
        ]

    def test_single_agency_may_omit_id(self):
        """The id of a lone agency is optional."""
        feed = build_feed(agency=[create_agency(agency_id="")])
        assert _run(check_missing_ids, feed) == []

    def test_agency_id_needed_with_several_agencies(self):
        """With several agencies each needs an id."""
        feed = build_feed(
            agency=[create_agency(agency_id=""), create_agency(agency_id="A2")]
        )
        issues = _run(check_missing_ids, feed)

        assert [i.object_type for i in issues] == [ObjectType.AGENCY]


class TestAsciiIds:
    """Identifiers with non-ASCII characters."""

    def test_non_ascii_stop_id(self):
        """Accented identifiers are reported."""
        stops = [*default_tables()["stops"], create_stop("Café", 48.9, 2.4)]
        issues = _run(check_ids_ascii, build_feed(stops=stops))

        assert [(i.kind, i.object_id) for i in issues] == [
            (IssueKind.ID_NOT_ASCII, "Café")
        ]


class TestNames:
    """Objects without a name."""

    def test_clean_feed(self):
        """The reference feed names everything."""
        assert _run(check_names, build_feed()) == []

    def test_route_without_names(self):
        """A route needs a short or a long name."""
        feed = build_feed(
            routes=[create_route(route_short_name="", route_long_name="")]
        )
        issues = _run(check_names, feed)

        assert [(i.kind, i.object_id) for i in issues] == [
            (IssueKind.MISSING_NAME, "R1")
        ]

    def test_stop_names(self):
        """Stop points need a name, generic nodes do not."""
        stops = [
            *default_tables()["stops"],
            create_stop("D", 48.9, 2.4, stop_name=""),
            create_stop(
                "N", 48.9, 2.4, stop_name="", location_type=3,
                parent_station="station",
            ),
        ]
        issues = _run(check_names, build_feed(stops=stops))

        assert [i.object_id for i in issues] == ["D"]

    def test_publisher_name(self):
        """The feed publisher needs a name."""
        feed = build_feed(feed_info=[create_feed_info(feed_publisher_name="")])
        issues = _run(check_names, feed)

        assert len(issues) == 1
        assert issues[0].object_type == ObjectType.FEED_INFO
