"""Tests for the agency, feed info and fare checks."""

import pytest

from feed_canon.codebook.generic import ObjectType
from feed_validator.checks.agency import check_agencies
from feed_validator.checks.fares import check_fares
from feed_validator.checks.feed_info import check_feed_info
from feed_validator.checks.formats import (
    valid_currency,
    valid_language,
    valid_timezone,
    valid_url,
)
from feed_validator.index import ModelIndex
from feed_validator.issues import IssueKind
from feed_validator.rules import RuleConfig
from tests.fixtures import (
    build_feed,
    create_agency,
    create_fare_attribute,
    create_feed_info,
)


def _run(check, feed):
    return check(ModelIndex.build(feed), RuleConfig())


class TestFormatValidators:
    """URL, timezone, language and currency formats."""

    @pytest.mark.parametrize(
        ("url", "expected"),
        [
            ("https://transit.example.com", True),
            ("http://example.com/path?q=1", True),
            ("www.example.com", False),
            ("ftp://example.com", False),
            ("https://", False),
        ],
    )
    def test_url(self, url, expected):
        """Only fully qualified http(s) URLs are valid."""
        assert valid_url(url) is expected

    @pytest.mark.parametrize(
        ("lang", "expected"),
        [
            ("fr", True),
            ("EN", True),
            ("fra", True),
            ("fr-FR", True),
            ("en_US", True),
            ("xx", False),
            ("french", False),
            ("", False),
        ],
    )
    def test_language(self, lang, expected):
        """Languages are ISO 639 codes or locales."""
        assert valid_language(lang) is expected

    def test_timezone(self):
        """Timezones are IANA names."""
        assert valid_timezone("Europe/Paris")
        assert valid_timezone("America/Los_Angeles")
        assert not valid_timezone("Mars/Olympus_Mons")

    def test_currency(self):
        """Currencies are ISO 4217 codes."""
        assert valid_currency("EUR")
        assert valid_currency("USD")
        assert not valid_currency("EURO")


class TestAgencies:
    """Agency url, timezone and language."""

    def test_clean_feed(self):
        """The reference agency is valid."""
        assert _run(check_agencies, build_feed()) == []

    def test_missing_url(self):
        """An agency needs a url."""
        feed = build_feed(agency=[create_agency(agency_url="")])
        assert [i.kind for i in _run(check_agencies, feed)] == [
            IssueKind.MISSING_URL
        ]

    def test_invalid_url(self):
        """An agency url must be fully qualified."""
        feed = build_feed(agency=[create_agency(agency_url="transit.example")])
        issues = _run(check_agencies, feed)

        assert [i.kind for i in issues] == [IssueKind.INVALID_URL]
        assert issues[0].details == (
            "The agency_url (in agency.txt) transit.example is invalid"
        )

    def test_invalid_timezone(self):
        """An agency timezone must exist."""
        feed = build_feed(agency=[create_agency(agency_timezone="Paris")])
        issues = _run(check_agencies, feed)

        assert [(i.kind, i.object_id) for i in issues] == [
            (IssueKind.INVALID_TIMEZONE, "A1")
        ]

    def test_language_optional(self):
        """The agency language may be left out but not made up."""
        assert _run(
            check_agencies, build_feed(agency=[create_agency(agency_lang=None)])
        ) == []
        issues = _run(
            check_agencies, build_feed(agency=[create_agency(agency_lang="zz")])
        )
        assert [i.kind for i in issues] == [IssueKind.INVALID_LANGUAGE]


class TestFeedInfo:
    """Publisher url and language."""

    def test_clean_feed(self):
        """The reference publisher is valid."""
        assert _run(check_feed_info, build_feed()) == []

    def test_missing_language(self):
        """The feed language is mandatory."""
        feed = build_feed(feed_info=[create_feed_info(feed_lang="")])
        issues = _run(check_feed_info, feed)

        assert [i.kind for i in issues] == [IssueKind.MISSING_LANGUAGE]
        assert issues[0].object_type == ObjectType.FEED_INFO
        assert issues[0].object_name == "Metro Transit"

    def test_invalid_language(self):
        """An unknown language code is reported."""
        feed = build_feed(feed_info=[create_feed_info(feed_lang="xx")])
        issues = _run(check_feed_info, feed)

        assert [i.kind for i in issues] == [IssueKind.INVALID_LANGUAGE]
        assert issues[0].details == "Language code xx does not exist"

    def test_invalid_url(self):
        """The publisher url must be fully qualified."""
        feed = build_feed(
            feed_info=[create_feed_info(feed_publisher_url="example")]
        )
        assert [i.kind for i in _run(check_feed_info, feed)] == [
            IssueKind.INVALID_URL
        ]


class TestFares:
    """Fare price, currency and transfers."""

    def test_valid_fare(self):
        """A priced fare in a real currency is valid."""
        feed = build_feed(fare_attributes=[create_fare_attribute()])
        assert _run(check_fares, feed) == []

    def test_missing_price(self):
        """A blank price is missing."""
        feed = build_feed(
            fare_attributes=[
                create_fare_attribute("F1", price=None),
                create_fare_attribute("F2", price="  "),
            ]
        )
        issues = _run(check_fares, feed)

        assert [(i.kind, i.object_id) for i in issues] == [
            (IssueKind.MISSING_PRICE, "F1"),
            (IssueKind.MISSING_PRICE, "F2"),
        ]

    def test_invalid_currency(self):
        """The currency must be an ISO 4217 code."""
        feed = build_feed(
            fare_attributes=[create_fare_attribute(currency_type="EURO")]
        )
        assert [i.kind for i in _run(check_fares, feed)] == [
            IssueKind.INVALID_CURRENCY
        ]

    def test_invalid_transfers(self):
        """At most two transfers can be declared."""
        feed = build_feed(
            fare_attributes=[
                create_fare_attribute("F1", transfers=2),
                create_fare_attribute("F2", transfers=5),
            ]
        )
        issues = _run(check_fares, feed)

        assert [(i.kind, i.object_id) for i in issues] == [
            (IssueKind.INVALID_TRANSFERS, "F2")
        ]

    def test_negative_transfer_duration(self):
        """A transfer duration cannot be negative."""
        feed = build_feed(
            fare_attributes=[create_fare_attribute(transfer_duration=-60)]
        )
        assert [i.kind for i in _run(check_fares, feed)] == [
            IssueKind.INVALID_TRANSFER_DURATION
        ]
