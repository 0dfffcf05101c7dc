"""Checks on agencies."""

from feed_validator.index import ModelIndex
from feed_validator.issues import Issue, IssueKind
from feed_validator.rules import RuleConfig

from . import check
from .formats import valid_language, valid_timezone, valid_url


@check(requires=("agency",), on_error=IssueKind.INVALID_URL)
def check_agencies(index: ModelIndex, rules: RuleConfig) -> list[Issue]:  # noqa: ARG001
    """Report agencies with a missing or invalid url, timezone or language."""
    issues = []
    for agency in index.records["agency"]:
        if not agency.agency_url:
            issues.append(Issue.for_object(IssueKind.MISSING_URL, agency))
        elif not valid_url(agency.agency_url):
            issues.append(
                Issue.for_object(IssueKind.INVALID_URL, agency).with_details(
                    f"The agency_url (in agency.txt) {agency.agency_url} "
                    "is invalid"
                )
            )

        if not valid_timezone(agency.agency_timezone):
            issues.append(
                Issue.for_object(IssueKind.INVALID_TIMEZONE, agency)
                .with_details(
                    f"The timezone '{agency.agency_timezone}' does not exist"
                )
            )

        if agency.agency_lang and not valid_language(agency.agency_lang):
            issues.append(
                Issue.for_object(IssueKind.INVALID_LANGUAGE, agency)
                .with_details(
                    f"Language code {agency.agency_lang} does not exist"
                )
            )
    return issues
