"""Checks on the feed publisher information."""

from feed_canon.codebook.generic import ObjectType
from feed_canon.models import FeedInfoModel
from feed_validator.index import ModelIndex
from feed_validator.issues import Issue, IssueKind
from feed_validator.rules import RuleConfig

from . import check
from .formats import valid_language, valid_url


def _feed_issue(kind: IssueKind, feed_info: FeedInfoModel) -> Issue:
    return Issue(
        kind=kind,
        object_id="",
        object_type=ObjectType.FEED_INFO,
        object_name=feed_info.display_name,
    )


@check(requires=("feed_info",), on_error=IssueKind.INVALID_URL)
def check_feed_info(index: ModelIndex, rules: RuleConfig) -> list[Issue]:  # noqa: ARG001
    """Report a missing or invalid publisher url or language."""
    issues = []
    for feed_info in index.feed_info:
        if not feed_info.feed_publisher_url:
            issues.append(_feed_issue(IssueKind.MISSING_URL, feed_info))
        elif not valid_url(feed_info.feed_publisher_url):
            issues.append(
                _feed_issue(IssueKind.INVALID_URL, feed_info).with_details(
                    "The feed_publisher_url (in feed_info.txt) "
                    f"{feed_info.feed_publisher_url} is invalid"
                )
            )

        if not feed_info.feed_lang:
            issues.append(_feed_issue(IssueKind.MISSING_LANGUAGE, feed_info))
        elif not valid_language(feed_info.feed_lang):
            issues.append(
                _feed_issue(IssueKind.INVALID_LANGUAGE, feed_info).with_details(
                    f"Language code {feed_info.feed_lang} does not exist"
                )
            )
    return issues
