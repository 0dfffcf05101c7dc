"""Checks on fare attributes."""

from feed_validator.index import ModelIndex
from feed_validator.issues import Issue, IssueKind
from feed_validator.rules import RuleConfig

from . import check
from .formats import valid_currency

# Number of transfers allowed: none, once, twice, or empty for unlimited
VALID_TRANSFERS = {None, 0, 1, 2}


@check(requires=("fare_attributes",), on_error=IssueKind.MISSING_PRICE)
def check_fares(index: ModelIndex, rules: RuleConfig) -> list[Issue]:  # noqa: ARG001
    """Report fares with a missing price or invalid currency or transfers."""
    issues = []
    for fare in index.records["fare_attributes"]:
        if not fare.price.strip():
            issues.append(Issue.for_object(IssueKind.MISSING_PRICE, fare))
        if not valid_currency(fare.currency_type):
            issues.append(
                Issue.for_object(IssueKind.INVALID_CURRENCY, fare).with_details(
                    f"The currency '{fare.currency_type}' does not exist"
                )
            )
        if fare.transfers not in VALID_TRANSFERS:
            issues.append(
                Issue.for_object(IssueKind.INVALID_TRANSFERS, fare)
                .with_details(
                    f"{fare.transfers} is not a valid number of transfers"
                )
            )
        if fare.transfer_duration is not None and fare.transfer_duration < 0:
            issues.append(
                Issue.for_object(
                    IssueKind.INVALID_TRANSFER_DURATION, fare
                ).with_details(
                    f"Negative transfer duration of {fare.transfer_duration}s"
                )
            )
    return issues
