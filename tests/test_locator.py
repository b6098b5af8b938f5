from unittest.mock import MagicMock

import pytest

from sg_sync.errors import SetupError, UsageError
from sg_sync.locator import resolve, unique
from tests.helpers import group

TAG_FILTER = [{"Name": "tag:Name", "Values": ["web", "db"]}]


def test_unique_keeps_order_and_drops_blanks():
    assert unique(["sg-2", "", "sg-1", "sg-2"]) == ["sg-2", "sg-1"]


def test_both_inputs_rejected_without_calls():
    client = MagicMock()
    with pytest.raises(UsageError):
        resolve(client, group_ids=["sg-1"], tag_names=["web"])
    client.describe_security_groups.assert_not_called()


def test_no_inputs_rejected():
    with pytest.raises(UsageError):
        resolve(MagicMock())


def test_explicit_ids_are_verified_and_deduplicated(ec2):
    client, stubber = ec2
    stubber.add_response("describe_security_groups", group("sg-2"), {"GroupIds": ["sg-2"]})
    stubber.add_response("describe_security_groups", group("sg-1"), {"GroupIds": ["sg-1"]})

    assert resolve(client, group_ids=["sg-2", "sg-1", "sg-2"], max_workers=1) == ["sg-1", "sg-2"]


def test_every_bad_id_is_reported(ec2):
    client, stubber = ec2
    stubber.add_client_error("describe_security_groups", service_error_code="InvalidGroup.NotFound")
    stubber.add_response("describe_security_groups", group("sg-ok"), {"GroupIds": ["sg-ok"]})
    stubber.add_client_error("describe_security_groups", service_error_code="UnauthorizedOperation")

    with pytest.raises(SetupError) as excinfo:
        resolve(client, group_ids=["sg-missing", "sg-ok", "sg-denied"], max_workers=1)

    message = str(excinfo.value)
    assert "ID 'sg-missing' not found" in message
    assert "failed to verify ID 'sg-denied'" in message
    assert "sg-ok" not in message


def test_tag_names_are_resolved(ec2):
    client, stubber = ec2
    stubber.add_response(
        "describe_security_groups",
        {
            "SecurityGroups": [{"GroupId": "sg-b"}, {"GroupId": "sg-a"}],
            "NextToken": "page-2",
        },
        {"Filters": TAG_FILTER},
    )
    stubber.add_response(
        "describe_security_groups",
        {"SecurityGroups": [{"GroupId": "sg-a"}]},
        {"Filters": TAG_FILTER, "NextToken": "page-2"},
    )

    assert resolve(client, tag_names=["web", "db", "web"]) == ["sg-a", "sg-b"]


def test_tag_names_matching_nothing_is_setup_error(ec2):
    client, stubber = ec2
    stubber.add_response("describe_security_groups", {"SecurityGroups": []}, {"Filters": TAG_FILTER})

    with pytest.raises(SetupError, match="no valid security groups"):
        resolve(client, tag_names=["web", "db"])


def test_tag_lookup_failure_is_setup_error(ec2):
    client, stubber = ec2
    stubber.add_client_error("describe_security_groups", service_error_code="AuthFailure")

    with pytest.raises(SetupError, match="tags"):
        resolve(client, tag_names=["web", "db"])
