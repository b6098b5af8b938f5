from unittest.mock import patch

import pytest

from sg_sync.cli import sync
from sg_sync.config import SyncConfig
from sg_sync.errors import SetupError
from tests.helpers import client_error, group, managed_rule


def config(**kwargs):
    return SyncConfig("home", group_ids=["sg-1"], **kwargs)


@patch("sg_sync.cli.ec2_client")
@patch("sg_sync.cli.load_session")
@patch("sg_sync.cli.AddressResolver")
def test_sync_end_to_end(resolver, load_session, ec2_client):
    resolver.return_value.resolve.return_value = "5.6.7.8"
    load_session.return_value.region_name = "eu-west-1"
    client = ec2_client.return_value
    client.describe_security_groups.return_value = group("sg-1", managed_rule(("1.2.3.4/32", "home")))

    target_cidr, region, result = sync(config(profile="work"))

    assert target_cidr == "5.6.7.8/32"
    assert region == "eu-west-1"
    assert result.success_count == 1
    load_session.assert_called_once_with("work", None)
    client.revoke_security_group_ingress.assert_called_once()
    client.authorize_security_group_ingress.assert_called_once()


@patch("sg_sync.cli.load_session")
@patch("sg_sync.cli.AddressResolver")
def test_setup_failure_stops_before_groups(resolver, load_session):
    resolver.return_value.resolve.side_effect = SetupError("no network")

    with pytest.raises(SetupError):
        sync(config())

    load_session.assert_not_called()


@patch("sg_sync.cli.ec2_client")
@patch("sg_sync.cli.load_session")
@patch("sg_sync.cli.AddressResolver")
def test_unknown_group_is_setup_error(resolver, load_session, ec2_client):
    resolver.return_value.resolve.return_value = "5.6.7.8"
    client = ec2_client.return_value
    client.describe_security_groups.side_effect = client_error("InvalidGroup.NotFound")

    with pytest.raises(SetupError, match="not found"):
        sync(config())

    client.revoke_security_group_ingress.assert_not_called()
    client.authorize_security_group_ingress.assert_not_called()
