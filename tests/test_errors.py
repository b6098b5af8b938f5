from botocore.exceptions import EndpointConnectionError

from sg_sync.errors import ApiError, GroupNotFound, classify, error_code
from tests.helpers import client_error


def test_classify_known_codes():
    assert classify(client_error("InvalidGroup.NotFound")) is ApiError.GROUP_NOT_FOUND
    assert classify(client_error("InvalidPermission.NotFound")) is ApiError.PERMISSION_NOT_FOUND
    assert classify(client_error("InvalidPermission.Duplicate")) is ApiError.PERMISSION_DUPLICATE


def test_classify_everything_else_is_other():
    assert classify(client_error("UnauthorizedOperation")) is ApiError.OTHER
    assert classify(client_error("")) is ApiError.OTHER
    assert classify(EndpointConnectionError(endpoint_url="https://ec2")) is ApiError.OTHER


def test_error_code():
    assert error_code(client_error("RequestLimitExceeded")) == "RequestLimitExceeded"
    assert error_code(ValueError("nope")) == ""


def test_group_not_found_message():
    e = GroupNotFound("sg-1")
    assert e.group_id == "sg-1"
    assert "sg-1" in str(e)
