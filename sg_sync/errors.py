from enum import Enum

from botocore.exceptions import BotoCoreError, ClientError


class SgSyncError(Exception):
    pass


class UsageError(SgSyncError):
    """Bad or conflicting command line input. Raised before any network call."""


class SetupError(SgSyncError):
    """Address discovery, credential loading or group resolution failed."""


class GroupNotFound(SgSyncError):
    def __init__(self, group_id):
        self.group_id = group_id
        super().__init__(f"security group {group_id} not found")


class TransientAPIError(SgSyncError):
    pass


class MutationFailed(SgSyncError):
    pass


class Cancelled(SgSyncError):
    pass


class ApiError(Enum):
    GROUP_NOT_FOUND = "InvalidGroup.NotFound"
    PERMISSION_NOT_FOUND = "InvalidPermission.NotFound"
    PERMISSION_DUPLICATE = "InvalidPermission.Duplicate"
    OTHER = None


def error_code(error):
    if isinstance(error, ClientError):
        return error.response.get("Error", {}).get("Code", "")
    return ""


def classify(error):
    """Map a botocore error to one of the ApiError kinds.

    Anything that is not a ClientError carrying one of the known EC2 codes
    (including connection errors raised as BotoCoreError) is OTHER.
    """
    if isinstance(error, BotoCoreError):
        return ApiError.OTHER
    code = error_code(error)
    for kind in ApiError:
        if kind.value and kind.value == code:
            return kind
    return ApiError.OTHER
