from concurrent.futures import ThreadPoolExecutor

from botocore.exceptions import BotoCoreError, ClientError

from sg_sync.errors import ApiError, SetupError, UsageError, classify
from sg_sync.pylog import get_logger

logger = get_logger("locator")


def unique(values):
    seen = []
    for value in values:
        if value and value not in seen:
            seen.append(value)
    return seen


def verify_group_id(client, group_id):
    """Return an error string for ``group_id``, or None when it exists."""
    try:
        response = client.describe_security_groups(GroupIds=[group_id])
    except (ClientError, BotoCoreError) as e:
        if classify(e) is ApiError.GROUP_NOT_FOUND:
            return f"ID '{group_id}' not found"
        return f"failed to verify ID '{group_id}': {e}"
    if not response.get("SecurityGroups"):
        return f"ID '{group_id}' not found"
    return None


def verify_group_ids(client, group_ids, max_workers=10):
    group_ids = unique(group_ids)
    logger.info("Attempting to verify %s provided Security Group ID(s)", len(group_ids))

    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        problems = list(executor.map(lambda g: verify_group_id(client, g), group_ids))

    errors = [p for p in problems if p]
    if errors:
        raise SetupError("encountered errors validating SG IDs: " + "; ".join(errors))

    logger.info("Successfully verified %s unique Security Group ID(s)", len(group_ids))
    return group_ids


def find_by_tag_names(client, tag_names):
    tag_names = unique(tag_names)
    logger.info("Searching for Security Groups with tag Name(s): %s", tag_names)

    group_ids = []
    paginator = client.get_paginator("describe_security_groups")
    try:
        for page in paginator.paginate(Filters=[{"Name": "tag:Name", "Values": tag_names}]):
            for sg in page["SecurityGroups"]:
                group_ids.append(sg["GroupId"])
    except (ClientError, BotoCoreError) as e:
        raise SetupError(f"failed to describe security groups with tags {tag_names}: {e}") from e

    group_ids = unique(group_ids)
    if not group_ids:
        logger.warning("No security groups found matching tag Name(s): %s", tag_names)
    else:
        logger.info("Found %s unique Security Group ID(s) matching tags", len(group_ids))
    return group_ids


def resolve(client, group_ids=None, tag_names=None, max_workers=10):
    """Turn explicit IDs or tag Name values into a sorted list of verified IDs.

    Exactly one of ``group_ids`` and ``tag_names`` may be given.
    """
    group_ids = unique(group_ids or [])
    tag_names = unique(tag_names or [])
    if group_ids and tag_names:
        raise UsageError("use either security group IDs or tag names, not both")
    if not group_ids and not tag_names:
        raise UsageError("at least one security group ID or tag name is required")

    if group_ids:
        resolved = verify_group_ids(client, group_ids, max_workers=max_workers)
    else:
        resolved = find_by_tag_names(client, tag_names)

    if not resolved:
        raise SetupError("no valid security groups found or resolved")
    return sorted(resolved)
