import ipaddress

from botocore.exceptions import BotoCoreError, ClientError

from sg_sync.errors import (
    ApiError,
    Cancelled,
    GroupNotFound,
    MutationFailed,
    TransientAPIError,
    classify,
)
from sg_sync.format import dumps
from sg_sync.pylog import get_logger

logger = get_logger("security_groups")

MANAGED_PROTOCOL = "tcp"
MANAGED_FROM_PORT = 0
MANAGED_TO_PORT = 65535


class ReconciliationPlan:
    """What one reconciliation has to change on a single group.

    ``revoke`` is an IpPermission carrying only the stale ranges, or None.
    """

    def __init__(self, revoke=None, authorize=True):
        self.revoke = revoke
        self.authorize = authorize

    @property
    def noop(self):
        return self.revoke is None and not self.authorize

    def __repr__(self):
        return f"ReconciliationPlan(revoke={self.revoke!r}, authorize={self.authorize!r})"


FAMILY_KEYS = {
    4: ("IpRanges", "CidrIp"),
    6: ("Ipv6Ranges", "CidrIpv6"),
}


def range_keys(target_cidr):
    return FAMILY_KEYS[ipaddress.ip_network(target_cidr, strict=False).version]


def other_ranges_key(target_cidr):
    ranges_key, _ = range_keys(target_cidr)
    return "IpRanges" if ranges_key == "Ipv6Ranges" else "Ipv6Ranges"


def is_managed(ip_permission):
    return (
        ip_permission.get("IpProtocol") == MANAGED_PROTOCOL
        and ip_permission.get("FromPort") == MANAGED_FROM_PORT
        and ip_permission.get("ToPort") == MANAGED_TO_PORT
    )


def managed_permission(target_cidr, description):
    ranges_key, cidr_key = range_keys(target_cidr)
    return {
        "IpProtocol": MANAGED_PROTOCOL,
        "FromPort": MANAGED_FROM_PORT,
        "ToPort": MANAGED_TO_PORT,
        ranges_key: [
            {
                cidr_key: target_cidr,
                "Description": description,
            },
        ],
    }


def plan_changes(ip_permissions, target_cidr, description):
    """Diff the observed ingress rules against the desired entry.

    Rules are scanned in order. Inside a managed rule the scan stops at the
    first entry matching ``target_cidr``, so stale entries of the same family
    listed after it are left alone. Entries with the description in the other
    address family are always stale. The first rule holding stale entries is
    the only one revoked from.
    """
    ranges_key, cidr_key = range_keys(target_cidr)
    other_key = other_ranges_key(target_cidr)
    authorize = True

    for ip_permission in ip_permissions:
        if not is_managed(ip_permission):
            continue
        stale = []
        for ip_range in ip_permission.get(ranges_key, []):
            if ip_range.get("Description", "") != description:
                continue
            if ip_range.get(cidr_key) == target_cidr:
                authorize = False
                break
            stale.append(ip_range)
        other_stale = [
            r for r in ip_permission.get(other_key, []) if r.get("Description", "") == description
        ]

        if stale or other_stale:
            revoke = {
                "IpProtocol": ip_permission["IpProtocol"],
                "FromPort": ip_permission["FromPort"],
                "ToPort": ip_permission["ToPort"],
            }
            if stale:
                revoke[ranges_key] = stale
            if other_stale:
                revoke[other_key] = other_stale
            return ReconciliationPlan(revoke=revoke, authorize=authorize)
        if not authorize:
            break

    return ReconciliationPlan(revoke=None, authorize=authorize)


def check_cancelled(group_id, cancel_event):
    if cancel_event is not None and cancel_event.is_set():
        raise Cancelled(f"sync of {group_id} cancelled")


def describe_group(client, group_id, cancel_event=None):
    check_cancelled(group_id, cancel_event)
    try:
        response = client.describe_security_groups(GroupIds=[group_id])
    except (ClientError, BotoCoreError) as e:
        if classify(e) is ApiError.GROUP_NOT_FOUND:
            raise GroupNotFound(group_id) from e
        raise TransientAPIError(f"failed to describe security group: {e}") from e

    groups = response.get("SecurityGroups", [])
    if not groups:
        raise GroupNotFound(group_id)
    return groups[0]


def revoke_rule(client, group_id, ip_permission, description, cancel_event=None):
    check_cancelled(group_id, cancel_event)
    logger.info("[%s] Revoking outdated rule(s) for description '%s'", group_id, description)
    logger.debug("[%s] revoke payload: %s", group_id, dumps(ip_permission))
    try:
        client.revoke_security_group_ingress(GroupId=group_id, IpPermissions=[ip_permission])
    except (ClientError, BotoCoreError) as e:
        if classify(e) is ApiError.PERMISSION_NOT_FOUND:
            logger.warning(
                "[%s] Rule to revoke was not found (maybe already deleted): %s", group_id, e
            )
            return
        raise MutationFailed(f"failed to revoke old rule for '{description}': {e}") from e
    logger.info("[%s] Successfully revoked outdated rule(s) for description '%s'", group_id, description)


def authorize_rule(client, group_id, target_cidr, description, cancel_event=None):
    check_cancelled(group_id, cancel_event)
    ip_permission = managed_permission(target_cidr, description)
    logger.info(
        "[%s] Authorizing rule for description '%s' with IP %s", group_id, description, target_cidr
    )
    logger.debug("[%s] authorize payload: %s", group_id, dumps(ip_permission))
    try:
        client.authorize_security_group_ingress(GroupId=group_id, IpPermissions=[ip_permission])
    except (ClientError, BotoCoreError) as e:
        if classify(e) is ApiError.PERMISSION_DUPLICATE:
            logger.info(
                "[%s] Rule for %s already exists (possibly added concurrently). No changes needed.",
                group_id,
                target_cidr,
            )
            return
        raise MutationFailed(f"failed to authorize rule for '{description}': {e}") from e
    logger.info(
        "[%s] Successfully authorized rule for description '%s' with IP %s",
        group_id,
        description,
        target_cidr,
    )


def reconcile(client, group_id, target_cidr, description, cancel_event=None):
    """Converge one group to a single ``description`` entry for ``target_cidr``.

    Reads the group fresh, then issues at most one revoke and one authorize.
    Returns the applied ReconciliationPlan.
    """
    logger.info("[%s] Checking existing rules for description '%s'", group_id, description)
    group = describe_group(client, group_id, cancel_event)
    plan = plan_changes(group.get("IpPermissions", []), target_cidr, description)
    logger.debug("[%s] %r", group_id, plan)

    if plan.noop:
        logger.info(
            "[%s] Found existing rule for description '%s' with correct IP %s. No changes needed.",
            group_id,
            description,
            target_cidr,
        )
        return plan

    if plan.revoke is not None:
        revoke_rule(client, group_id, plan.revoke, description, cancel_event)
    if plan.authorize:
        authorize_rule(client, group_id, target_cidr, description, cancel_event)
    return plan
