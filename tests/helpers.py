from botocore.exceptions import ClientError


def client_error(code, operation="DescribeSecurityGroups"):
    return ClientError({"Error": {"Code": code, "Message": code}}, operation)


def managed_rule(*ranges, protocol="tcp", from_port=0, to_port=65535):
    return {
        "IpProtocol": protocol,
        "FromPort": from_port,
        "ToPort": to_port,
        "IpRanges": [{"CidrIp": cidr, "Description": desc} for cidr, desc in ranges],
    }


def group(group_id, *rules):
    return {"SecurityGroups": [{"GroupId": group_id, "IpPermissions": list(rules)}]}
