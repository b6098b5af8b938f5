import boto3
from botocore.exceptions import BotoCoreError, ProfileNotFound

from sg_sync.errors import SetupError
from sg_sync.pylog import get_logger

logger = get_logger("session")


def load_session(profile_name="default", region_name=None):
    # "default" goes through the normal credential chain so env vars,
    # instance roles and SSO settings work without a config file
    explicit_profile = profile_name if profile_name and profile_name != "default" else None
    try:
        session = boto3.session.Session(profile_name=explicit_profile, region_name=region_name)
    except ProfileNotFound as e:
        raise SetupError(f"failed to load AWS configuration for profile '{profile_name}': {e}") from e

    try:
        credentials = session.get_credentials()
    except BotoCoreError as e:
        raise SetupError(f"failed to load AWS credentials for profile '{profile_name}': {e}") from e
    if credentials is None:
        raise SetupError(f"no AWS credentials found for profile '{profile_name}'")

    logger.info("Loaded AWS configuration using profile: %s", profile_name)
    if not session.region_name:
        logger.warning(
            "AWS region not specified in profile or environment; EC2 calls will fail without one"
        )
    else:
        logger.info("Using AWS Region: %s", session.region_name)
    return session


def ec2_client(session):
    try:
        return session.client("ec2")
    except BotoCoreError as e:
        raise SetupError(f"failed to create EC2 client: {e}") from e
