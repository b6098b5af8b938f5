import os

from dotenv import load_dotenv

from sg_sync.errors import UsageError
from sg_sync.public_ip import IP_SERVICE_URL


def load_env(directory=None):
    env_path = os.path.join(directory or os.getcwd(), ".env")
    load_dotenv(env_path, override=False)


def split_values(raw):
    """Split a comma separated flag value, dropping blank entries."""
    if not raw:
        return []
    return [v.strip() for v in raw.split(",") if v.strip()]


class SyncConfig:
    def __init__(
        self,
        description,
        group_ids=None,
        tag_names=None,
        profile="default",
        region=None,
        ip_url=IP_SERVICE_URL,
        max_workers=10,
        debug=False,
    ):
        self.description = (description or "").strip()
        self.group_ids = list(group_ids or [])
        self.tag_names = list(tag_names or [])
        self.profile = profile or "default"
        self.region = region or None
        self.ip_url = ip_url or IP_SERVICE_URL
        self.max_workers = max_workers
        self.debug = debug
        self.validate()

    def validate(self):
        if not self.description:
            raise UsageError("--my-name is required")
        if self.group_ids and self.tag_names:
            raise UsageError("please use either --sg-id OR --sg-tag-name, not both")
        if not self.group_ids and not self.tag_names:
            raise UsageError(
                "you must provide at least one Security Group identifier via --sg-id or --sg-tag-name"
            )
        if self.max_workers is not None and self.max_workers < 1:
            raise UsageError("--max-workers must be at least 1")

    @classmethod
    def from_flags(cls, my_name, sg_id=None, sg_tag_name=None, **kwargs):
        if sg_id and sg_tag_name:
            raise UsageError("please use either --sg-id OR --sg-tag-name, not both")
        group_ids = split_values(sg_id)
        tag_names = split_values(sg_tag_name)
        if sg_id and not group_ids:
            raise UsageError("--sg-id flag provided but contained no valid IDs after parsing")
        if sg_tag_name and not tag_names:
            raise UsageError("--sg-tag-name flag provided but contained no valid tag names after parsing")
        return cls(my_name, group_ids=group_ids, tag_names=tag_names, **kwargs)
