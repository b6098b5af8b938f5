import logging
import os

import sentry_sdk
from sentry_sdk.integrations.logging import LoggingIntegration

from sg_sync import __version__


def setup_sentry(sentry_dsn=None, debug=False):
    sentry_dsn = sentry_dsn or os.environ.get("SENTRY_DSN")
    if not sentry_dsn:
        return False
    sentry_sdk.init(
        dsn=sentry_dsn,
        integrations=[
            LoggingIntegration(
                level=logging.DEBUG if debug else logging.INFO,
                event_level=logging.ERROR,
            ),
        ],
        attach_stacktrace=True,
        send_default_pii=False,
        release=os.environ.get("RELEASE", f"sg-sync@{__version__}"),
        environment=os.environ.get("ENVIRONMENT", "local"),
    )
    return True
