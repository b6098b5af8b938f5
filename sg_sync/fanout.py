import threading
from concurrent.futures import ThreadPoolExecutor, wait

from sg_sync.pylog import get_logger
from sg_sync.security_groups import reconcile

logger = get_logger("fanout")


class BatchResult:
    def __init__(self, group_ids=None):
        # one outcome per group, even when an ID is passed twice
        self.group_ids = list(dict.fromkeys(group_ids or []))
        self.outcomes = {}

    def add_success(self, group_id):
        self.outcomes[group_id] = None

    def add_failure(self, group_id, error):
        self.outcomes[group_id] = error

    @property
    def total(self):
        return len(self.group_ids)

    @property
    def success_count(self):
        return sum(1 for g in self.group_ids if g in self.outcomes and self.outcomes[g] is None)

    @property
    def failures(self):
        return [(g, self.outcomes[g]) for g in self.group_ids if self.outcomes.get(g) is not None]

    @property
    def ok(self):
        return not self.failures


def sync_group(client, group_id, target_cidr, description, cancel_event):
    """Run one reconciliation and hand back ``(group_id, error or None)``."""
    logger.info("[%s] Starting sync", group_id)
    try:
        reconcile(client, group_id, target_cidr, description, cancel_event=cancel_event)
    except Exception as e:
        logger.error("[%s] Error syncing rule: %s", group_id, e)
        return group_id, e
    logger.info("[%s] Sync completed successfully", group_id)
    return group_id, None


def run(client, group_ids, target_cidr, description, max_workers=None, cancel_event=None):
    """Reconcile every group concurrently and collect one outcome per group.

    A failing group never stops its siblings. Interrupting the wait sets
    ``cancel_event``; groups that have not finished then report Cancelled.
    """
    cancel_event = cancel_event or threading.Event()
    result = BatchResult(group_ids)
    if not result.group_ids:
        return result

    logger.info("Starting rule sync process for %s Security Group(s)", result.total)
    executor = ThreadPoolExecutor(max_workers=max_workers or len(result.group_ids))
    try:
        pending = [
            executor.submit(sync_group, client, g, target_cidr, description, cancel_event)
            for g in result.group_ids
        ]
        while pending:
            try:
                done, not_done = wait(pending)
            except KeyboardInterrupt:
                logger.warning("Interrupted, cancelling remaining security group syncs")
                cancel_event.set()
                continue
            for future in done:
                group_id, error = future.result()
                if error is None:
                    result.add_success(group_id)
                else:
                    result.add_failure(group_id, error)
            pending = list(not_done)
    finally:
        executor.shutdown(wait=True)
    return result
