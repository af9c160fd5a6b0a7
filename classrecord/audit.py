"""Audit trail of actions that change course records.

Records are emitted on the ``classrecord.audit`` logger; attach a handler to
that logger to persist them.

"""

import dataclasses
import datetime
import json
import logging
import typing

logger = logging.getLogger(__name__)

#: maximum size, in bytes, of the serialized ``before``/``after`` payloads
MAX_FIELD_SIZE = 50 * 1024


@dataclasses.dataclass(frozen=True)
class AuditRecord:
    """A single audited action.

    Attributes
    ----------
    action : str
        What was done, e.g. ``"IMPORT_STUDENTS"``.
    module : str
        The area of the application, e.g. ``"courses"``.
    user_id : Optional[str]
        Who did it.
    before, after
        JSON-serializable state before and after the action.
    reason : Optional[str]
        Free-form context.
    timestamp : datetime.datetime
        When the record was made (UTC).

    """

    action: str
    module: str
    user_id: typing.Optional[str] = None
    before: typing.Any = None
    after: typing.Any = None
    reason: typing.Optional[str] = None
    timestamp: datetime.datetime = dataclasses.field(
        default_factory=lambda: datetime.datetime.now(datetime.timezone.utc)
    )

    def to_dict(self) -> dict:
        d = dataclasses.asdict(self)
        d["timestamp"] = self.timestamp.isoformat()
        return d


def sanitize(obj, max_size=MAX_FIELD_SIZE):
    """Replace a payload that is too large, or not serializable, by a marker."""
    if obj is None:
        return obj

    try:
        size = len(json.dumps(obj, default=str).encode("utf8"))
    except (TypeError, ValueError):
        return {"_error": True, "_message": "Failed to serialize object"}

    if size <= max_size:
        return obj

    return {
        "_truncated": True,
        "_size": size,
        "_message": "Object exceeded maximum size limit and was truncated",
    }


def log_action(
    action, module, *, user_id=None, before=None, after=None, reason=None
) -> typing.Optional[AuditRecord]:
    """Record an action in the audit trail.

    Never raises: a failure to build or emit the record is reported on this
    module's logger instead, and `None` is returned.

    Returns
    -------
    Optional[AuditRecord]
        The emitted record.

    """
    if not action or not module:
        logger.error("Audit record requires both an action and a module")
        return None

    try:
        record = AuditRecord(
            action=action,
            module=module,
            user_id=user_id,
            before=sanitize(before),
            after=sanitize(after),
            reason=reason,
        )
        logger.info(
            "%s %s", module, action, extra={"audit": record.to_dict()}
        )
    except Exception:
        logger.exception("Failed to record audit action %s", action)
        return None

    return record
