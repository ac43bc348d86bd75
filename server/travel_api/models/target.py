"""Package-or-event target shared by bookings, availability and reviews."""

from dataclasses import dataclass
from typing import Union

from sqlalchemy import and_
from sqlalchemy.sql.elements import ColumnElement


@dataclass(frozen=True)
class PackageTarget:
    """A tour package as the thing being booked or reviewed."""
    id: int

    kind = "package"


@dataclass(frozen=True)
class EventTarget:
    """An event as the thing being booked or reviewed."""
    id: int

    kind = "event"


BookingTarget = Union[PackageTarget, EventTarget]


def target_from_ids(package_id: int | None, event_id: int | None) -> BookingTarget:
    """Build a target from a package/event id pair where exactly one is set."""
    if (package_id is None) == (event_id is None):
        raise ValueError("Exactly one of package_id or event_id must be set")
    if package_id is not None:
        return PackageTarget(package_id)
    return EventTarget(event_id)


class TargetMixin:
    """
    Exposes ``package_id``/``event_id`` columns as a single ``BookingTarget``.

    Mapped classes using this mixin declare both columns themselves and a
    CHECK constraint guaranteeing exactly one of them is set.
    """

    @property
    def target(self) -> BookingTarget:
        return target_from_ids(self.package_id, self.event_id)

    @target.setter
    def target(self, value: BookingTarget) -> None:
        self.package_id = value.id if isinstance(value, PackageTarget) else None
        self.event_id = value.id if isinstance(value, EventTarget) else None

    @classmethod
    def matches_target(cls, target: BookingTarget) -> ColumnElement[bool]:
        """SQL predicate selecting rows for ``target``."""
        if isinstance(target, PackageTarget):
            return and_(cls.package_id == target.id, cls.event_id.is_(None))
        return and_(cls.event_id == target.id, cls.package_id.is_(None))


EXACTLY_ONE_TARGET = "(package_id IS NULL) <> (event_id IS NULL)"
