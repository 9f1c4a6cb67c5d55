from enum import StrEnum


class BookingStatus(StrEnum):
    PENDING = 'pending'
    CONFIRMED = 'confirmed'
    ON_THE_WAY = 'on_the_way'
    IN_PROGRESS = 'in_progress'
    COMPLETED = 'completed'
    CANCELLED = 'cancelled'

    @property
    def is_active(self) -> bool:
        return self in ACTIVE_STATUSES

    @property
    def is_terminal(self) -> bool:
        return self in TERMINAL_STATUSES


ACTIVE_STATUSES: frozenset[BookingStatus] = frozenset(
    {
        BookingStatus.PENDING,
        BookingStatus.CONFIRMED,
        BookingStatus.ON_THE_WAY,
        BookingStatus.IN_PROGRESS,
    }
)

TERMINAL_STATUSES: frozenset[BookingStatus] = frozenset(
    {BookingStatus.COMPLETED, BookingStatus.CANCELLED}
)

# source -> allowed targets
STATUS_TRANSITIONS: dict[BookingStatus, frozenset[BookingStatus]] = {
    BookingStatus.PENDING: frozenset({BookingStatus.CONFIRMED, BookingStatus.CANCELLED}),
    BookingStatus.CONFIRMED: frozenset({BookingStatus.ON_THE_WAY, BookingStatus.CANCELLED}),
    BookingStatus.ON_THE_WAY: frozenset({BookingStatus.IN_PROGRESS, BookingStatus.CANCELLED}),
    BookingStatus.IN_PROGRESS: frozenset({BookingStatus.COMPLETED, BookingStatus.CANCELLED}),
    BookingStatus.COMPLETED: frozenset(),
    BookingStatus.CANCELLED: frozenset(),
}

# Normal progression, used by the staff terminal "advance" action
STATUS_PROGRESSION: tuple[BookingStatus, ...] = (
    BookingStatus.PENDING,
    BookingStatus.CONFIRMED,
    BookingStatus.ON_THE_WAY,
    BookingStatus.IN_PROGRESS,
    BookingStatus.COMPLETED,
)

# Timestamp attribute stamped on Booking when entering each status
TRANSITION_TIMESTAMP_FIELDS: dict[BookingStatus, str] = {
    BookingStatus.CONFIRMED: 'confirmed_at',
    BookingStatus.ON_THE_WAY: 'started_journey_at',
    BookingStatus.IN_PROGRESS: 'started_at',
    BookingStatus.COMPLETED: 'completed_at',
    BookingStatus.CANCELLED: 'cancelled_at',
}


def can_transition(source: BookingStatus, target: BookingStatus) -> bool:
    return target in STATUS_TRANSITIONS[source]


def next_status(status: BookingStatus) -> BookingStatus | None:
    if status not in STATUS_PROGRESSION or status == STATUS_PROGRESSION[-1]:
        return None
    return STATUS_PROGRESSION[STATUS_PROGRESSION.index(status) + 1]
