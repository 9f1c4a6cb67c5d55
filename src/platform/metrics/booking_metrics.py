from prometheus_client import Counter, Histogram


class BookingMetrics:
    """
    Booking Engine Core Metrics Collector

    Tracks reservation outcomes, slot conflicts, status transitions,
    redemptions and price quotes
    """

    def __init__(self):
        # ========== Reservation Metrics ==========
        self.booking_requests = Counter(
            'booking_requests_total',
            'Total booking creation requests',
            ['source', 'result'],  # result: created/slot_taken/rejected
        )

        self.booking_duration = Histogram(
            'booking_create_duration_seconds',
            'Booking creation processing time',
            ['source'],
            buckets=[0.01, 0.05, 0.1, 0.2, 0.5, 1.0, 2.0, 5.0],
        )

        self.slot_conflicts = Counter(
            'booking_slot_conflicts_total',
            'Reservations or edits that lost a slot to a concurrent booking',
            ['operation'],  # operation: create/edit
        )

        # ========== Lifecycle Metrics ==========
        self.status_transitions = Counter(
            'booking_status_transitions_total',
            'Booking status transitions',
            ['source_status', 'target_status', 'result'],
        )

        # ========== Redemption Metrics ==========
        self.redemptions = Counter(
            'booking_redemptions_total',
            'Promo and referral redemptions',
            ['kind', 'result'],  # kind: promo/referral
        )

        # ========== Pricing Metrics ==========
        self.price_quotes = Counter(
            'booking_price_quotes_total',
            'Price quotes computed',
            ['package_id', 'result'],
        )

    # ========== Helper Methods ==========

    def record_booking(self, *, source: str, result: str, duration: float):
        self.booking_requests.labels(source=source, result=result).inc()
        self.booking_duration.labels(source=source).observe(duration)

    def record_slot_conflict(self, *, operation: str):
        self.slot_conflicts.labels(operation=operation).inc()

    def record_transition(self, *, source_status: str, target_status: str, result: str):
        self.status_transitions.labels(
            source_status=source_status, target_status=target_status, result=result
        ).inc()

    def record_redemption(self, *, kind: str, result: str):
        self.redemptions.labels(kind=kind, result=result).inc()

    def record_price_quote(self, *, package_id: str, result: str):
        self.price_quotes.labels(package_id=package_id, result=result).inc()


# Global metrics instance
metrics = BookingMetrics()
