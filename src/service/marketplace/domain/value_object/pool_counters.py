import attrs


@attrs.define(frozen=True)
class PoolCounters:
    """Copy of the controller's counters; also used to stage a rebuild before swapping it in"""

    available_tickets: int = 0
    vendor_available: dict[str, int] = attrs.field(factory=dict)
    vendor_sold: dict[str, int] = attrs.field(factory=dict)
    customer_remaining: dict[str, int] = attrs.field(factory=dict)

    def is_balanced(self) -> bool:
        return self.available_tickets == sum(self.vendor_available.values())
