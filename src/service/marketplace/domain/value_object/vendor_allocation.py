import attrs


@attrs.define(frozen=True)
class VendorAllocation:
    """Tickets drawn from one vendor's pool inventory during a purchase"""

    vendor_id: str
    count: int
