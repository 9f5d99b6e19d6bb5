"""
Booking preview presentation.

The server computes every amount; this module only lays the numbers out
for the confirm screen.
"""

import math

from homestay.adapters.ports import BookingPreview


def format_rs(amount: float | int | str | None) -> str:
    """Format an amount as "Rs 1,000.00". Missing or non-numeric → "Rs 0.00"."""
    try:
        value = float(amount)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return "Rs 0.00"
    if not math.isfinite(value):
        return "Rs 0.00"
    return f"Rs {value:,.2f}"


def price_lines(preview: BookingPreview) -> list[tuple[str, str]]:
    """(label, amount) rows in display order, ending with the total."""
    nights = "night" if preview.nights == 1 else "nights"
    lines = [(
        f"{format_rs(preview.price_per_night)} × {preview.nights} {nights}",
        format_rs(preview.subtotal),
    )]
    for line in preview.extra_services_lines:
        lines.append((line["name"], format_rs(line["amount"])))
    if preview.extra_services_total and preview.extra_services_total > 0:
        lines.append(("Extra services", format_rs(preview.extra_services_total)))
    # Negative fee = discount
    if preview.fee_label and preview.fee_amount != 0:
        sign = "−" if preview.fee_amount < 0 else "+"
        lines.append((preview.fee_label, f"{sign} {format_rs(abs(preview.fee_amount))}"))
    lines.append((f"Total ({preview.currency})", format_rs(preview.total)))
    return lines


def pay_button_label(preview: BookingPreview) -> str:
    return f"Confirm and pay {format_rs(preview.total)}"
