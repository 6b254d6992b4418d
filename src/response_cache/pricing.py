"""Token pricing for cost bookkeeping.

Prices are USD per 1M tokens as (input, output).
"""

PRICING: dict[str, tuple[float, float]] = {
    "gemini-2.5-flash": (0.15, 0.60),
    "gpt-4o": (2.50, 10.00),
    "claude-sonnet-4-20250514": (3.00, 15.00),
    "claude-opus-4-20250514": (15.00, 75.00),
}


def estimate_cost(model: str | None, input_tokens: int, output_tokens: int) -> float:
    """Estimate the USD cost of a generation call.

    Unknown models are priced at zero rather than guessed.
    """
    in_price, out_price = PRICING.get(model or "", (0.0, 0.0))
    return (input_tokens * in_price / 1_000_000) + (output_tokens * out_price / 1_000_000)
