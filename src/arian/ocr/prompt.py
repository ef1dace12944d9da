"""Prompt shared by every model backend."""

from __future__ import annotations

RECEIPT_PROMPT = """Look at this receipt image and extract all information as JSON.

Return ONLY valid JSON in this exact format (no markdown, no backticks, no explanation):
{
  "merchant": "Store Name",
  "date": "YYYY-MM-DD",
  "currency": "CAD",
  "items": [
    {"raw": "KIRKLAND ORG EGGS 2DZ", "name": "Organic Eggs 2 Dozen", "qty": 1.0, "unit_price": 8.99}
  ],
  "subtotal": 45.67,
  "tax": 5.94,
  "total": 51.61
}

Rules:
- "raw" is exactly as printed on receipt (e.g., "PC SFT CKIE MCAD")
- "name" is your best guess at the full product name (e.g., "PC Soft Cookie Macadamia")
- "qty" is a number (e.g., 1.0, 1.5, 0.5) and defaults to 1.0 if not specified
- "unit_price" is the price per unit as a number
- "currency" is the 3-letter ISO code (CAD, USD, etc.), inferred from symbols and store location
- "date" is YYYY-MM-DD if visible, otherwise null
- Use null for any values you cannot read
- Do NOT include promotional items with a $0.00 price"""

__all__ = ["RECEIPT_PROMPT"]
