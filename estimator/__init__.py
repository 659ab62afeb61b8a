"""
Estimate computation service.

Sections of line items in, resolved amounts, subtotals, tax and total out.
"""
