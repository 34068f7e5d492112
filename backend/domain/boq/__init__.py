"""
BOQ Domain - Bill of Quantities.

This domain handles the priced work-item tree of a construction project:
- BOQ items nest under parents via dotted codes (1, 1.2, 1.2.3)
- Leaf items with a quantity are the ones a WIR can be raised against
- Breakdown items split a BOQ item into percentage/value sub-rules
"""
