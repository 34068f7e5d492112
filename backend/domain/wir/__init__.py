"""
WIR Domain - Work Inspection Requests.

This domain handles the inspection workflow:
- Sequential WIR numbering
- Result submission and amount calculation
- Revision chains for rejected WIRs
- Financial summaries and monthly invoices
"""
