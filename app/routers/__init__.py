"""
PayDesk - Routers Package

FastAPI route handlers.

Routers:
- auth: Company onboarding, login, current user
- company: Company payroll settings and recurring contributions
- employees: Employee accounts
- transactions: Payroll transactions
- payslips: Payslip preview, PDF and AI narration
- dashboard: Payroll at a glance
- websocket: Realtime change stream
"""
