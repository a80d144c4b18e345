"""HRM System package.

Organized by feature modules (attendance, leaves, payroll, salary, ...)
with a thin Flask controller layer over service/repository layers.
"""
