"""Timekeeping package.

Feature modules (entries, timesheets, leave, payroll, work_calendar) each
carry a model, a repository contract, a record-store implementation, a
service and a thin Flask controller.
"""
