"""Payroll System package.

Feature modules (attendance, compensation, payroll, ledger, reports) keep the
salary rules in pure functions; services wire them to repositories and a thin
Flask controller layer exposes them over HTTP.
"""
