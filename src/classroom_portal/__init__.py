"""Classroom portal package.

This package is organized by feature modules (roster, attendance, assignments, ...)
with a thin Flask controller layer over service/repository layers backed by a
document store.
"""
