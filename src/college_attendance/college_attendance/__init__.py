"""College attendance service.

This package is organized by feature modules (assignments, attendance,
reports, ...) with a thin Flask controller layer over service/repository
layers.
"""
