"""NestHR leave policy package.

This package is organized by feature modules (leave_types, entitlements,
leaves, carry_forward, ...) with a thin Flask controller layer and
service/repository layers underneath.
"""
