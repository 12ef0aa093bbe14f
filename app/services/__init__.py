"""서비스 패키지 — 비즈니스 로직 계층.

Service package — Business logic layer.
Services translate between API schemas and ORM models, enforce catalog rules
(barcode uniqueness, image limits) and call repositories for DB access.
Routers own the transaction and commit after a service call returns.
"""
